"""modaledit - a modal (vim-style) text editor for the terminal."""

from .engine import VimEngine, VimMode

__version__ = "0.1.0"

__all__ = ["VimEngine", "VimMode", "__version__"]
