"""Core services shared by the app: keymap loading."""

from .keymap_manager import KeymapManager

__all__ = ["KeymapManager"]
