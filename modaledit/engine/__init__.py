"""Modal cursor-motion engine.

This module interprets vim-style keystrokes against a plain-text buffer
and computes new cursor offsets. It knows nothing about rendering; a
host feeds it key events and reads back the cursor and mode.

Architecture:
    VimEngine - Main controller that handles key events
    VimState - Tracks mode, count, pending key and last char search
    motions - Pure (text, offset, count) -> offset functions
    VimKeymapConfig - Configurable key bindings

Usage:
    from modaledit.engine import VimEngine

    engine = VimEngine()
    engine.set_mode_callback(on_mode_change)

    # Once per tick:
    cursor = engine.handle_tick(events, text, cursor)
"""

from .address import line_col_to_offset, offset_to_line_col
from .classify import RunKind, char_class
from .command import CommandAction, CommandResult, VimCommandHandler
from .engine import KeyEvent, KeyResult, VimEngine
from .exceptions import KeymapError
from .keymap import (
    BindingType,
    DefaultVimKeymapProvider,
    VimBinding,
    VimKeymapConfig,
    VimKeymapProvider,
    get_vim_keymap,
    keymap_from_dict,
    reset_vim_keymap,
    set_vim_keymap,
)
from .state import CharSearch, CountAccumulator, SearchDirection, SearchKind, VimMode, VimState

__all__ = [
    # Core
    "VimEngine",
    "VimState",
    "VimMode",
    "KeyEvent",
    "KeyResult",
    # Addressing
    "offset_to_line_col",
    "line_col_to_offset",
    "RunKind",
    "char_class",
    # State types
    "CountAccumulator",
    "CharSearch",
    "SearchDirection",
    "SearchKind",
    # Keymap
    "BindingType",
    "VimBinding",
    "VimKeymapConfig",
    "VimKeymapProvider",
    "DefaultVimKeymapProvider",
    "KeymapError",
    "keymap_from_dict",
    "get_vim_keymap",
    "set_vim_keymap",
    "reset_vim_keymap",
    # Command mode
    "CommandAction",
    "CommandResult",
    "VimCommandHandler",
]
