"""Vim emulation engine.

The VimEngine is the main controller that:
- Takes key events from the host, one tick at a time
- Manages vim state (mode, count, pending keys, last char search)
- Dispatches to motions and mode transitions
- Reports the new cursor offset back to the host

The engine never edits the buffer. In INSERT mode keys are left for the
host widget to apply; in every other mode the host is expected to block
edits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Union

from .address import clamp_offset, line_col_to_offset, offset_to_line_col, split_lines
from .command import CommandAction, VimCommandHandler
from .keymap import BindingType, VimBinding, VimKeymapProvider, get_vim_keymap
from .motions import (
    REPEAT_FIND_HANDLERS,
    find_char,
    get_motion_handler,
    motion_first_non_blank,
    motion_goto_line,
    repeat_char_search,
)
from .state import (
    IDLE,
    AwaitingCharSearchTarget,
    AwaitingLeaderSuffix,
    CharSearch,
    SearchDirection,
    SearchKind,
    VimMode,
    VimState,
)

logger = logging.getLogger(__name__)

ESCAPE_KEYS = ("escape", "ctrl+[", "ctrl+c")

# Terminal key names that vim treats as the same key
KEY_ALIASES = {
    "ctrl+left_square_bracket": "ctrl+[",
    "return": "enter",
    "ctrl+m": "enter",
    "ctrl+h": "backspace",
}

PENDING_SEARCHES: dict[str, tuple[SearchDirection, SearchKind]] = {
    "pending_find_forward": (SearchDirection.FORWARD, SearchKind.TO),
    "pending_find_backward": (SearchDirection.BACKWARD, SearchKind.TO),
    "pending_till_forward": (SearchDirection.FORWARD, SearchKind.BEFORE),
    "pending_till_backward": (SearchDirection.BACKWARD, SearchKind.BEFORE),
}

# Sequence prefix for each leader handler, whatever key it is bound to
LEADER_PREFIXES = {
    "leader_g": "g",
    "leader_z": "z",
}

SCROLL_TARGETS = {
    "scroll_center": "center",
    "scroll_top": "top",
    "scroll_bottom": "bottom",
}


@dataclass(frozen=True)
class KeyEvent:
    """A key press as delivered by the host."""

    key: str                      # Key name (e.g., "j", "escape", "ctrl+r")
    character: str | None = None  # Printable character, if any

    @property
    def vim_key(self) -> str:
        """Key in the form the keymap uses."""
        key = KEY_ALIASES.get(self.key, self.key)
        if key in ESCAPE_KEYS or key in ("enter", "backspace", "tab", "space"):
            return key
        if self.character and len(self.character) == 1 and self.character.isprintable():
            return self.character
        return key


Event = Union[str, KeyEvent]


@dataclass
class KeyResult:
    """Result of processing a key event."""

    consumed: bool = True           # Was the key handled?
    enter_insert: bool = False      # Did we enter insert mode?
    show_command_line: bool = False # Should we show command input?
    command_text: str = ""          # Pre-filled command text
    command_action: CommandAction | None = None  # Action from command mode
    command_argument: str = ""      # Argument to the command (e.g. :w path)
    message: str = ""               # Message to display to user
    error: bool = False             # Message is an error
    scroll: str | None = None       # Viewport request: center, top, bottom


class VimEngine:
    """Main vim emulation controller.

    One engine per open document. The host hands in the current text and
    cursor offset and reads back the new offset and mode.
    """

    def __init__(self, keymap: VimKeymapProvider | None = None) -> None:
        self._state = VimState()
        self._keymap = keymap

        # Snapshot of the host buffer for the current tick
        self._text: str = ""
        self._cursor: int = 0

        # Command mode handler
        self._command_handler = VimCommandHandler()

        # Callbacks for mode changes, command mode, etc.
        self._on_mode_change: Callable[[VimMode], None] | None = None
        self._on_command_mode: Callable[[str], None] | None = None
        self._on_command_update: Callable[[str], None] | None = None
        self._on_scroll: Callable[[str], None] | None = None

    @property
    def keymap(self) -> VimKeymapProvider:
        """Keymap in use (the global one unless given explicitly)."""
        return self._keymap or get_vim_keymap()

    @property
    def mode(self) -> VimMode:
        """Current vim mode."""
        return self._state.mode

    @property
    def state(self) -> VimState:
        """Current vim state."""
        return self._state

    @property
    def mode_string(self) -> str:
        """Status bar text, e.g. "NORMAL - 3"."""
        return self._state.mode_string

    @property
    def cursor(self) -> int:
        """Cursor offset after the last processed key."""
        return self._cursor

    @property
    def text(self) -> str:
        """Buffer snapshot the engine is working against."""
        return self._text

    @property
    def command_buffer(self) -> str:
        """Get the current command buffer."""
        return self._command_handler.buffer

    def set_mode_callback(self, callback: Callable[[VimMode], None]) -> None:
        """Set callback for mode changes."""
        self._on_mode_change = callback

    def set_command_callback(self, callback: Callable[[str], None]) -> None:
        """Set callback for command mode entry."""
        self._on_command_mode = callback

    def set_command_update_callback(self, callback: Callable[[str], None]) -> None:
        """Set callback for command line updates."""
        self._on_command_update = callback

    def set_scroll_callback(self, callback: Callable[[str], None]) -> None:
        """Set callback for zz/zt/zb viewport requests."""
        self._on_scroll = callback

    def _notify_mode_change(self) -> None:
        """Notify callback of mode change."""
        if self._on_mode_change:
            self._on_mode_change(self._state.mode)

    # ─────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────

    def sync(self, text: str, cursor: int) -> None:
        """Install the host's current text and cursor offset."""
        self._text = text
        self._cursor = clamp_offset(text, cursor)

    def handle_tick(self, events: Iterable[Event], text: str, cursor: int) -> int:
        """Process all input since the previous tick.

        Args:
            events: Key names or KeyEvents, in the order they occurred
            text: Current buffer text (never modified)
            cursor: Current cursor offset in the host

        Returns:
            The new cursor offset
        """
        self.sync(text, cursor)
        for event in events:
            self.handle_key(event)
        return self._cursor

    def handle_key(self, key: Event) -> KeyResult:
        """Process a key event.

        Args:
            key: The key that was pressed (e.g., "j", "escape") or a KeyEvent

        Returns:
            KeyResult indicating how the key was handled
        """
        if isinstance(key, KeyEvent):
            key = key.vim_key

        mode = self._state.mode

        # Handle based on current mode
        if mode == VimMode.INSERT:
            return self._handle_insert_mode(key)
        elif mode == VimMode.NORMAL:
            return self._handle_normal_mode(key)
        elif mode == VimMode.COMMAND:
            return self._handle_command_mode(key)

        return KeyResult(consumed=False)

    def enter_insert_mode(self) -> None:
        """Enter insert mode."""
        self._state.enter_mode(VimMode.INSERT)
        self._notify_mode_change()

    def exit_insert_mode(self) -> None:
        """Exit insert mode, return to normal mode."""
        self._state.enter_mode(VimMode.NORMAL)
        # Move cursor back onto the last inserted character
        self._cursor = max(0, self._cursor - 1)
        self._notify_mode_change()

    # ─────────────────────────────────────────────────────────────────
    # Insert Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_insert_mode(self, key: str) -> KeyResult:
        """Handle keys in insert mode."""
        # Escape exits insert mode
        if key in ESCAPE_KEYS:
            self.exit_insert_mode()
            return KeyResult(consumed=True)

        # Let the host apply all other keys in insert mode
        return KeyResult(consumed=False)

    # ─────────────────────────────────────────────────────────────────
    # Normal Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_normal_mode(self, key: str) -> KeyResult:
        """Handle keys in normal mode."""
        pending = self._state.pending

        # Handle pending character input (f, t, F, T)
        if isinstance(pending, AwaitingCharSearchTarget):
            return self._handle_pending_char(pending, key)

        # Handle leader sequences (gg, ge, zz, etc.)
        if isinstance(pending, AwaitingLeaderSuffix):
            return self._handle_leader_suffix(pending, key)

        if key in ESCAPE_KEYS:
            self._state.reset_counts()
            return KeyResult(consumed=True)

        # Look up the key in keymap
        binding = self.keymap.lookup(key, "normal")

        # Check for count prefix
        # (0 with no count is the line start motion, not a digit;
        # other digits only count while nothing else is bound to them)
        if (binding is None or key == "0") and self._state.accumulate_digit(key):
            return KeyResult(consumed=True)

        if binding is None:
            logger.debug("Unbound key in normal mode: %r", key)
            return KeyResult(consumed=False)

        # Handle based on binding type
        if binding.type == BindingType.MOTION:
            return self._execute_motion(binding)

        elif binding.type == BindingType.ACTION:
            return self._execute_action(binding.handler)

        elif binding.type == BindingType.MODE_SWITCH:
            return self._execute_mode_switch(binding.handler)

        elif binding.type == BindingType.PENDING:
            direction, kind = PENDING_SEARCHES[binding.handler]
            self._state.pending = AwaitingCharSearchTarget(direction, kind)
            return KeyResult(consumed=True)

        elif binding.type == BindingType.LEADER:
            self._state.pending = AwaitingLeaderSuffix(LEADER_PREFIXES[binding.handler])
            return KeyResult(consumed=True)

        return KeyResult(consumed=False)

    def _handle_leader_suffix(self, pending: AwaitingLeaderSuffix, key: str) -> KeyResult:
        """Handle the key after a leader (g or z)."""
        self._state.pending = IDLE
        sequence = pending.leader + key

        binding = self.keymap.lookup_sequence(sequence)
        if binding is None:
            # Not a valid sequence
            logger.debug("Unknown leader sequence: %r", sequence)
            self._state.count.clear()
            return KeyResult(consumed=True)

        if binding.type == BindingType.SCROLL:
            self._state.count.clear()
            target = SCROLL_TARGETS.get(binding.handler)
            if target and self._on_scroll:
                self._on_scroll(target)
            return KeyResult(consumed=True, scroll=target)

        return self._execute_motion(binding)

    def _handle_pending_char(self, pending: AwaitingCharSearchTarget, key: str) -> KeyResult:
        """Handle character input after f/t/F/T."""
        self._state.pending = IDLE

        if key == "space":
            key = " "

        if len(key) != 1:
            # Invalid char (e.g., escape)
            self._state.count.clear()
            return KeyResult(consumed=True)

        count = self._state.consume_count()
        search = CharSearch(key, pending.direction, pending.kind)
        pos = find_char(
            self._text, self._cursor, key, count, forward=search.forward, before=search.before
        )

        if pos is not None:
            self._cursor = pos
            self._state.last_char_search = search
        else:
            logger.debug("Character search for %r found fewer than %d matches", key, count)

        return KeyResult(consumed=True)

    # ─────────────────────────────────────────────────────────────────
    # Motion Execution
    # ─────────────────────────────────────────────────────────────────

    def _execute_motion(self, binding: VimBinding) -> KeyResult:
        """Execute a motion command."""
        handler_name = binding.handler
        if binding.counted and self._state.count.pending:
            handler_name = binding.counted

        count = self._state.consume_count()

        if handler_name in REPEAT_FIND_HANDLERS:
            pos = repeat_char_search(
                self._text,
                self._cursor,
                self._state.last_char_search,
                count,
                reverse=REPEAT_FIND_HANDLERS[handler_name],
            )
            if pos is not None:
                self._cursor = pos
            return KeyResult(consumed=True)

        handler = get_motion_handler(handler_name)
        if not handler:
            return KeyResult(consumed=False)

        self._cursor = clamp_offset(self._text, handler(self._text, self._cursor, count))
        return KeyResult(consumed=True)

    # ─────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────

    def _execute_action(self, handler_name: str) -> KeyResult:
        """Execute an immediate action."""
        if handler_name == "action_insert":
            self.enter_insert_mode()
            return KeyResult(consumed=True, enter_insert=True)

        elif handler_name == "action_insert_line_start":
            self._cursor = motion_first_non_blank(self._text, self._cursor)
            self.enter_insert_mode()
            return KeyResult(consumed=True, enter_insert=True)

        elif handler_name == "action_append":
            # Move right one char, but allow resting after the last char of the line
            row, col = offset_to_line_col(self._text, self._cursor)
            line_len = len(split_lines(self._text)[row])
            self._cursor = line_col_to_offset(self._text, row, min(col + 1, line_len))
            self.enter_insert_mode()
            return KeyResult(consumed=True, enter_insert=True)

        elif handler_name == "action_append_line_end":
            row, _ = offset_to_line_col(self._text, self._cursor)
            line_len = len(split_lines(self._text)[row])
            self._cursor = line_col_to_offset(self._text, row, line_len)
            self.enter_insert_mode()
            return KeyResult(consumed=True, enter_insert=True)

        return KeyResult(consumed=False)

    # ─────────────────────────────────────────────────────────────────
    # Mode Switches
    # ─────────────────────────────────────────────────────────────────

    def _execute_mode_switch(self, handler_name: str) -> KeyResult:
        """Execute a mode switch command."""
        if handler_name == "mode_command":
            self.enter_command_mode()
            return KeyResult(consumed=True, show_command_line=True, command_text=":")

        return KeyResult(consumed=False)

    # ─────────────────────────────────────────────────────────────────
    # Command Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_command_mode(self, key: str) -> KeyResult:
        """Handle keys in command mode."""
        # Escape cancels command mode
        if key in ESCAPE_KEYS:
            self._command_handler.cancel()
            self._state.enter_mode(VimMode.NORMAL)
            self._notify_mode_change()
            return KeyResult(consumed=True)

        # Enter executes the command
        if key == "enter":
            result = self._command_handler.execute()
            self._state.enter_mode(VimMode.NORMAL)
            self._notify_mode_change()

            if result.action == CommandAction.GOTO_LINE and result.line is not None:
                self._cursor = motion_goto_line(self._text, self._cursor, result.line)

            return KeyResult(
                consumed=True,
                command_action=result.action,
                command_argument=result.argument,
                message=result.message,
                error=result.error,
            )

        # Backspace
        if key == "backspace":
            if not self._command_handler.backspace():
                # Buffer is empty, exit command mode
                self._state.enter_mode(VimMode.NORMAL)
                self._notify_mode_change()
            else:
                self._notify_command_update()
            return KeyResult(consumed=True)

        if key == "space":
            key = " "

        # Regular character input
        if len(key) == 1:
            self._command_handler.add_char(key)
            self._notify_command_update()
            return KeyResult(consumed=True)

        return KeyResult(consumed=True)

    def _notify_command_update(self) -> None:
        """Notify callback of command buffer update."""
        if self._on_command_update:
            self._on_command_update(":" + self._command_handler.buffer)

    def enter_command_mode(self) -> None:
        """Enter command mode."""
        self._command_handler.start()
        self._state.enter_mode(VimMode.COMMAND)
        self._notify_mode_change()
        if self._on_command_mode:
            self._on_command_mode(":")
