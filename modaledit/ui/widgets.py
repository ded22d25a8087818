"""Custom widgets for modaledit."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from textual.message import Message
from textual.widgets import Static, TextArea

from modaledit.engine import (
    CommandAction,
    KeyEvent,
    VimEngine,
    VimMode,
    line_col_to_offset,
    offset_to_line_col,
)

if TYPE_CHECKING:
    from textual.events import Key


class ModalTextArea(TextArea):
    """TextArea whose keys are routed through the vim engine.

    Edits only reach the TextArea in INSERT mode; in every other mode the
    widget is read-only and the engine decides where the cursor goes.
    """

    class ModeChanged(Message):
        """Posted when the mode or the pending count changes."""

        def __init__(self, mode: VimMode, mode_string: str) -> None:
            super().__init__()
            self.mode = mode
            self.mode_string = mode_string

    class CommandLineChanged(Message):
        """Posted when the : command line opens or its text changes."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    class CommandRequested(Message):
        """Posted when a : command has been executed."""

        def __init__(
            self,
            action: CommandAction | None,
            argument: str = "",
            message: str = "",
            error: bool = False,
        ) -> None:
            super().__init__()
            self.action = action
            self.argument = argument
            self.message = message
            self.error = error

    class ScrollRequested(Message):
        """Posted for zz/zt/zb."""

        def __init__(self, target: str) -> None:
            super().__init__()
            self.target = target

    def __init__(self, text: str = "", *args: Any, engine: VimEngine | None = None, **kwargs: Any) -> None:
        super().__init__(text, *args, **kwargs)
        self.engine = engine or VimEngine()
        self.engine.set_mode_callback(self._on_engine_mode_change)
        self.engine.set_command_callback(self._on_engine_command_line)
        self.engine.set_command_update_callback(self._on_engine_command_line)
        self.engine.set_scroll_callback(self._on_engine_scroll)
        self.read_only = self.engine.mode != VimMode.INSERT

    @property
    def cursor_offset(self) -> int:
        """Cursor location as an offset into the text."""
        row, col = self.cursor_location
        return line_col_to_offset(self.text, row, col)

    @cursor_offset.setter
    def cursor_offset(self, offset: int) -> None:
        self.cursor_location = offset_to_line_col(self.text, offset)

    async def _on_key(self, event: Key) -> None:
        """Route the key through the vim engine before the TextArea sees it.

        Textual dispatches Key to TextArea._on_key after this handler unless
        the default is prevented, so unconsumed keys reach the TextArea
        without calling super(). Outside INSERT mode read_only blocks edits.
        """
        mode_string = self.engine.mode_string
        self.engine.sync(self.text, self.cursor_offset)
        result = self.engine.handle_key(KeyEvent(event.key, event.character))

        if result.consumed:
            event.stop()
            event.prevent_default()
            if self.engine.cursor != self.cursor_offset:
                self.cursor_offset = self.engine.cursor
            if result.command_action is not None:
                self.post_message(
                    self.CommandRequested(
                        result.command_action,
                        result.command_argument,
                        result.message,
                        result.error,
                    )
                )
            if self.engine.mode_string != mode_string:
                self.post_message(self.ModeChanged(self.engine.mode, self.engine.mode_string))

    def scroll_cursor_line(self, target: str) -> None:
        """Scroll so the cursor line sits at the center, top or bottom."""
        row, _ = self.cursor_location
        height = self.scrollable_content_region.height
        if target == "top":
            y = row
        elif target == "bottom":
            y = row - height + 1
        else:
            y = row - height // 2
        self.scroll_to(y=max(0, y), animate=False)

    def _on_engine_mode_change(self, mode: VimMode) -> None:
        self.read_only = mode != VimMode.INSERT

    def _on_engine_command_line(self, text: str) -> None:
        self.post_message(self.CommandLineChanged(text))

    def _on_engine_scroll(self, target: str) -> None:
        self.post_message(self.ScrollRequested(target))


class VimCommandLine(Static):
    """Single-line display of the : command being typed."""

    DEFAULT_CSS = """
    VimCommandLine {
        width: 100%;
        height: 1;
        background: $surface;
        display: none;
        padding: 0 1;
    }

    VimCommandLine.visible {
        display: block;
    }
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__("", *args, markup=False, **kwargs)
        self.command_text: str = ""

    def set_command(self, text: str) -> None:
        """Set the command text (including the leading colon)."""
        self.command_text = text
        self.update(text)

    def show(self) -> None:
        """Show the command line."""
        self.add_class("visible")

    def hide(self) -> None:
        """Hide and clear the command line."""
        self.remove_class("visible")
        self.set_command("")

    @property
    def is_visible(self) -> bool:
        """Check if the command line is visible."""
        return "visible" in self.classes
