"""Textual application hosting the modal editor."""

from __future__ import annotations

from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from modaledit.engine import CommandAction, VimMode

from .widgets import ModalTextArea, VimCommandLine


class ModalEditApp(App):
    """Single-document modal editor."""

    TITLE = "modaledit"

    CSS = """
    Screen {
        layout: vertical;
    }

    #editor {
        height: 1fr;
    }

    #status-bar {
        height: 1;
        width: 100%;
        background: $primary-background;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(self, path: Path | str | None = None, text: str | None = None) -> None:
        super().__init__()
        self.path: Path | None = Path(path).expanduser() if path else None
        if text is None:
            text = self._read_file(self.path)
        self._initial_text = text
        self._saved_text = text
        self.status_text = ""

    @staticmethod
    def _read_file(path: Path | None) -> str:
        if path is None or not path.exists():
            return ""
        return path.read_text(encoding="utf-8")

    def compose(self) -> ComposeResult:
        yield ModalTextArea(self._initial_text, id="editor")
        yield VimCommandLine(id="vim-command-line")
        yield Static("", id="status-bar", markup=False)

    def on_mount(self) -> None:
        self.editor.focus()
        self._update_status_bar()

    @property
    def editor(self) -> ModalTextArea:
        return self.query_one("#editor", ModalTextArea)

    @property
    def command_line(self) -> VimCommandLine:
        return self.query_one("#vim-command-line", VimCommandLine)

    @property
    def is_modified(self) -> bool:
        """True if the buffer differs from what was last loaded or saved."""
        return self.editor.text != self._saved_text

    # ─────────────────────────────────────────────────────────────────
    # Status bar
    # ─────────────────────────────────────────────────────────────────

    def _update_status_bar(self) -> None:
        editor = self.editor
        row, col = editor.cursor_location
        name = str(self.path) if self.path else "[No Name]"
        modified = " [+]" if self.is_modified else ""
        status = f"{editor.engine.mode_string}  {name}{modified}  {row + 1}:{col + 1}"
        self.status_text = status
        self.query_one("#status-bar", Static).update(status)

    def on_text_area_selection_changed(self, event: ModalTextArea.SelectionChanged) -> None:
        self._update_status_bar()

    def on_text_area_changed(self, event: ModalTextArea.Changed) -> None:
        self._update_status_bar()

    # ─────────────────────────────────────────────────────────────────
    # Editor messages
    # ─────────────────────────────────────────────────────────────────

    def on_modal_text_area_mode_changed(self, event: ModalTextArea.ModeChanged) -> None:
        if event.mode != VimMode.COMMAND:
            self.command_line.hide()
        self._update_status_bar()

    def on_modal_text_area_command_line_changed(self, event: ModalTextArea.CommandLineChanged) -> None:
        self.command_line.set_command(event.text)
        self.command_line.show()

    def on_modal_text_area_scroll_requested(self, event: ModalTextArea.ScrollRequested) -> None:
        self.editor.scroll_cursor_line(event.target)

    def on_modal_text_area_command_requested(self, event: ModalTextArea.CommandRequested) -> None:
        self.command_line.hide()
        action = event.action

        if action == CommandAction.QUIT:
            if self.is_modified:
                self.notify("No write since last change (add ! to override)", severity="error")
                return
            self.exit()

        elif action == CommandAction.QUIT_FORCE:
            self.exit()

        elif action == CommandAction.WRITE:
            self._write_buffer(event.argument)

        elif action == CommandAction.WRITE_QUIT:
            if self._write_buffer(event.argument):
                self.exit()

        elif action in (CommandAction.EDIT, CommandAction.NEW):
            self.notify(f":{action.value} is not available in this editor", severity="warning")

        elif event.message:
            severity = "error" if event.error else "information"
            self.notify(event.message, severity=severity)

        self._update_status_bar()

    def _write_buffer(self, argument: str = "") -> bool:
        """Save the buffer, to argument if given. Returns True on success."""
        path = Path(argument.strip()).expanduser() if argument.strip() else self.path
        if path is None:
            self.notify("No file name", severity="error")
            return False

        text = self.editor.text
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            self.notify(f"Failed to write {path}: {exc}", severity="error")
            return False

        self.path = path
        self._saved_text = text
        self.notify(f'"{path}" written')
        self._update_status_bar()
        return True
