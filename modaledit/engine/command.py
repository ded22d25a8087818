"""Vim command mode handler.

Handles ex-style commands like :w, :q, :wq and :<line>.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CommandAction(Enum):
    """Actions that can result from command execution."""

    NONE = "none"
    QUIT = "quit"  # Close the document
    QUIT_FORCE = "quit_force"  # Close, discarding changes
    WRITE = "write"  # Save the buffer
    WRITE_QUIT = "write_quit"  # Save and close
    EDIT = "edit"  # Open another file
    NEW = "new"  # Start a new buffer
    GOTO_LINE = "goto_line"  # Jump to a line (:42)


@dataclass
class CommandResult:
    """Result of executing a command."""

    action: CommandAction = CommandAction.NONE
    message: str = ""
    error: bool = False
    argument: str = ""
    line: int | None = None  # 1-based target for GOTO_LINE


class VimCommandHandler:
    """Handles vim ex-style commands."""

    def __init__(self) -> None:
        self._command_buffer: str = ""

    @property
    def buffer(self) -> str:
        """Get the current command buffer."""
        return self._command_buffer

    def start(self) -> None:
        """Start command mode."""
        self._command_buffer = ""

    def add_char(self, char: str) -> None:
        """Add a character to the command buffer."""
        if len(char) == 1:
            self._command_buffer += char

    def backspace(self) -> bool:
        """Remove last character. Returns False if buffer was already empty."""
        if self._command_buffer:
            self._command_buffer = self._command_buffer[:-1]
            return True
        return False

    def cancel(self) -> None:
        """Cancel command mode."""
        self._command_buffer = ""

    def execute(self) -> CommandResult:
        """Execute the current command."""
        cmd = self._command_buffer.strip()
        self._command_buffer = ""

        return parse_command(cmd)


def parse_command(cmd: str) -> CommandResult:
    """Parse a command string (without the leading colon)."""
    if not cmd:
        return CommandResult()

    # Line number
    if cmd.isdigit():
        return CommandResult(action=CommandAction.GOTO_LINE, line=max(1, int(cmd)))

    # Split command into parts
    parts = cmd.split(None, 1)
    base_cmd = parts[0].lower()
    args = parts[1] if len(parts) > 1 else ""

    # Quit commands
    if base_cmd in ("q", "quit"):
        return CommandResult(action=CommandAction.QUIT)

    if base_cmd in ("q!", "quit!"):
        return CommandResult(action=CommandAction.QUIT_FORCE)

    # Write commands
    if base_cmd in ("w", "write"):
        return CommandResult(action=CommandAction.WRITE, argument=args)

    # Write and quit
    if base_cmd in ("wq", "x", "exit"):
        return CommandResult(action=CommandAction.WRITE_QUIT, argument=args)

    # Buffers
    if base_cmd in ("e", "edit"):
        return CommandResult(action=CommandAction.EDIT, argument=args)

    if base_cmd == "new":
        return CommandResult(action=CommandAction.NEW)

    # Help
    if base_cmd in ("h", "help"):
        return CommandResult(
            message="Commands: :w (save), :q (quit), :wq (save & quit), :q! (force quit), :<n> (go to line)",
        )

    # Unknown command
    return CommandResult(
        error=True,
        message=f"Unknown command: {cmd}",
    )
