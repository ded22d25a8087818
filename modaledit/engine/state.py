"""Vim state management.

Tracks the current mode, count prefix, last character search and the
key the engine is waiting on after a leader or search command.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class VimMode(Enum):
    """Vim editing modes."""

    NORMAL = "NORMAL"
    INSERT = "INSERT"
    COMMAND = "COMMAND"


class SearchDirection(Enum):
    """Direction of a character search."""

    FORWARD = auto()
    BACKWARD = auto()

    def reversed(self) -> SearchDirection:
        if self is SearchDirection.FORWARD:
            return SearchDirection.BACKWARD
        return SearchDirection.FORWARD


class SearchKind(Enum):
    """Where a character search lands relative to the match."""

    TO = auto()      # f/F - on the match
    BEFORE = auto()  # t/T - one short of the match


@dataclass(frozen=True)
class CharSearch:
    """A completed f/F/t/T search, kept for ; and , repeats."""

    target: str
    direction: SearchDirection
    kind: SearchKind

    @property
    def forward(self) -> bool:
        return self.direction is SearchDirection.FORWARD

    @property
    def before(self) -> bool:
        return self.kind is SearchKind.BEFORE

    def reversed(self) -> CharSearch:
        """Same search in the opposite direction."""
        return CharSearch(self.target, self.direction.reversed(), self.kind)


# ─────────────────────────────────────────────────────────────────
# Pending key state
# ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Idle:
    """No multi-key command in progress."""


@dataclass(frozen=True)
class AwaitingCharSearchTarget:
    """f/F/t/T was pressed; the next character is the search target."""

    direction: SearchDirection
    kind: SearchKind


@dataclass(frozen=True)
class AwaitingLeaderSuffix:
    """A leader key (g or z) was pressed; the next key completes it."""

    leader: str


PendingKey = Union[Idle, AwaitingCharSearchTarget, AwaitingLeaderSuffix]

IDLE = Idle()


@dataclass
class CountAccumulator:
    """Decimal count typed before a command (the 3 in 3w)."""

    digits: str = ""

    @property
    def pending(self) -> bool:
        """True if a count has been typed."""
        return bool(self.digits)

    def accumulate(self, key: str) -> bool:
        """Accumulate a digit. Returns True if consumed."""
        if len(key) != 1 or not key.isdigit() or not key.isascii():
            return False

        if key == "0" and not self.digits:
            # 0 at start is a motion (go to line start), not a count
            return False

        self.digits += key
        return True

    def value(self) -> int:
        """Parsed count, 1 when nothing was typed."""
        if not self.digits:
            return 1
        return max(1, int(self.digits))

    def consume(self) -> int:
        """Return the parsed count and clear it."""
        count = self.value()
        self.digits = ""
        return count

    def clear(self) -> None:
        self.digits = ""


@dataclass
class VimState:
    """Tracks all vim editing state for one document.

    - Current mode (NORMAL, INSERT, COMMAND)
    - Count prefix (e.g., 3 in 3w)
    - Last f/F/t/T search, for ; and ,
    - Pending key state (after f, t, g, z, ...)
    """

    mode: VimMode = VimMode.NORMAL
    count: CountAccumulator = field(default_factory=CountAccumulator)
    last_char_search: CharSearch | None = None
    pending: PendingKey = IDLE

    def reset_counts(self) -> None:
        """Clear the count and any half-typed command."""
        self.count.clear()
        self.pending = IDLE

    def enter_mode(self, mode: VimMode) -> None:
        """Transition to a new mode with proper cleanup."""
        self.mode = mode
        self.reset_counts()

    def accumulate_digit(self, digit: str) -> bool:
        """Accumulate a digit for count prefix. Returns True if consumed."""
        return self.count.accumulate(digit)

    def consume_count(self) -> int:
        """Consume accumulated count."""
        return self.count.consume()

    @property
    def mode_string(self) -> str:
        """Mode label for the status bar, with the pending count if any."""
        if self.mode is VimMode.NORMAL and self.count.pending:
            return f"{self.mode.value} - {self.count.digits}"
        return self.mode.value
