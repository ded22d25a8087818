"""Vim motion functions.

Motions compute cursor destinations without modifying text. Every motion
takes the buffer text, the current offset and a repeat count, and returns
a new offset clamped to [0, len(text)].

Motion functions are registered by name and looked up via the keymap.
"""

from __future__ import annotations

from typing import Callable

from .address import (
    clamp_offset,
    line_col_to_offset,
    offset_to_line_col,
    split_lines,
)
from .classify import RunKind, char_class
from .state import CharSearch

# Type alias for motion functions
MotionFunc = Callable[[str, int, int], int]


def _repeat(step: Callable[[str, int], int], text: str, offset: int, count: int) -> int:
    """Apply a single-step motion count times, stopping once it stalls."""
    pos = clamp_offset(text, offset)
    for _ in range(max(1, count)):
        new_pos = clamp_offset(text, step(text, pos))
        if new_pos == pos:
            break
        pos = new_pos
    return pos


def _is_blank(line: str) -> bool:
    return not line.strip()


# ─────────────────────────────────────────────────────────────────
# Basic Cursor Motions (h, j, k, l)
# ─────────────────────────────────────────────────────────────────


def motion_left(text: str, offset: int, count: int = 1) -> int:
    """Move cursor left (h motion)."""
    return clamp_offset(text, offset - max(1, count))


def motion_right(text: str, offset: int, count: int = 1) -> int:
    """Move cursor right (l motion). May rest one past the last character."""
    return clamp_offset(text, clamp_offset(text, offset) + max(1, count))


def motion_up(text: str, offset: int, count: int = 1) -> int:
    """Move cursor up (k motion), keeping the source column."""
    row, col = offset_to_line_col(text, clamp_offset(text, offset))
    return line_col_to_offset(text, max(0, row - max(1, count)), col)


def motion_down(text: str, offset: int, count: int = 1) -> int:
    """Move cursor down (j motion), keeping the source column."""
    row, col = offset_to_line_col(text, clamp_offset(text, offset))
    last_row = len(split_lines(text)) - 1
    return line_col_to_offset(text, min(last_row, row + max(1, count)), col)


# ─────────────────────────────────────────────────────────────────
# Line Position Motions (0, ^, $, g_)
# ─────────────────────────────────────────────────────────────────


def motion_line_start(text: str, offset: int, count: int = 1) -> int:
    """Move to start of line (0 motion)."""
    row, _ = offset_to_line_col(text, clamp_offset(text, offset))
    return line_col_to_offset(text, row, 0)


def motion_line_end(text: str, offset: int, count: int = 1) -> int:
    """Move to the last character of the line ($ motion)."""
    row, _ = offset_to_line_col(text, clamp_offset(text, offset))
    line = split_lines(text)[row]
    return line_col_to_offset(text, row, max(0, len(line) - 1))


def motion_first_non_blank(text: str, offset: int, count: int = 1) -> int:
    """Move to first non-blank character (^ motion)."""
    row, _ = offset_to_line_col(text, clamp_offset(text, offset))
    line = split_lines(text)[row]
    stripped = line.lstrip()
    col = len(line) - len(stripped) if stripped else 0
    return line_col_to_offset(text, row, col)


def motion_last_non_blank(text: str, offset: int, count: int = 1) -> int:
    """Move to last non-blank character (g_ motion)."""
    row, _ = offset_to_line_col(text, clamp_offset(text, offset))
    line = split_lines(text)[row].rstrip()
    return line_col_to_offset(text, row, max(0, len(line) - 1))


# ─────────────────────────────────────────────────────────────────
# Word Motions (w, W, e, E, b, B, ge, gE)
# ─────────────────────────────────────────────────────────────────


def _word_start_forward(text: str, pos: int, big_word: bool) -> int:
    n = len(text)
    if pos >= n:
        return n

    # Skip the rest of the current run (nothing to skip on whitespace)
    kind = char_class(text[pos], big_word)
    if kind is not RunKind.SPACE:
        while pos < n and char_class(text[pos], big_word) is kind:
            pos += 1

    # Skip whitespace
    while pos < n and text[pos].isspace():
        pos += 1

    return pos


def _word_end_forward(text: str, pos: int, big_word: bool) -> int:
    n = len(text)
    if pos >= n:
        return pos

    # Move at least one character
    if pos < n - 1:
        pos += 1

    # Skip whitespace
    while pos < n and text[pos].isspace():
        pos += 1

    if pos >= n:
        return n - 1

    # Move to end of the run
    kind = char_class(text[pos], big_word)
    while pos < n - 1 and char_class(text[pos + 1], big_word) is kind:
        pos += 1

    return pos


def _word_start_backward(text: str, pos: int, big_word: bool) -> int:
    if pos <= 0:
        return 0

    # Move back at least one character
    pos = min(pos, len(text)) - 1

    # Skip whitespace backward
    while pos > 0 and text[pos].isspace():
        pos -= 1

    if pos == 0:
        return 0

    # Go to start of the run
    kind = char_class(text[pos], big_word)
    while pos > 0 and char_class(text[pos - 1], big_word) is kind:
        pos -= 1

    return pos


def _word_end_backward(text: str, pos: int, big_word: bool) -> int:
    if pos <= 0:
        return 0

    # Leave the run under the cursor
    if pos < len(text) and not text[pos].isspace():
        kind = char_class(text[pos], big_word)
        while pos > 0 and char_class(text[pos - 1], big_word) is kind:
            pos -= 1
    pos -= 1

    # Skip whitespace backward
    while pos > 0 and text[pos].isspace():
        pos -= 1

    return max(0, pos)


def motion_word_forward(text: str, offset: int, count: int = 1) -> int:
    """Move to next word start (w motion)."""
    return _repeat(lambda t, p: _word_start_forward(t, p, False), text, offset, count)


def motion_word_forward_big(text: str, offset: int, count: int = 1) -> int:
    """Move to next WORD start (W motion)."""
    return _repeat(lambda t, p: _word_start_forward(t, p, True), text, offset, count)


def motion_word_end(text: str, offset: int, count: int = 1) -> int:
    """Move to next word end (e motion)."""
    return _repeat(lambda t, p: _word_end_forward(t, p, False), text, offset, count)


def motion_word_end_big(text: str, offset: int, count: int = 1) -> int:
    """Move to next WORD end (E motion)."""
    return _repeat(lambda t, p: _word_end_forward(t, p, True), text, offset, count)


def motion_word_backward(text: str, offset: int, count: int = 1) -> int:
    """Move to previous word start (b motion)."""
    return _repeat(lambda t, p: _word_start_backward(t, p, False), text, offset, count)


def motion_word_backward_big(text: str, offset: int, count: int = 1) -> int:
    """Move to previous WORD start (B motion)."""
    return _repeat(lambda t, p: _word_start_backward(t, p, True), text, offset, count)


def motion_word_end_backward(text: str, offset: int, count: int = 1) -> int:
    """Move to end of previous word (ge motion)."""
    return _repeat(lambda t, p: _word_end_backward(t, p, False), text, offset, count)


def motion_word_end_backward_big(text: str, offset: int, count: int = 1) -> int:
    """Move to end of previous WORD (gE motion)."""
    return _repeat(lambda t, p: _word_end_backward(t, p, True), text, offset, count)


# ─────────────────────────────────────────────────────────────────
# Document Position Motions (gg, G, [count]G)
# ─────────────────────────────────────────────────────────────────


def motion_goto_line(text: str, offset: int, count: int = 1) -> int:
    """Move to column 0 of line count, 1-based and clamped (gg, [count]G)."""
    last_row = len(split_lines(text)) - 1
    row = max(0, min(count - 1, last_row))
    return line_col_to_offset(text, row, 0)


def motion_document_end(text: str, offset: int, count: int = 1) -> int:
    """Move to column 0 of the last line (G motion)."""
    last_row = len(split_lines(text)) - 1
    return line_col_to_offset(text, last_row, 0)


# ─────────────────────────────────────────────────────────────────
# Paragraph Motions ({, })
# ─────────────────────────────────────────────────────────────────


def _paragraph_forward(text: str, pos: int) -> int:
    lines = split_lines(text)
    row, _ = offset_to_line_col(text, pos)

    # Skip blank lines, then the paragraph itself
    while row < len(lines) and _is_blank(lines[row]):
        row += 1
    while row < len(lines) and not _is_blank(lines[row]):
        row += 1

    if row >= len(lines):
        return len(text)
    return line_col_to_offset(text, row, 0)


def _paragraph_backward(text: str, pos: int) -> int:
    lines = split_lines(text)
    row, _ = offset_to_line_col(text, pos)
    if row == 0:
        return 0

    # Start one line up so the first line of a paragraph still moves
    row -= 1
    while row > 0 and _is_blank(lines[row]):
        row -= 1
    if _is_blank(lines[row]):
        return 0
    while row > 0 and not _is_blank(lines[row]):
        row -= 1

    # Stopped on the blank line above the run: land on its first line
    if _is_blank(lines[row]):
        row += 1
    return line_col_to_offset(text, row, 0)


def motion_paragraph_forward(text: str, offset: int, count: int = 1) -> int:
    """Move to the blank line after the paragraph (} motion)."""
    return _repeat(_paragraph_forward, text, offset, count)


def motion_paragraph_backward(text: str, offset: int, count: int = 1) -> int:
    """Move to the first line of the paragraph above ({ motion)."""
    return _repeat(_paragraph_backward, text, offset, count)


# ─────────────────────────────────────────────────────────────────
# Find Character Motions (f, F, t, T, ;, ,)
# ─────────────────────────────────────────────────────────────────


def find_char(
    text: str,
    offset: int,
    char: str,
    count: int = 1,
    forward: bool = True,
    before: bool = False,
) -> int | None:
    """Find the count-th occurrence of char (f/F/t/T motion).

    Args:
        text: Buffer text
        offset: Cursor offset; the search starts next to it
        char: Character to find
        count: Which occurrence to stop at
        forward: Search towards the end of the buffer
        before: Stop one short of the match (t/T motion)

    Returns:
        New offset or None if fewer than count matches exist
    """
    if len(char) != 1:
        return None

    pos = clamp_offset(text, offset)
    for _ in range(max(1, count)):
        if forward:
            pos = text.find(char, pos + 1)
        else:
            pos = text.rfind(char, 0, pos) if pos > 0 else -1
        if pos < 0:
            return None

    if before:
        pos = pos - 1 if forward else pos + 1
    return clamp_offset(text, pos)


def repeat_char_search(
    text: str,
    offset: int,
    search: CharSearch | None,
    count: int = 1,
    reverse: bool = False,
) -> int | None:
    """Replay a stored search (; motion, or , with reverse set)."""
    if search is None:
        return None
    if reverse:
        search = search.reversed()
    return find_char(
        text, offset, search.target, count, forward=search.forward, before=search.before
    )


# ─────────────────────────────────────────────────────────────────
# Motion Registry - maps handler names from keymap to functions
# ─────────────────────────────────────────────────────────────────

MOTION_HANDLERS: dict[str, MotionFunc] = {
    "motion_left": motion_left,
    "motion_right": motion_right,
    "motion_up": motion_up,
    "motion_down": motion_down,
    "motion_line_start": motion_line_start,
    "motion_first_non_blank": motion_first_non_blank,
    "motion_line_end": motion_line_end,
    "motion_last_non_blank": motion_last_non_blank,
    "motion_word_forward": motion_word_forward,
    "motion_word_forward_big": motion_word_forward_big,
    "motion_word_end": motion_word_end,
    "motion_word_end_big": motion_word_end_big,
    "motion_word_backward": motion_word_backward,
    "motion_word_backward_big": motion_word_backward_big,
    "motion_word_end_backward": motion_word_end_backward,
    "motion_word_end_backward_big": motion_word_end_backward_big,
    "motion_goto_line": motion_goto_line,
    "motion_document_end": motion_document_end,
    "motion_paragraph_forward": motion_paragraph_forward,
    "motion_paragraph_backward": motion_paragraph_backward,
}

# Motions that replay the last f/F/t/T and need the engine's search memory
REPEAT_FIND_HANDLERS = {
    "motion_repeat_find": False,
    "motion_repeat_find_reverse": True,
}


def get_motion_handler(name: str) -> MotionFunc | None:
    """Get a motion function by handler name."""
    return MOTION_HANDLERS.get(name)


def is_motion_handler(name: str) -> bool:
    """Check if name refers to any motion the engine can dispatch."""
    return name in MOTION_HANDLERS or name in REPEAT_FIND_HANDLERS
