"""Offset <-> (line, column) translation.

The engine addresses the buffer by a single linear offset counted in
characters. Hosts such as Textual's TextArea address it by (row, col).
These helpers convert between the two over a snapshot of the text.
"""

from __future__ import annotations


def split_lines(text: str) -> list[str]:
    """Split text into lines. Always returns at least one (possibly empty) line."""
    return text.split("\n")


def clamp_offset(text: str, offset: int) -> int:
    """Clamp an offset into [0, len(text)]."""
    return max(0, min(offset, len(text)))


def line_start_offset(text: str, line: int) -> int:
    """Get the offset of column 0 of a line."""
    return line_col_to_offset(text, line, 0)


def offset_to_line_col(text: str, offset: int) -> tuple[int, int]:
    """Convert a character offset into a zero-based (line, col) pair.

    Each line contributes its length plus one for the newline. An offset
    past the end of the text degenerates to the last line, column 0.
    """
    offset = max(0, offset)
    lines = split_lines(text)
    start = 0

    for row, line in enumerate(lines):
        end = start + len(line)
        if offset <= end:
            return (row, offset - start)
        start = end + 1

    return (len(lines) - 1, 0)


def line_col_to_offset(text: str, line: int, col: int) -> int:
    """Convert a (line, col) pair into a character offset.

    The column is clamped to the line's length. A line past the last one
    maps to the end of the text.
    """
    if line < 0:
        return 0

    lines = split_lines(text)
    if line >= len(lines):
        return len(text)

    start = sum(len(prev) + 1 for prev in lines[:line])
    return start + max(0, min(col, len(lines[line])))
