"""Tests for offset <-> (line, column) translation."""

import pytest

from modaledit.engine.address import (
    clamp_offset,
    line_col_to_offset,
    line_start_offset,
    offset_to_line_col,
    split_lines,
)

TEXT = "hello world\nfoo bar\n\nbaz"


class TestOffsetToLineCol:
    """Tests for offset_to_line_col."""

    def test_start_of_text(self):
        assert offset_to_line_col(TEXT, 0) == (0, 0)

    def test_newline_belongs_to_its_line(self):
        """The newline sits at the end slot of the line it terminates."""
        assert offset_to_line_col(TEXT, 11) == (0, 11)

    def test_start_of_second_line(self):
        assert offset_to_line_col(TEXT, 12) == (1, 0)

    def test_empty_line(self):
        assert offset_to_line_col(TEXT, 20) == (2, 0)

    def test_end_of_text(self):
        assert offset_to_line_col(TEXT, len(TEXT)) == (3, 3)

    def test_past_end_degenerates_to_last_line(self):
        assert offset_to_line_col(TEXT, len(TEXT) + 5) == (3, 0)

    def test_negative_offset_treated_as_zero(self):
        assert offset_to_line_col(TEXT, -3) == (0, 0)

    def test_empty_text(self):
        assert offset_to_line_col("", 0) == (0, 0)


class TestLineColToOffset:
    """Tests for line_col_to_offset."""

    def test_column_clamped_to_line_length(self):
        assert line_col_to_offset(TEXT, 1, 100) == 19

    def test_line_past_last_maps_to_end(self):
        assert line_col_to_offset(TEXT, 9, 0) == len(TEXT)

    def test_negative_line_maps_to_zero(self):
        assert line_col_to_offset(TEXT, -1, 3) == 0

    def test_empty_line(self):
        assert line_col_to_offset(TEXT, 2, 5) == 20

    def test_line_start_offset(self):
        assert line_start_offset(TEXT, 3) == 21

    @pytest.mark.parametrize(
        "text",
        ["", "a", "\n", "\n\n", "hello world\nfoo bar\n\nbaz", "tab\there\r\nwindows", "ünïcödé\n日本語"],
    )
    def test_round_trip(self, text):
        """Every offset survives a trip through (line, col)."""
        for offset in range(len(text) + 1):
            assert line_col_to_offset(text, *offset_to_line_col(text, offset)) == offset


class TestHelpers:
    """Tests for the small address helpers."""

    def test_split_lines_keeps_trailing_empty_line(self):
        assert split_lines("a\n") == ["a", ""]

    def test_split_lines_empty_text(self):
        assert split_lines("") == [""]

    def test_clamp_offset(self):
        assert clamp_offset("abc", -1) == 0
        assert clamp_offset("abc", 2) == 2
        assert clamp_offset("abc", 10) == 3
