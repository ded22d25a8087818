"""Tests for the VimEngine mode state machine."""

from __future__ import annotations

import pytest

from modaledit.engine import (
    CommandAction,
    DefaultVimKeymapProvider,
    KeyEvent,
    VimEngine,
    VimMode,
    keymap_from_dict,
)

TEXT = "hello world\nfoo bar\n\nbaz"
RAGGED = "abcdef\nab\nabcdef"
DASHES = "a-b-c-d"


@pytest.fixture
def engine() -> VimEngine:
    return VimEngine()


class TestScenario:
    """The reference walk over a small two-paragraph buffer."""

    def test_word_forward_twice(self, engine):
        cursor = engine.handle_tick(["w"], TEXT, 0)
        assert cursor == 6
        assert engine.handle_tick(["w"], TEXT, cursor) == 12

    def test_paragraph_forward(self, engine):
        assert engine.handle_tick(["}"], TEXT, 0) == 20

    def test_line_end(self, engine):
        assert engine.handle_tick(["$"], TEXT, 12) == 18

    def test_line_start(self, engine):
        assert engine.handle_tick(["0"], TEXT, 16) == 12

    def test_whole_walk_in_one_tick(self, engine):
        assert engine.handle_tick(["w", "w", "$", "0"], TEXT, 0) == 12
        assert engine.cursor == 12

    def test_tick_never_changes_text(self, engine):
        text = TEXT
        engine.handle_tick(["w", "i", "x", "escape", "}"], text, 0)
        assert text == TEXT
        assert engine.text == TEXT

    def test_cursor_from_host_is_clamped(self, engine):
        assert engine.handle_tick([], "abc", 99) == 3


class TestInsertMode:
    def test_escape_retreats_one(self, engine):
        assert engine.handle_tick(["i", "escape"], "ab", 2) == 1
        assert engine.mode == VimMode.NORMAL

    def test_escape_at_start_stays(self, engine):
        assert engine.handle_tick(["i", "escape"], "ab", 0) == 0

    @pytest.mark.parametrize("key", ["escape", "ctrl+[", "ctrl+c"])
    def test_escape_keys(self, engine, key):
        engine.handle_tick(["i"], "ab", 1)
        assert engine.mode == VimMode.INSERT
        engine.handle_tick([key], "ab", 1)
        assert engine.mode == VimMode.NORMAL

    def test_insert_keys_left_to_host(self, engine):
        engine.sync("ab", 0)
        engine.handle_key("i")
        result = engine.handle_key("w")
        assert not result.consumed
        assert engine.cursor == 0

    def test_entering_insert_clears_count(self, engine):
        engine.handle_tick(["3", "i"], "ab", 0)
        assert not engine.state.count.pending
        assert engine.mode_string == "INSERT"

    def test_insert_line_start(self, engine):
        assert engine.handle_tick(["I"], "   abc", 5) == 3
        assert engine.mode == VimMode.INSERT

    def test_append(self, engine):
        assert engine.handle_tick(["a"], "abc", 2) == 3

    def test_append_does_not_leave_line(self, engine):
        assert engine.handle_tick(["a"], "ab\ncd", 2) == 2

    def test_append_line_end(self, engine):
        assert engine.handle_tick(["A"], "abc\ndef", 0) == 3

    def test_mode_callback(self, engine):
        modes = []
        engine.set_mode_callback(modes.append)
        engine.handle_tick(["i", "escape"], "ab", 1)
        assert modes == [VimMode.INSERT, VimMode.NORMAL]


class TestCounts:
    def test_multi_digit_count(self, engine):
        assert engine.handle_tick(["1", "0", "l"], "x" * 30, 0) == 10

    def test_mode_string_shows_count(self, engine):
        engine.handle_tick(["1", "0"], "x" * 30, 0)
        assert engine.mode_string == "NORMAL - 10"

    def test_lone_zero_is_line_start(self, engine):
        assert engine.handle_tick(["0"], TEXT, 16) == 12
        assert not engine.state.count.pending

    def test_zero_after_digit_is_count(self, engine):
        assert engine.handle_tick(["2", "0", "l"], "x" * 30, 0) == 20

    def test_count_cleared_after_motion(self, engine):
        assert engine.handle_tick(["3", "l", "l"], "x" * 30, 0) == 4
        assert engine.mode_string == "NORMAL"

    def test_counted_jump_uses_source_column(self, engine):
        """2j is one jump; j,j steps through the clamped column of the short line."""
        assert engine.handle_tick(["2", "j"], RAGGED, 4) == 14
        assert engine.handle_tick(["j", "j"], RAGGED, 4) == 12

    def test_escape_clears_count(self, engine):
        assert engine.handle_tick(["5", "escape", "l"], "x" * 30, 0) == 1

    def test_unbound_key_keeps_count(self, engine):
        engine.sync("x" * 30, 0)
        engine.handle_key("3")
        result = engine.handle_key("Q")
        assert not result.consumed
        assert engine.mode_string == "NORMAL - 3"
        engine.handle_key("l")
        assert engine.cursor == 3

    def test_word_forward_saturates(self, engine):
        assert engine.handle_tick(["9", "9", "w"], TEXT, 0) == len(TEXT)


class TestDocumentMotions:
    def test_g_alone_goes_to_last_line(self, engine):
        assert engine.handle_tick(["G"], TEXT, 0) == 21

    def test_counted_g_goes_to_line(self, engine):
        assert engine.handle_tick(["2", "G"], TEXT, 0) == 12

    def test_gg(self, engine):
        assert engine.handle_tick(["g", "g"], TEXT, 23) == 0

    def test_counted_gg(self, engine):
        assert engine.handle_tick(["3", "g", "g"], TEXT, 0) == 20

    def test_ge(self, engine):
        assert engine.handle_tick(["g", "e"], "foo bar", 4) == 2

    def test_unknown_leader_suffix_clears_count(self, engine):
        assert engine.handle_tick(["5", "g", "q", "l"], "x" * 30, 0) == 1
        assert engine.mode == VimMode.NORMAL


class TestParagraphs:
    def test_backward_lands_on_first_line_of_paragraph(self, engine):
        assert engine.handle_tick(["{"], "a\nb\n\nc\nd", 7) == 5

    def test_backward_twice_reaches_previous_paragraph(self, engine):
        assert engine.handle_tick(["{", "{"], "a\nb\n\nc\nd", 7) == 0

    def test_counted_backward_matches_repeated_presses(self, engine):
        assert engine.handle_tick(["2", "{"], "a\nb\n\nc\nd", 7) == 0


class TestScroll:
    @pytest.mark.parametrize("suffix, target", [("z", "center"), ("t", "top"), ("b", "bottom")])
    def test_scroll_requests(self, engine, suffix, target):
        requests = []
        engine.set_scroll_callback(requests.append)
        engine.sync(TEXT, 12)
        engine.handle_key("z")
        result = engine.handle_key(suffix)
        assert result.scroll == target
        assert requests == [target]
        assert engine.cursor == 12

    def test_scroll_clears_count(self, engine):
        engine.handle_tick(["4", "z", "z"], TEXT, 0)
        assert not engine.state.count.pending


class TestCharSearch:
    def test_find_forward(self, engine):
        assert engine.handle_tick(["f", "-"], DASHES, 0) == 1

    def test_counted_find(self, engine):
        assert engine.handle_tick(["2", "f", "-"], DASHES, 0) == 3

    def test_find_backward(self, engine):
        assert engine.handle_tick(["F", "-"], DASHES, 6) == 5

    def test_till_forward(self, engine):
        assert engine.handle_tick(["t", "c"], DASHES, 0) == 3

    def test_till_backward(self, engine):
        assert engine.handle_tick(["T", "b"], DASHES, 6) == 3

    def test_failed_search_is_inert(self, engine):
        assert engine.handle_tick(["f", "z"], "hello", 1) == 1
        assert engine.state.last_char_search is None

    def test_failed_search_keeps_memory(self, engine):
        cursor = engine.handle_tick(["f", "l"], "hello", 0)
        assert cursor == 2
        cursor = engine.handle_tick(["f", "z"], "hello", cursor)
        assert cursor == 2
        assert engine.handle_tick([";"], "hello", cursor) == 3

    def test_repeat_and_reverse(self, engine):
        cursor = engine.handle_tick(["f", "-", ";"], DASHES, 0)
        assert cursor == 3
        cursor = engine.handle_tick([","], DASHES, cursor)
        assert cursor == 1
        # , never rewrites the stored direction
        assert engine.handle_tick([";"], DASHES, cursor) == 3

    def test_counted_repeat(self, engine):
        assert engine.handle_tick(["f", "-", "2", ";"], DASHES, 0) == 5

    def test_repeat_without_memory_does_nothing(self, engine):
        assert engine.handle_tick([";", ","], DASHES, 2) == 2

    def test_search_crosses_lines(self, engine):
        assert engine.handle_tick(["f", "z"], TEXT, 0) == 23

    def test_non_character_cancels(self, engine):
        assert engine.handle_tick(["3", "f", "escape", "l"], DASHES, 0) == 1
        assert engine.mode == VimMode.NORMAL
        assert engine.state.last_char_search is None

    def test_search_for_space(self, engine):
        assert engine.handle_tick(["f", KeyEvent("space", " ")], TEXT, 0) == 5


class TestCommandMode:
    def test_colon_enters_command_mode(self, engine):
        started = []
        engine.set_command_callback(started.append)
        engine.sync(TEXT, 0)
        result = engine.handle_key(":")
        assert result.show_command_line
        assert engine.mode == VimMode.COMMAND
        assert engine.mode_string == "COMMAND"
        assert started == [":"]

    def test_command_line_updates(self, engine):
        updates = []
        engine.set_command_update_callback(updates.append)
        engine.handle_tick([":", "w", "q"], TEXT, 0)
        assert updates == [":w", ":wq"]
        assert engine.command_buffer == "wq"

    def test_enter_executes(self, engine):
        engine.sync(TEXT, 0)
        for key in (":", "q"):
            engine.handle_key(key)
        result = engine.handle_key("enter")
        assert result.command_action == CommandAction.QUIT
        assert engine.mode == VimMode.NORMAL

    def test_write_argument(self, engine):
        engine.sync(TEXT, 0)
        for key in (":", "w", "space", "a", ".", "t", "x", "t"):
            engine.handle_key(key)
        result = engine.handle_key("enter")
        assert result.command_action == CommandAction.WRITE
        assert result.command_argument == "a.txt"

    def test_goto_line(self, engine):
        assert engine.handle_tick([":", "2", "enter"], TEXT, 0) == 12

    def test_unknown_command(self, engine):
        engine.sync(TEXT, 0)
        for key in (":", "z", "z"):
            engine.handle_key(key)
        result = engine.handle_key("enter")
        assert result.error
        assert result.message == "Unknown command: zz"

    def test_escape_cancels(self, engine):
        engine.sync(TEXT, 0)
        for key in (":", "w"):
            engine.handle_key(key)
        result = engine.handle_key("escape")
        assert result.command_action is None
        assert engine.mode == VimMode.NORMAL

    def test_backspace_on_empty_buffer_leaves(self, engine):
        engine.handle_tick([":", "w", "backspace"], TEXT, 0)
        assert engine.mode == VimMode.COMMAND
        engine.handle_tick(["backspace"], TEXT, 0)
        assert engine.mode == VimMode.NORMAL

    def test_motion_keys_are_text_in_command_mode(self, engine):
        assert engine.handle_tick([":", "w", "j"], TEXT, 0) == 0
        assert engine.command_buffer == "wj"


class TestKeyEvents:
    def test_character_wins_over_key_name(self, engine):
        assert engine.handle_tick([KeyEvent("dollar_sign", "$")], TEXT, 12) == 18

    def test_escape_alias(self, engine):
        engine.handle_tick(["i", KeyEvent("ctrl+left_square_bracket", None)], "ab", 1)
        assert engine.mode == VimMode.NORMAL

    def test_space_is_a_motion(self, engine):
        assert engine.handle_tick([KeyEvent("space", " ")], TEXT, 0) == 1


class TestCustomKeymap:
    def test_engine_uses_given_keymap(self):
        keymap = DefaultVimKeymapProvider(keymap_from_dict({"motions": {"n": "motion_down"}}))
        engine = VimEngine(keymap=keymap)
        assert engine.handle_tick(["n"], TEXT, 2) == 14

    def test_unbound_motion_is_ignored(self):
        keymap = DefaultVimKeymapProvider(keymap_from_dict({"motions": {"w": None}}))
        engine = VimEngine(keymap=keymap)
        assert engine.handle_tick(["w"], TEXT, 0) == 0

    def test_rebound_leader_keeps_its_sequences(self):
        keymap = DefaultVimKeymapProvider(keymap_from_dict({"leaders": {"g": None, "q": "leader_g"}}))
        engine = VimEngine(keymap=keymap)
        assert engine.handle_tick(["q", "g"], "abc\ndef", 5) == 0
        assert engine.handle_tick(["q", "e"], "foo bar", 4) == 2

    def test_rebound_scroll_leader(self):
        keymap = DefaultVimKeymapProvider(keymap_from_dict({"leaders": {"s": "leader_z"}}))
        engine = VimEngine(keymap=keymap)
        engine.sync(TEXT, 0)
        engine.handle_key("s")
        assert engine.handle_key("t").scroll == "top"

    def test_bound_digit_runs_its_binding(self):
        keymap = DefaultVimKeymapProvider(keymap_from_dict({"motions": {"5": "motion_down"}}))
        engine = VimEngine(keymap=keymap)
        assert engine.handle_tick(["5"], "ab\ncd", 0) == 3
        assert engine.mode_string == "NORMAL"

    def test_unbound_digits_still_count(self):
        keymap = DefaultVimKeymapProvider(keymap_from_dict({"motions": {"5": "motion_down"}}))
        engine = VimEngine(keymap=keymap)
        assert engine.handle_tick(["2", "0", "l"], "x" * 30, 0) == 20


class TestEmptyBuffer:
    @pytest.mark.parametrize(
        "keys",
        [
            ["h"], ["l"], ["j"], ["k"], ["0"], ["^"], ["$"],
            ["w"], ["W"], ["e"], ["E"], ["b"], ["B"],
            ["g", "e"], ["g", "E"], ["g", "_"], ["g", "g"], ["G"], ["3", "G"],
            ["}"], ["{"], ["f", "a"], ["T", "a"], [";"], [","],
            ["5", "w"], ["a"], ["A"], ["I"],
        ],
    )
    def test_every_motion_stays_at_zero(self, engine, keys):
        assert engine.handle_tick(keys, "", 0) == 0
