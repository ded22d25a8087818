"""Character classes for word and WORD motions."""

from __future__ import annotations

from enum import Enum, auto


class RunKind(Enum):
    """Kind of run a character belongs to."""

    WORD = auto()   # Alphanumeric or underscore
    PUNCT = auto()  # Anything else that is not whitespace
    SPACE = auto()  # Whitespace, newlines included


def is_word_char(char: str) -> bool:
    """Check if char is a word character (vim 'word')."""
    return char.isalnum() or char == "_"


def char_class(char: str, big_word: bool = False) -> RunKind:
    """Classify a character.

    With big_word set, punctuation collapses into WORD so that runs are
    only broken by whitespace.
    """
    if char.isspace():
        return RunKind.SPACE
    if big_word or is_word_char(char):
        return RunKind.WORD
    return RunKind.PUNCT
