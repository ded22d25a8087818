"""Vim keymap configuration.

Defines all vim key bindings in a configurable way, handling
vim-specific concepts like:
- Motions (standalone cursor movement)
- Pending commands (f/t wait for a target character)
- Leader keys (g and z wait for a second key)
- Sequences completed after a leader (gg, ge, zz)
- Mode switches (i, a, :)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Mapping

from .exceptions import KeymapError
from .motions import is_motion_handler


class BindingType(Enum):
    """Type of vim key binding."""

    MOTION = auto()          # Movement command (h, j, w, etc.)
    ACTION = auto()          # Immediate action (i, a, A, etc.)
    MODE_SWITCH = auto()     # Mode change (:)
    PENDING = auto()         # Waits for next char (f, t, etc.)
    LEADER = auto()          # Waits for a suffix key (g, z)
    SCROLL = auto()          # Viewport request (zz, zt, zb)


@dataclass
class VimBinding:
    """Definition of a vim key binding."""

    key: str                          # Key or key sequence (e.g., "w", "gg", "zz")
    type: BindingType                 # Type of binding
    handler: str                      # Handler function name
    description: str = ""             # Human-readable description
    modes: tuple[str, ...] = ("normal",)  # Which modes this applies to
    counted: str = ""                 # Handler used instead when a count was typed


@dataclass
class VimKeymapConfig:
    """Configuration for vim keybindings.

    Can be overlaid from JSON via keymap_from_dict().
    """

    # ─────────────────────────────────────────────────────────────────
    # Motions - cursor movement commands
    # ─────────────────────────────────────────────────────────────────
    motions: dict[str, VimBinding] = field(default_factory=lambda: {
        # Basic cursor movement
        "h": VimBinding("h", BindingType.MOTION, "motion_left", "Left"),
        "l": VimBinding("l", BindingType.MOTION, "motion_right", "Right"),
        "j": VimBinding("j", BindingType.MOTION, "motion_down", "Down"),
        "k": VimBinding("k", BindingType.MOTION, "motion_up", "Up"),
        "left": VimBinding("left", BindingType.MOTION, "motion_left", "Left"),
        "right": VimBinding("right", BindingType.MOTION, "motion_right", "Right"),
        "down": VimBinding("down", BindingType.MOTION, "motion_down", "Down"),
        "up": VimBinding("up", BindingType.MOTION, "motion_up", "Up"),
        "backspace": VimBinding("backspace", BindingType.MOTION, "motion_left", "Left"),
        "space": VimBinding("space", BindingType.MOTION, "motion_right", "Right"),

        # Line position
        "0": VimBinding("0", BindingType.MOTION, "motion_line_start", "Line start"),
        "^": VimBinding("^", BindingType.MOTION, "motion_first_non_blank", "First non-blank"),
        "$": VimBinding("$", BindingType.MOTION, "motion_line_end", "Line end"),

        # Word motions
        "w": VimBinding("w", BindingType.MOTION, "motion_word_forward", "Next word"),
        "W": VimBinding("W", BindingType.MOTION, "motion_word_forward_big", "Next WORD"),
        "e": VimBinding("e", BindingType.MOTION, "motion_word_end", "Word end"),
        "E": VimBinding("E", BindingType.MOTION, "motion_word_end_big", "WORD end"),
        "b": VimBinding("b", BindingType.MOTION, "motion_word_backward", "Previous word"),
        "B": VimBinding("B", BindingType.MOTION, "motion_word_backward_big", "Previous WORD"),

        # Document position
        "G": VimBinding(
            "G", BindingType.MOTION, "motion_document_end", "Document end",
            counted="motion_goto_line",
        ),

        # Paragraphs
        "}": VimBinding("}", BindingType.MOTION, "motion_paragraph_forward", "Next paragraph"),
        "{": VimBinding("{", BindingType.MOTION, "motion_paragraph_backward", "Previous paragraph"),

        # Find char repeat
        ";": VimBinding(";", BindingType.MOTION, "motion_repeat_find", "Repeat f/t"),
        ",": VimBinding(",", BindingType.MOTION, "motion_repeat_find_reverse", "Repeat f/t reverse"),
    })

    # ─────────────────────────────────────────────────────────────────
    # Sequences - motions completed by a key after a leader
    # ─────────────────────────────────────────────────────────────────
    sequences: dict[str, VimBinding] = field(default_factory=lambda: {
        "gg": VimBinding("gg", BindingType.MOTION, "motion_goto_line", "Document start"),
        "ge": VimBinding("ge", BindingType.MOTION, "motion_word_end_backward", "Previous word end"),
        "gE": VimBinding("gE", BindingType.MOTION, "motion_word_end_backward_big", "Previous WORD end"),
        "g_": VimBinding("g_", BindingType.MOTION, "motion_last_non_blank", "Last non-blank"),
    })

    # ─────────────────────────────────────────────────────────────────
    # Actions - immediate commands
    # ─────────────────────────────────────────────────────────────────
    actions: dict[str, VimBinding] = field(default_factory=lambda: {
        # Insert mode entry
        "i": VimBinding("i", BindingType.ACTION, "action_insert", "Insert"),
        "I": VimBinding("I", BindingType.ACTION, "action_insert_line_start", "Insert at line start"),
        "a": VimBinding("a", BindingType.ACTION, "action_append", "Append"),
        "A": VimBinding("A", BindingType.ACTION, "action_append_line_end", "Append at line end"),
    })

    # ─────────────────────────────────────────────────────────────────
    # Mode switches
    # ─────────────────────────────────────────────────────────────────
    mode_switches: dict[str, VimBinding] = field(default_factory=lambda: {
        ":": VimBinding(":", BindingType.MODE_SWITCH, "mode_command", "Command mode"),
    })

    # ─────────────────────────────────────────────────────────────────
    # Pending commands (wait for next char)
    # ─────────────────────────────────────────────────────────────────
    pending: dict[str, VimBinding] = field(default_factory=lambda: {
        "f": VimBinding("f", BindingType.PENDING, "pending_find_forward", "Find forward"),
        "F": VimBinding("F", BindingType.PENDING, "pending_find_backward", "Find backward"),
        "t": VimBinding("t", BindingType.PENDING, "pending_till_forward", "Till forward"),
        "T": VimBinding("T", BindingType.PENDING, "pending_till_backward", "Till backward"),
    })

    # ─────────────────────────────────────────────────────────────────
    # Leader keys (wait for a suffix key)
    # ─────────────────────────────────────────────────────────────────
    leaders: dict[str, VimBinding] = field(default_factory=lambda: {
        "g": VimBinding("g", BindingType.LEADER, "leader_g", "Go to..."),
        "z": VimBinding("z", BindingType.LEADER, "leader_z", "Scroll..."),
    })

    # ─────────────────────────────────────────────────────────────────
    # Scroll requests (the host owns the viewport)
    # ─────────────────────────────────────────────────────────────────
    scroll: dict[str, VimBinding] = field(default_factory=lambda: {
        "zz": VimBinding("zz", BindingType.SCROLL, "scroll_center", "Cursor line to center"),
        "zt": VimBinding("zt", BindingType.SCROLL, "scroll_top", "Cursor line to top"),
        "zb": VimBinding("zb", BindingType.SCROLL, "scroll_bottom", "Cursor line to bottom"),
    })


SECTION_TYPES: dict[str, BindingType] = {
    "motions": BindingType.MOTION,
    "sequences": BindingType.MOTION,
    "actions": BindingType.ACTION,
    "mode_switches": BindingType.MODE_SWITCH,
    "pending": BindingType.PENDING,
    "leaders": BindingType.LEADER,
    "scroll": BindingType.SCROLL,
}

# Count-aware fallbacks kept when a handler is rebound from JSON
COUNTED_HANDLERS: dict[str, str] = {
    "motion_document_end": "motion_goto_line",
}

SECTION_HANDLERS: dict[str, set[str]] = {
    "actions": {"action_insert", "action_insert_line_start", "action_append", "action_append_line_end"},
    "mode_switches": {"mode_command"},
    "pending": {
        "pending_find_forward",
        "pending_find_backward",
        "pending_till_forward",
        "pending_till_backward",
    },
    "leaders": {"leader_g", "leader_z"},
    "scroll": {"scroll_center", "scroll_top", "scroll_bottom"},
}


def _is_known_handler(section: str, handler: str) -> bool:
    if section in ("motions", "sequences"):
        return is_motion_handler(handler)
    return handler in SECTION_HANDLERS[section]


def keymap_from_dict(data: Mapping[str, Any], base: VimKeymapConfig | None = None) -> VimKeymapConfig:
    """Overlay key -> handler mappings onto a keymap config.

    Args:
        data: Mapping of section name to {key: handler name or None}.
            A None handler unbinds the key.
        base: Config to start from (defaults to the built-in keymap).

    Raises:
        KeymapError: If a section, key or handler is invalid.
    """
    config = base or VimKeymapConfig()
    config = replace(config, **{name: dict(getattr(config, name)) for name in SECTION_TYPES})

    for section, entries in data.items():
        if section not in SECTION_TYPES:
            raise KeymapError(f"Unknown keymap section: {section}")
        if not isinstance(entries, Mapping):
            raise KeymapError(f"Keymap section '{section}' must be an object")

        bindings: dict[str, VimBinding] = getattr(config, section)
        for key, handler in entries.items():
            if not isinstance(key, str) or not key:
                raise KeymapError(f"Invalid key in '{section}': {key!r}")
            if handler is None:
                bindings.pop(key, None)
                continue
            if not isinstance(handler, str):
                raise KeymapError(f"Handler for '{key}' must be a string")
            if not _is_known_handler(section, handler):
                raise KeymapError(f"Unknown handler for '{key}': {handler}")
            bindings[key] = VimBinding(
                key,
                SECTION_TYPES[section],
                handler,
                counted=COUNTED_HANDLERS.get(handler, ""),
            )

    return config


class VimKeymapProvider(ABC):
    """Abstract base class for vim keymap providers."""

    @abstractmethod
    def get_config(self) -> VimKeymapConfig:
        """Get the keymap configuration."""
        pass

    def get_motion(self, key: str) -> VimBinding | None:
        """Get motion binding for a key."""
        return self.get_config().motions.get(key)

    def lookup(self, key: str, mode: str = "normal") -> VimBinding | None:
        """Look up any single-key binding for a key in the given mode."""
        config = self.get_config()

        # Check each category
        for bindings in [
            config.motions,
            config.actions,
            config.mode_switches,
            config.pending,
            config.leaders,
        ]:
            if key in bindings:
                binding = bindings[key]
                if mode in binding.modes or not binding.modes:
                    return binding

        return None

    def lookup_sequence(self, sequence: str) -> VimBinding | None:
        """Look up a leader sequence (gg, ge, zz, ...)."""
        config = self.get_config()
        return config.sequences.get(sequence) or config.scroll.get(sequence)


class DefaultVimKeymapProvider(VimKeymapProvider):
    """Default vim keymap with standard bindings."""

    def __init__(self, config: VimKeymapConfig | None = None) -> None:
        self._config = config or VimKeymapConfig()

    def get_config(self) -> VimKeymapConfig:
        return self._config


# Global vim keymap instance
_vim_keymap_provider: VimKeymapProvider | None = None


def get_vim_keymap() -> VimKeymapProvider:
    """Get the current vim keymap provider."""
    global _vim_keymap_provider
    if _vim_keymap_provider is None:
        _vim_keymap_provider = DefaultVimKeymapProvider()
    return _vim_keymap_provider


def set_vim_keymap(provider: VimKeymapProvider) -> None:
    """Set the vim keymap provider (for testing or custom keymaps)."""
    global _vim_keymap_provider
    _vim_keymap_provider = provider


def reset_vim_keymap() -> None:
    """Reset to default vim keymap provider."""
    global _vim_keymap_provider
    _vim_keymap_provider = None
