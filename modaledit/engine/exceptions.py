"""Custom exceptions for the vim engine."""


class KeymapError(ValueError):
    """Exception raised when a custom vim keymap cannot be applied."""
