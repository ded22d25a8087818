"""Textual host for the modal editor."""

from .app import ModalEditApp
from .widgets import ModalTextArea, VimCommandLine

__all__ = ["ModalEditApp", "ModalTextArea", "VimCommandLine"]
