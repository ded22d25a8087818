"""Keymap management utilities for modaledit."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Protocol

from modaledit.config import VIM_KEYMAP_SETTINGS_KEY, SettingsStore, get_keymap_dir
from modaledit.engine.exceptions import KeymapError
from modaledit.engine.keymap import (
    DefaultVimKeymapProvider,
    keymap_from_dict,
    reset_vim_keymap,
    set_vim_keymap,
)


class SettingsStoreProtocol(Protocol):
    """Anything that can hand back the settings dictionary."""

    def load_all(self) -> dict[str, Any]: ...


class FileBasedVimKeymapProvider(DefaultVimKeymapProvider):
    """Vim keymap provider loaded from a JSON file."""

    def __init__(self, name: str, data: dict[str, Any]):
        super().__init__(keymap_from_dict(data))
        self._name = name

    @property
    def name(self) -> str:
        """Get the keymap name."""
        return self._name


class KeymapManager:
    """Centralized keymap handling for the app."""

    def __init__(
        self,
        settings_store: SettingsStoreProtocol | None = None,
    ) -> None:
        self._settings_store = settings_store or SettingsStore()
        self._custom_keymap_name: str | None = None
        self._custom_keymap_path: Path | None = None

    def initialize(self) -> dict:
        """Initialize keymap from settings.

        Returns:
            The loaded settings dictionary.
        """
        settings = self._settings_store.load_all()
        self.load_custom_keymap(settings)
        return settings

    def load_custom_keymap(self, settings: dict) -> None:
        """Load custom keymap from settings if specified.

        Failures are reported on stderr and the default keymap stays active.

        Args:
            settings: Settings dictionary containing the vim_keymap key.
        """
        keymap_name = settings.get(VIM_KEYMAP_SETTINGS_KEY)
        if not keymap_name or not isinstance(keymap_name, str):
            return
        if keymap_name.strip() in ("", "default"):
            return

        try:
            path = self._resolve_keymap_path(keymap_name.strip())
            self._register_custom_keymap(path, keymap_name.strip())
        except (OSError, ValueError) as exc:
            print(
                f"[modaledit] Failed to load custom keymap '{keymap_name}': {exc}",
                file=sys.stderr,
            )

    def _resolve_keymap_path(self, keymap_name: str) -> Path:
        """Resolve keymap name to file path.

        Args:
            keymap_name: Name of the keymap (without .json extension), or a path.

        Returns:
            Path to the keymap JSON file.
        """
        if keymap_name.startswith(("~", "/")) or Path(keymap_name).is_absolute():
            return Path(keymap_name).expanduser()

        name = Path(keymap_name).stem
        return get_keymap_dir() / f"{name}.json"

    def _register_custom_keymap(self, path: Path, keymap_name: str) -> None:
        """Load and register a custom keymap from file.

        Raises:
            KeymapError: If the keymap file is missing or invalid.
        """
        path = path.expanduser()
        if not path.exists():
            raise KeymapError(f"Keymap file not found: {path}")

        keymap = self._load_keymap_from_file(path, keymap_name)
        set_vim_keymap(keymap)
        self._custom_keymap_name = keymap_name
        self._custom_keymap_path = path.resolve()

    def _load_keymap_from_file(self, path: Path, keymap_name: str) -> FileBasedVimKeymapProvider:
        """Load keymap data from JSON file.

        Raises:
            KeymapError: If the JSON is invalid or has the wrong shape.
        """
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise KeymapError(f"Failed to read keymap JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise KeymapError("Keymap file must contain a JSON object.")

        keymap_data = payload.get("keymap", payload)
        if not isinstance(keymap_data, dict):
            raise KeymapError('Keymap file "keymap" must be a JSON object.')

        return FileBasedVimKeymapProvider(keymap_name, keymap_data)

    def get_custom_keymap_name(self) -> str | None:
        """Get the name of the currently loaded custom keymap.

        Returns:
            Keymap name or None if using default keymap.
        """
        return self._custom_keymap_name

    def get_custom_keymap_path(self) -> Path | None:
        """Get the path to the currently loaded custom keymap file."""
        return self._custom_keymap_path

    def reset_to_default(self) -> None:
        """Reset to the default keymap."""
        reset_vim_keymap()
        self._custom_keymap_name = None
        self._custom_keymap_path = None
