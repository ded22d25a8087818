"""Configuration management for modaledit.

Settings live in a JSON object at ~/.modaledit/settings.json. The config
directory can be overridden via the MODALEDIT_CONFIG_DIR environment
variable (used by the test suite).
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "MODALEDIT_CONFIG_DIR"
VIM_KEYMAP_SETTINGS_KEY = "vim_keymap"


def get_config_dir() -> Path:
    """Get the config directory, honouring MODALEDIT_CONFIG_DIR."""
    override = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".modaledit"


def get_settings_path() -> Path:
    return get_config_dir() / "settings.json"


def get_keymap_dir() -> Path:
    """Directory holding named custom keymaps (<name>.json)."""
    return get_config_dir() / "keymaps"


class JSONFileStore:
    """Base class for JSON file-backed stores.

    Provides common file I/O operations with error handling.
    """

    def __init__(self, file_path: Path):
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        """Get the store's file path."""
        return self._file_path

    def _ensure_dir(self) -> None:
        """Ensure the config directory exists with owner-only access."""
        dir_path = self._file_path.parent
        dir_path.mkdir(parents=True, exist_ok=True)
        try:
            os.chmod(dir_path, 0o700)
        except OSError:
            pass  # Not supported on every platform

    def _read_json(self) -> Any:
        """Read and parse JSON from file.

        Returns:
            Parsed JSON data, or None if file doesn't exist or is invalid.
        """
        if not self._file_path.exists():
            return None
        try:
            with open(self._file_path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, TypeError, UnicodeDecodeError):
            return None

    def _write_json(self, data: Any) -> None:
        """Write data as JSON to file atomically.

        Writes to a temp file in the same directory, restricts it to the
        owner (0600) and renames it over the target.
        """
        self._ensure_dir()
        fd, tmp_path = tempfile.mkstemp(
            dir=self._file_path.parent,
            prefix=".tmp_",
            suffix=".json",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._file_path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise


class SettingsStore(JSONFileStore):
    """Store for application settings."""

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or get_settings_path())

    def load_all(self) -> dict[str, Any]:
        """Load all settings.

        Returns:
            Dictionary of settings, or empty dict if none exist.
        """
        data = self._read_json()
        return data if isinstance(data, dict) else {}

    def save_all(self, settings: dict[str, Any]) -> None:
        """Save all settings, replacing existing."""
        self._write_json(settings)
