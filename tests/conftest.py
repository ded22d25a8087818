"""Pytest fixtures for modaledit tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="modaledit-test-config-"))
os.environ.setdefault("MODALEDIT_CONFIG_DIR", str(_TEST_CONFIG_DIR))


@pytest.fixture(autouse=True)
def _reset_vim_keymap():
    """Ensure a custom keymap does not leak between tests."""
    from modaledit.engine.keymap import reset_vim_keymap

    reset_vim_keymap()
    yield
    reset_vim_keymap()


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at a fresh temp dir."""
    monkeypatch.setenv("MODALEDIT_CONFIG_DIR", str(tmp_path))
    return tmp_path
