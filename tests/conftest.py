"""Pytest fixtures for snipe tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="snipe-test-config-"))
os.environ.setdefault("SNIPE_CONFIG_DIR", str(_TEST_CONFIG_DIR))


@pytest.fixture(autouse=True)
def reset_keymap_after_test():
    """Reset keymap after each test to avoid cross-test pollution."""
    from snipe.core.keymap import reset_keymap

    yield
    reset_keymap()


@pytest.fixture
def settings_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings store at a throwaway file."""
    path = tmp_path / "settings.json"
    monkeypatch.setenv("SNIPE_SETTINGS_PATH", str(path))
    return path
