"""Settings file for snipe."""

from __future__ import annotations

import os
from pathlib import Path

from snipe.shared.core.store import CONFIG_DIR, JSONFileStore


def settings_path() -> Path:
    """`SNIPE_SETTINGS_PATH` when set, else `settings.json` in the config directory."""
    override = os.environ.get("SNIPE_SETTINGS_PATH", "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_DIR / "settings.json"


class SettingsStore(JSONFileStore):
    """Application settings, one section per component (snipe uses ``"snipe"``)."""

    def __init__(self, file_path: Path | None = None) -> None:
        super().__init__(file_path or settings_path())


def get_store() -> SettingsStore:
    # Resolved per call so a changed SNIPE_SETTINGS_PATH takes effect.
    return SettingsStore(settings_path())

