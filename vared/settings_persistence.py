"""Persistent user settings for the editor.

Settings live in a JSON file in the OS-appropriate config directory and
survive restarts.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "show_line_numbers": True,
}


class SettingsPersistence:
    """Loads and saves the editor's settings file.

    Unknown keys found on disk are kept so that newer versions can add
    settings without older versions discarding them.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path(platformdirs.user_config_dir(EditorConstants.SETTINGS_APP_NAME))
        self._config_dir = Path(config_dir)
        self._settings_file = self._config_dir / EditorConstants.SETTINGS_FILENAME
        self._settings_cache: Optional[Dict[str, Any]] = None

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def _load_from_disk(self) -> Dict[str, Any]:
        if self._settings_cache is not None:
            return self._settings_cache

        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            data = {}

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}

        self._settings_cache = data
        return self._settings_cache

    def load(self) -> Dict[str, Any]:
        """Return the settings merged over the defaults.

        Values of the wrong type fall back to their default.
        """
        settings = dict(DEFAULT_SETTINGS)
        for key, value in self._load_from_disk().items():
            if self.validate_setting(key, value):
                settings[key] = value
            else:
                logger.warning(f"Ignoring invalid value for setting {key!r}: {value!r}")
        return settings

    def save(self, settings: Dict[str, Any]) -> bool:
        """Write settings to disk atomically.

        Returns:
            True if the file was written.
        """
        merged = dict(self._load_from_disk())
        merged.update(settings)

        self._ensure_config_dir()
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(merged, f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

        self._settings_cache = merged
        return True

    def get(self, key: str) -> Any:
        return self.load().get(key)

    def set(self, key: str, value: Any) -> bool:
        return self.save({key: value})

    @staticmethod
    def validate_setting(key: str, value: Any) -> bool:
        if key == "show_line_numbers":
            return isinstance(value, bool)
        # Unknown settings are considered valid (forward compatibility)
        return True

    def clear_cache(self) -> None:
        self._settings_cache = None


_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Return the process-wide SettingsPersistence."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
