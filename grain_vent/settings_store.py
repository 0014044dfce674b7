"""
Settings Store for Grain Vent

Persists the operator's settings between runs as a small JSON file:

- offset: expected fan/plenum temperature rise in Celsius (default 0)
- last_location: the last location a forecast was run for

A missing or corrupt file is not an error: defaults are returned and a
warning is logged. Write failures propagate to the caller.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from grain_vent.providers.caiyun import Location

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("outputs/settings.json")


@dataclass
class AppSettings:
    offset: float = 0.0
    last_location: Optional[Location] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"offset": self.offset}
        if self.last_location is not None:
            data["last_location"] = dict(self.last_location)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppSettings":
        location = data.get("last_location")
        if location is not None and not _is_location(location):
            logger.warning(f"[AppSettings] Ignoring malformed stored location: {location}")
            location = None

        return cls(
            offset=float(data.get("offset", 0.0)),
            last_location=location,
        )


def _is_location(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and isinstance(value.get("latitude"), (int, float))
        and isinstance(value.get("longitude"), (int, float))
    )


class SettingsStore:
    """JSON-file backed settings persistence."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        if path is None:
            path = os.getenv("GRAIN_VENT_SETTINGS", str(DEFAULT_SETTINGS_PATH))
        self.path = Path(path)

    def load_settings(self) -> AppSettings:
        """Stored settings, or defaults if none can be read."""
        if not self.path.exists():
            logger.debug(f"[SettingsStore] No settings file at {self.path}, using defaults")
            return AppSettings()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            settings = AppSettings.from_dict(data)
        except (OSError, json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"[SettingsStore] Failed to read {self.path}: {e}")
            return AppSettings()

        logger.debug(f"[SettingsStore] Loaded settings from {self.path}")
        return settings

    def save_settings(self, settings: AppSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info(f"[SettingsStore] Saved settings to {self.path}")

    def get_offset(self) -> float:
        return self.load_settings().offset

    def save_offset(self, offset: float) -> None:
        settings = self.load_settings()
        settings.offset = float(offset)
        self.save_settings(settings)

    def get_last_location(self) -> Optional[Location]:
        return self.load_settings().last_location

    def save_last_location(self, location: Location) -> None:
        settings = self.load_settings()
        settings.last_location = location
        self.save_settings(settings)

    def clear(self) -> None:
        """Remove all stored settings."""
        if self.path.exists():
            self.path.unlink()
            logger.info(f"[SettingsStore] Cleared {self.path}")
