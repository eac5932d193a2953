"""
Display preferences kept in a local JSON file.
"""

import json
import os
from dataclasses import dataclass
from typing import Any

from cardmate.exceptions import ValidationError
from cardmate.utils.logging_utils import EnhancedLoggerMixin

FONT_SIZES = ('small', 'medium', 'large')


@dataclass(frozen=True)
class Preferences:
    dark_mode: bool = False
    font_size: str = 'medium'

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Preferences":
        """Read stored values; anything unrecognized falls back to the default."""
        font_size = data.get('fontSize')
        return cls(
            dark_mode=data.get('darkMode') is True,
            font_size=font_size if font_size in FONT_SIZES else 'medium',
        )

    def to_dict(self) -> dict[str, Any]:
        return {'darkMode': self.dark_mode, 'fontSize': self.font_size}

class PreferencesService(EnhancedLoggerMixin):
    """Loads preferences once and writes the file on every change."""

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self._preferences = self._load()

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    def _load(self) -> Preferences:
        if not os.path.exists(self.path):
            return Preferences()
        try:
            with open(self.path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.warning("Unreadable preferences file, using defaults", path=self.path, error=str(e))
            return Preferences()
        if not isinstance(data, dict):
            return Preferences()
        return Preferences.from_dict(data)

    def _save(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(self._preferences.to_dict(), f, indent=2)
        self.debug("Preferences saved", path=self.path)

    def set_dark_mode(self, enabled: bool) -> Preferences:
        self._preferences = Preferences(bool(enabled), self._preferences.font_size)
        self._save()
        return self._preferences

    def toggle_dark_mode(self) -> Preferences:
        return self.set_dark_mode(not self._preferences.dark_mode)

    def set_font_size(self, font_size: str) -> Preferences:
        font_size = font_size.strip().lower()
        if font_size not in FONT_SIZES:
            raise ValidationError(f"Invalid font size: {font_size!r}", {"allowed": list(FONT_SIZES)})
        self._preferences = Preferences(self._preferences.dark_mode, font_size)
        self._save()
        return self._preferences
