import logging
import sqlite3
from dataclasses import fields, replace

from database.db_manager import DatabaseManager, StoreError
from models.settings import AppSettings

logger = logging.getLogger(__name__)


def _to_bool(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes")


def _to_weekday(value: str) -> int:
    try:
        day = int(value)
    except (TypeError, ValueError):
        return 0
    return day if 0 <= day <= 6 else 0


class SettingsService:
    """Reads and writes AppSettings through the app_settings key/value table."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def load(self) -> AppSettings:
        defaults = AppSettings()
        return AppSettings(
            currency_symbol=self._db.get_setting("currency_symbol", defaults.currency_symbol)
            or defaults.currency_symbol,
            notifications_enabled=_to_bool(self._db.get_setting("notifications_enabled", "0")),
            dark_mode=_to_bool(self._db.get_setting("dark_mode", "0")),
            app_lock_enabled=_to_bool(self._db.get_setting("app_lock_enabled", "0")),
            use_biometric=_to_bool(self._db.get_setting("use_biometric", "1")),
            use_pin=_to_bool(self._db.get_setting("use_pin", "0")),
            first_weekday=_to_weekday(self._db.get_setting("first_weekday", "0")),
            date_format=self._db.get_setting("date_format", defaults.date_format),
        )

    def save(self, settings: AppSettings):
        """Persist every field in one transaction."""
        values = {}
        for f in fields(settings):
            value = getattr(settings, f.name)
            if isinstance(value, bool):
                value = "1" if value else "0"
            values[f.name] = str(value)
        try:
            self._db.set_settings(values)
        except sqlite3.Error as e:
            logger.exception("Failed to save settings")
            raise StoreError("Could not save settings.") from e
        logger.debug("Settings saved")

    def update(self, settings: AppSettings, **changes) -> AppSettings:
        """Persist changes, then apply them to the shared settings object.

        A failed save leaves the shared object untouched.
        """
        for key in changes:
            if not hasattr(settings, key):
                raise ValueError(f"Unknown setting: {key}")
        candidate = replace(settings, **changes)
        if not candidate.currency_symbol.strip():
            candidate.currency_symbol = AppSettings().currency_symbol
        self.save(candidate)
        for f in fields(candidate):
            setattr(settings, f.name, getattr(candidate, f.name))
        return settings
