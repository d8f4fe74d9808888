"""Settings holder backed by the key/value store."""

import json
import logging

from pydantic import ValidationError

from fittrack.domain.entry import Settings
from fittrack.infrastructure.kv_store import KeyValueStore
from fittrack.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_KEY = "fittrack_settings"


class SettingsStore:
    """Holds the settings singleton; defaults fill any absent field."""

    def __init__(self, kv_store: KeyValueStore, key: str = DEFAULT_SETTINGS_KEY) -> None:
        self.kv_store = kv_store
        self.key = key
        self._settings = self._load()

    def _load(self) -> Settings:
        raw = self.kv_store.get(self.key)
        if raw is None:
            return Settings()

        try:
            stored = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            logger.warning(f"Stored settings are unreadable, using defaults: {e}")
            return Settings()

        if not isinstance(stored, dict):
            logger.warning("Stored settings are not an object, using defaults")
            return Settings()

        # an invalid stored field falls back to its own default only
        settings = Settings()
        for name in Settings.model_fields:
            if name not in stored:
                continue
            try:
                settings = Settings.model_validate({**settings.model_dump(), name: stored[name]})
            except ValidationError as e:
                logger.warning(f"Ignoring stored setting '{name}': {e}")
        return settings

    def get(self) -> Settings:
        return self._settings

    def save(self, settings: Settings) -> None:
        """
        Overwrite the settings singleton.

        Raises:
            StorageError: If the settings could not be persisted.
        """
        if not self.kv_store.set(self.key, settings.model_dump_json().encode("utf-8")):
            raise StorageError(f"Failed to persist settings under key '{self.key}'")
        self._settings = settings
        logger.info("Saved settings")

    def clear(self) -> None:
        """Remove the persisted record and fall back to defaults."""
        self.kv_store.delete(self.key)
        self._settings = Settings()
