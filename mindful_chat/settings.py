"""
Persistence of user preferences in the key-value store.
"""

import logging

from pydantic import ValidationError

from .capabilities import KeyValueStore
from .models import Settings

logger = logging.getLogger(__name__)

SETTINGS_STORE_KEY = "app_settings"


class SettingsStore:
    def __init__(self, key_store: KeyValueStore) -> None:
        self._key_store = key_store

    def load(self) -> Settings:
        """Read saved settings, falling back to defaults if missing or corrupt."""
        raw = self._key_store.get(SETTINGS_STORE_KEY)
        if raw is None:
            return Settings()
        try:
            return Settings.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Error loading settings, using defaults: %s", e)
            return Settings()

    def save(self, settings: Settings) -> None:
        self._key_store.set(SETTINGS_STORE_KEY, settings.model_dump_json())
