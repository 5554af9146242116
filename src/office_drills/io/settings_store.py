"""Settings storage under the ``settings`` key."""

from ..core.config import KEY_SETTINGS
from ..core.models import Settings
from ..utils.logging import get_logger
from .serializers import ValidationError, dict_to_settings, settings_to_dict
from .store import KeyValueStore

logger = get_logger(__name__)


class SettingsStore:
    """Loads and saves the user's Settings."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> Settings:
        """
        Load settings.

        Returns:
            Stored settings, or defaults when nothing (or something invalid)
            is stored
        """
        try:
            raw = self.store.get(KEY_SETTINGS)
        except ValidationError as e:
            logger.warning("Stored settings are unreadable (%s); using defaults", e)
            return Settings()
        if raw is None:
            return Settings()
        if not isinstance(raw, dict):
            logger.warning("Stored settings are not an object; using defaults")
            return Settings()
        try:
            return dict_to_settings(raw)
        except ValidationError as e:
            logger.warning("Stored settings are invalid (%s); using defaults", e)
            return Settings()

    def save(self, settings: Settings) -> None:
        self.store.set(KEY_SETTINGS, settings_to_dict(settings))

    def reset(self) -> Settings:
        """Store and return the default settings."""
        settings = Settings()
        self.save(settings)
        return settings
