"""Repository owning the persisted app settings."""

import logging

from ..entities.settings import DEFAULT_PRIVACY_URL, AppSettings, is_valid_url
from ..interfaces.persistence_store import PersistenceStore

logger = logging.getLogger(__name__)


class SettingsRepository:
    """Loads settings, enforces defaults and saves every change explicitly."""

    def __init__(self, store: PersistenceStore):
        self._store = store
        # Dark mode is the only supported appearance.
        self._settings = store.load_settings().with_changes(is_dark_mode_enabled=True)
        self._store.save_settings(self._settings)

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def set_dark_mode(self, enabled: bool) -> AppSettings:
        self._settings = self._settings.with_changes(is_dark_mode_enabled=enabled)
        self._store.save_settings(self._settings)
        return self._settings

    def set_privacy_url(self, value: str) -> AppSettings:
        url = value.strip()
        if not is_valid_url(url):
            logger.warning(f"Invalid privacy URL {value!r}, using default")
            url = DEFAULT_PRIVACY_URL
        self._settings = self._settings.with_changes(privacy_url=url)
        self._store.save_settings(self._settings)
        return self._settings
