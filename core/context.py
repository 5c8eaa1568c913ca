"""
Application context.

Holds the long-lived services a process shares: the thread manager and the
preferences cache. Build one AppContext at startup and pass it to whoever
needs settings; GlobalSettings itself is created on first access.
"""
from typing import Callable, Optional

from PySide6.QtCore import QSettings

from core.logging.logger import get_logger
from core.settings.config import SettingsConfig
from core.settings.config_feed import DesktopConfigFeed, find_config_feed
from core.settings.global_settings import GlobalSettings
from core.threading.manager import ThreadManager

logger = get_logger(__name__)


class AppContext:
    """Owner of the process-wide services."""

    def __init__(self, config: Optional[SettingsConfig] = None,
                 feed_lookup: Callable[[str], Optional[DesktopConfigFeed]] = find_config_feed,
                 locale_name: Optional[str] = None):
        self.config = config or SettingsConfig.from_env()
        self.thread_manager = ThreadManager()
        self._feed_lookup = feed_lookup
        self._locale_name = locale_name
        self._settings: Optional[GlobalSettings] = None

    @property
    def settings(self) -> GlobalSettings:
        if self._settings is None:
            self._settings = GlobalSettings(
                self.config.organization,
                self.config.application,
                store=self._open_store(),
                thread_manager=self.thread_manager,
                feed_lookup=self._feed_lookup,
                locale_name=self._locale_name,
                notify_on_set=self.config.notify_on_set,
                lock_timeout=self.config.lock_timeout,
            )
        return self._settings

    def _open_store(self) -> Optional[QSettings]:
        if not self.config.file_path:
            return None
        logger.debug("Using INI preferences file %s", self.config.file_path)
        return QSettings(self.config.file_path, QSettings.Format.IniFormat)

    def shutdown(self) -> None:
        """Flush pending preference writes and stop worker threads."""
        if self._settings is not None:
            self._settings.close(wait=True)
        self.thread_manager.shutdown(wait=True)
