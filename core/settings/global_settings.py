"""
Process-wide preferences cache for the file manager.

Reads are served from an in-memory dict; writes update the dict
immediately and are mirrored to QSettings on a single background writer,
so durable writes land in call order. Durable persistence is best effort:
if the store lock cannot be taken within the timeout the write is dropped
and the in-memory value stays authoritative.
"""
import threading
from typing import Any, Callable, Dict, List, Optional

from PySide6.QtCore import QCoreApplication, QEvent, QLocale, QObject, QSettings, Signal
from PySide6.QtWidgets import QApplication

from core.logging.logger import get_logger, is_verbose_logging
from core.settings import defaults, keys
from core.settings.config_feed import DesktopConfigFeed, find_config_feed
from core.threading.manager import ThreadManager, ThreadPoolType

logger = get_logger(__name__)

DEFAULT_ORGANIZATION = "org.ukui"
DEFAULT_APPLICATION = "peony-qt-preferences"
STORE_LOCK_TIMEOUT = 1.0

# QSettings hands a one-element list back as a bare string unless asked
# for a list explicitly.
_LIST_KEYS = frozenset({keys.REMOTE_SERVER_IP})


def _tr(text: str) -> str:
    return QCoreApplication.translate("GlobalSettings", text)


def _refresh_application_palette() -> None:
    app = QApplication.instance()
    # A console QCoreApplication has no palette.
    if not isinstance(app, QApplication):
        return
    QCoreApplication.postEvent(app, QEvent(QEvent.Type.ApplicationPaletteChange))
    for widget in QApplication.allWidgets():
        QCoreApplication.postEvent(widget, QEvent(QEvent.Type.PaletteChange))
    app.paletteChanged.emit(app.palette())


class GlobalSettings(QObject):
    """
    In-memory mirror of the preferences store.

    Construct once per process (see core.context.AppContext) and share the
    instance. All methods except the background writer must be called from
    the thread that owns the object.
    """

    # Emitted after reset(), reset_all() and feed-driven mirror updates.
    # set_value() only emits when notify_on_set is enabled.
    value_changed = Signal(str)
    # Emitted when the desktop style feed changes sidebar transparency.
    palette_refresh_requested = Signal()

    def __init__(self, organization: str = DEFAULT_ORGANIZATION,
                 application: str = DEFAULT_APPLICATION, *,
                 store: Optional[QSettings] = None,
                 thread_manager: Optional[ThreadManager] = None,
                 feed_lookup: Callable[[str], Optional[DesktopConfigFeed]] = find_config_feed,
                 locale_name: Optional[str] = None,
                 notify_on_set: bool = False,
                 lock_timeout: float = STORE_LOCK_TIMEOUT,
                 parent: Optional[QObject] = None):
        """
        Initialize the preferences cache.

        Args:
            organization: Organization name for QSettings
            application: Application name for QSettings
            store: Pre-built QSettings to use instead of opening one
            thread_manager: Shared ThreadManager; one is created and owned
                by this instance when omitted
            feed_lookup: Returns a feed for a schema name or None
            locale_name: Locale override, defaults to QLocale.system()
            notify_on_set: Emit value_changed from set_value() as well
            lock_timeout: Seconds a background write waits for the store lock
        """
        super().__init__(parent)

        self._store = store if store is not None else QSettings(organization, application)
        self._store_lock = threading.Lock()
        self._lock_timeout = float(lock_timeout)
        self._notify_on_set = bool(notify_on_set)
        self._cache: Dict[str, Any] = {}
        self._closed = False

        self._owns_thread_manager = thread_manager is None
        self._thread_manager = thread_manager or ThreadManager()

        self._date_format = _tr("yyyy/MM/dd")
        self._time_format = _tr("HH:mm:ss")
        self._panel_feed: Optional[DesktopConfigFeed] = None
        self._style_feed: Optional[DesktopConfigFeed] = None

        with self._store_lock:
            stored_keys = set(self._store.allKeys())

        if keys.ALLOW_FILE_OP_PARALLEL not in stored_keys:
            logger.debug("Default %s: True", keys.ALLOW_FILE_OP_PARALLEL)
            self.set_value(keys.ALLOW_FILE_OP_PARALLEL, True)

        locale = locale_name if locale_name is not None else QLocale.system().name()
        if "zh" in locale and keys.SORT_CHINESE_FIRST not in stored_keys:
            self.set_value(keys.SORT_CHINESE_FIRST, True)

        self._load_all_from_store()

        self._panel_feed = feed_lookup(keys.PANEL_PLUGINS_SCHEMA)
        if self._panel_feed is not None:
            self._panel_feed.changed.connect(self._on_panel_feed_changed)
            time_value = self._panel_feed.get(keys.PANEL_TIME_KEY)
            date_value = self._panel_feed.get(keys.PANEL_DATE_KEY)
            self._cache[keys.CONTROL_CENTER_TIME_FORMAT] = time_value
            self._cache[keys.CONTROL_CENTER_DATE_FORMAT] = date_value
            self._set_time_format(time_value)
            self._set_date_format(date_value)

        self._cache[keys.SIDEBAR_BG_OPACITY] = defaults.DEFAULT_SIDEBAR_OPACITY
        self._style_feed = feed_lookup(keys.STYLE_SCHEMA)
        if self._style_feed is not None:
            self._style_feed.changed.connect(self._on_style_feed_changed)
            self._mirror_sidebar_opacity()

        self._apply_first_run_defaults()

        logger.info("GlobalSettings initialized (%d keys, panel feed=%s, style feed=%s)",
                    len(self._cache),
                    self._panel_feed is not None,
                    self._style_feed is not None)

    # ------------------------------------------------------------------
    # Startup helpers
    # ------------------------------------------------------------------

    def _read_store_value(self, key: str) -> Any:
        if key in _LIST_KEYS:
            return self._store.value(key, [], type=list)
        return self._store.value(key)

    def _load_all_from_store(self) -> None:
        with self._store_lock:
            for key in self._store.allKeys():
                self._cache[key] = self._read_store_value(key)

    def _apply_first_run_defaults(self) -> None:
        first_run = defaults.get_default_settings()

        window_size = self._cache.get(keys.DEFAULT_WINDOW_SIZE)
        sidebar_width = self.to_int(self._cache.get(keys.DEFAULT_SIDEBAR_WIDTH), 0)
        if window_size is None or sidebar_width <= 0:
            self.set_value(keys.DEFAULT_WINDOW_SIZE, first_run[keys.DEFAULT_WINDOW_SIZE])
            self.set_value(keys.DEFAULT_SIDEBAR_WIDTH, first_run[keys.DEFAULT_SIDEBAR_WIDTH])
            logger.debug("Default %s: %d", keys.DEFAULT_SIDEBAR_WIDTH,
                         first_run[keys.DEFAULT_SIDEBAR_WIDTH])

        for key in (keys.DEFAULT_VIEW_ID,
                    keys.SORT_ORDER,
                    keys.SORT_COLUMN,
                    keys.DEFAULT_VIEW_ZOOM_LEVEL,
                    keys.REMOTE_SERVER_IP):
            if self._cache.get(key) is None:
                self.set_value(key, first_run[key])

    # ------------------------------------------------------------------
    # Desktop feeds
    # ------------------------------------------------------------------

    def _on_panel_feed_changed(self, key: str) -> None:
        value = self._panel_feed.get(key)
        if key == keys.PANEL_TIME_KEY:
            self._cache[keys.CONTROL_CENTER_TIME_FORMAT] = value
            self._set_time_format(value)
            self.value_changed.emit(keys.CONTROL_CENTER_TIME_FORMAT)
        elif key == keys.PANEL_DATE_KEY:
            self._cache[keys.CONTROL_CENTER_DATE_FORMAT] = value
            self._set_date_format(value)
            self.value_changed.emit(keys.CONTROL_CENTER_DATE_FORMAT)

    def _mirror_sidebar_opacity(self) -> None:
        raw = self._style_feed.get(keys.STYLE_SIDEBAR_TRANSPARENCY_KEY)
        self._cache[keys.SIDEBAR_BG_OPACITY] = self.to_int(
            raw, defaults.DEFAULT_SIDEBAR_OPACITY
        )

    def _on_style_feed_changed(self, key: str) -> None:
        if key != keys.STYLE_SIDEBAR_TRANSPARENCY_KEY:
            return
        self._mirror_sidebar_opacity()
        self.value_changed.emit(keys.SIDEBAR_BG_OPACITY)
        self._request_palette_refresh()

    def _request_palette_refresh(self) -> None:
        """Announce a palette change to listeners and to the running QApplication."""
        self.palette_refresh_requested.emit()
        ThreadManager.run_on_ui_thread(_refresh_application_palette)

    def _set_time_format(self, value: str) -> None:
        if value == "12":
            self._time_format = _tr("hh:mm:ss AP")
        else:
            self._time_format = _tr("HH:mm:ss")

    def _set_date_format(self, value: str) -> None:
        if value == "cn":
            self._date_format = _tr("yyyy/MM/dd")
        else:
            self._date_format = _tr("yyyy-MM-dd")

    def get_system_time_format(self) -> str:
        """Return the desktop's date and time display formats, space-joined."""
        return f"{self._date_format} {self._time_format}"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_value(self, key: str) -> Any:
        """Return the cached value for *key*, or None when absent."""
        return self._cache.get(key)

    def is_exist(self, key: str) -> bool:
        return self._cache.get(key) is not None

    def keys(self) -> List[str]:
        return list(self._cache.keys())

    @staticmethod
    def to_bool(value: Any, default: bool = False) -> bool:
        """Normalize a stored setting value to bool.

        INI-backed QSettings returns "true"/"false" strings after a reload,
        so accept common string forms as well as real bools and numbers.
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            v = value.strip().lower()
            if v in ("true", "1", "yes", "on"):
                return True
            if v in ("false", "0", "no", "off"):
                return False
            return default
        if value is None:
            return default
        return bool(value)

    @staticmethod
    def to_int(value: Any, default: int = 0) -> int:
        """Normalize a stored setting value to int, falling back to *default*."""
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            try:
                return int(float(value))
            except (TypeError, ValueError):
                return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Convenience wrapper around get_value() that normalizes to bool."""
        return self.to_bool(self.get_value(key), default)

    def get_int(self, key: str, default: int = 0) -> int:
        """Convenience wrapper around get_value() that normalizes to int."""
        return self.to_int(self.get_value(key), default)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_value(self, key: str, value: Any) -> None:
        """Update *key* in memory and queue a durable write."""
        self._cache[key] = value
        if is_verbose_logging():
            logger.debug("Setting changed: %s -> %r", key, value)
        else:
            logger.debug("Setting changed: %s", key)

        self._queue_store_op(f"set {key}", lambda store: store.setValue(key, value))
        if self._notify_on_set:
            self.value_changed.emit(key)

    def reset(self, key: str) -> None:
        """Drop *key* from memory and the store, then notify."""
        self._cache.pop(key, None)
        self.value_changed.emit(key)
        self._queue_store_op(f"remove {key}", lambda store: store.remove(key))
        logger.debug("Reset setting: %s", key)

    def reset_all(self) -> None:
        """Drop every key, notifying once per key in the order they were held."""
        captured = list(self._cache.keys())
        self._cache.clear()
        for key in captured:
            self.value_changed.emit(key)
        self._queue_store_op("clear", lambda store: store.clear())
        logger.warning("All settings reset (%d keys)", len(captured))

    def force_sync(self, key: Optional[str] = None) -> None:
        """Synchronously flush the store and reload from it.

        With *key*, only that entry is reloaded; otherwise the cache is
        rebuilt from the store, dropping any feed-mirrored entries. Queued
        background writes are drained first so the reload sees them.
        """
        if not self.wait_for_pending_writes(timeout=self._lock_timeout):
            logger.debug("[STORE] Pending writes still queued at force_sync")

        with self._store_lock:
            self._store.sync()
            if key is None:
                self._cache.clear()
                for stored_key in self._store.allKeys():
                    self._cache[stored_key] = self._read_store_value(stored_key)
            else:
                self._cache.pop(key, None)
                if self._store.contains(key):
                    self._cache[key] = self._read_store_value(key)
        logger.debug("Force synced %s", key if key is not None else "all keys")

    # ------------------------------------------------------------------
    # Background writer
    # ------------------------------------------------------------------

    def _queue_store_op(self, description: str, op: Callable[[QSettings], None]) -> None:
        if self._closed:
            logger.debug("[STORE] Closed; dropping %s", description)
            return
        try:
            self._thread_manager.submit_storage_task(self._run_store_op, description, op)
        except RuntimeError:
            logger.debug("[STORE] Writer unavailable; dropping %s", description, exc_info=True)

    def _run_store_op(self, description: str, op: Callable[[QSettings], None]) -> bool:
        """Apply one store mutation on the writer thread. Never touches the cache."""
        if not self._store_lock.acquire(timeout=self._lock_timeout):
            logger.debug("[STORE] Lock busy for %.1fs; skipped %s",
                         self._lock_timeout, description)
            return False
        try:
            op(self._store)
            self._store.sync()
            status = self._store.status()
            if status != QSettings.Status.NoError:
                logger.warning("[STORE] %s finished with status %s", description, status)
                return False
        finally:
            self._store_lock.release()
        return True

    def wait_for_pending_writes(self, timeout: Optional[float] = None) -> bool:
        """Block until queued durable writes have been applied."""
        if self._thread_manager.is_shut_down:
            return True
        return self._thread_manager.wait_for_idle(ThreadPoolType.STORAGE, timeout=timeout)

    def close(self, wait: bool = True) -> None:
        """Detach from desktop feeds and stop accepting durable writes."""
        if self._closed:
            return
        if wait:
            self.wait_for_pending_writes()
        self._closed = True

        if self._panel_feed is not None:
            self._panel_feed.changed.disconnect(self._on_panel_feed_changed)
            self._panel_feed.close()
        if self._style_feed is not None:
            self._style_feed.changed.disconnect(self._on_style_feed_changed)
            self._style_feed.close()

        if self._owns_thread_manager:
            self._thread_manager.shutdown(wait=wait)
        logger.info("GlobalSettings closed")

    @property
    def store(self) -> QSettings:
        return self._store
