"""
Desktop configuration feeds.

A feed exposes a settings schema owned by the desktop (clock format,
sidebar transparency, ...) as a QObject with a ``changed(key)`` signal and
a string-valued ``get(key)``. Feeds are optional: ``find_config_feed``
returns None when PyGObject is not installed or the schema is unknown on
this host, and callers simply skip the feature.
"""
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

from core.logging.logger import get_logger

logger = get_logger(__name__)


class DesktopConfigFeed(QObject):
    """Read-only view of one external settings schema."""

    changed = Signal(str)  # key

    def __init__(self, schema: str, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._schema = schema

    @property
    def schema(self) -> str:
        return self._schema

    def get(self, key: str) -> str:
        """Return the current value of *key* rendered as a string."""
        raise NotImplementedError

    def close(self) -> None:
        """Stop delivering change events."""


class MemoryConfigFeed(DesktopConfigFeed):
    """Feed backed by a plain dict.

    Used where no desktop service exists, e.g. in tests. ``set()`` behaves
    like an external change.
    """

    def __init__(self, schema: str, values: Optional[Dict[str, Any]] = None,
                 parent: Optional[QObject] = None):
        super().__init__(schema, parent)
        self._values: Dict[str, Any] = dict(values or {})

    def get(self, key: str) -> str:
        value = self._values.get(key)
        return "" if value is None else str(value)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self.changed.emit(key)


class GioConfigFeed(DesktopConfigFeed):
    """Feed backed by a ``Gio.Settings`` object."""

    def __init__(self, schema: str, gsettings: Any, parent: Optional[QObject] = None):
        super().__init__(schema, parent)
        self._gsettings = gsettings
        self._handler_id = gsettings.connect("changed", self._on_gsettings_changed)

    def _on_gsettings_changed(self, _gsettings: Any, key: str) -> None:
        logger.debug("Feed %s changed: %s", self._schema, key)
        self.changed.emit(key)

    def get(self, key: str) -> str:
        value = self._gsettings.get_value(key)
        if value is None:
            return ""
        return str(value.unpack())

    def close(self) -> None:
        if self._handler_id is not None:
            self._gsettings.disconnect(self._handler_id)
            self._handler_id = None


def find_config_feed(schema: str) -> Optional[DesktopConfigFeed]:
    """Return a feed for *schema* if the host provides it, else None."""
    try:
        import gi
        gi.require_version("Gio", "2.0")
        from gi.repository import Gio
    except (ImportError, ValueError):
        logger.debug("PyGObject unavailable; feed %s disabled", schema)
        return None

    source = Gio.SettingsSchemaSource.get_default()
    if source is None or source.lookup(schema, True) is None:
        logger.debug("Schema %s not installed; feed disabled", schema)
        return None

    logger.info("Subscribed to desktop schema %s", schema)
    return GioConfigFeed(schema, Gio.Settings.new(schema))
