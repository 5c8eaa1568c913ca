"""
First-run defaults for the preferences store.

These mirror the values GlobalSettings writes when a key is missing on
startup. They do not touch QSettings, so UI code may call them freely.
"""
from typing import Any, Dict

from PySide6.QtCore import QSize, Qt

from core.settings import keys

GOLDEN_RATIO = 0.618

DEFAULT_WINDOW_WIDTH = 850
DEFAULT_SIDEBAR_WIDTH = 195
DEFAULT_VIEW_ID = "Icon View"
DEFAULT_ZOOM_LEVEL = 25
DEFAULT_SIDEBAR_OPACITY = 50


def default_window_size() -> QSize:
    """850 wide, golden-ratio height (525)."""
    return QSize(DEFAULT_WINDOW_WIDTH, int(DEFAULT_WINDOW_WIDTH * GOLDEN_RATIO))


def get_default_settings() -> Dict[str, Any]:
    """Return the canonical first-run defaults keyed by contract key.

    Window size and sidebar width are applied together by GlobalSettings;
    the remaining keys are each applied only when their cached value is
    null.
    """
    return {
        keys.DEFAULT_WINDOW_SIZE: default_window_size(),
        keys.DEFAULT_SIDEBAR_WIDTH: DEFAULT_SIDEBAR_WIDTH,
        keys.DEFAULT_VIEW_ID: DEFAULT_VIEW_ID,
        keys.SORT_ORDER: Qt.SortOrder.AscendingOrder.value,
        keys.SORT_COLUMN: 0,
        keys.DEFAULT_VIEW_ZOOM_LEVEL: DEFAULT_ZOOM_LEVEL,
        keys.REMOTE_SERVER_IP: [],
    }
