"""
Contract keys for the preferences store.

Other components read these names directly, so they must stay stable
across releases.
"""

# File operations
ALLOW_FILE_OP_PARALLEL = "allow-file-op-parallel"

# Sorting
SORT_CHINESE_FIRST = "chinese-first"
SORT_FOLDER_FIRST = "folder-first"
SORT_ORDER = "directory-view/sort-order"
SORT_COLUMN = "directory-view/sort-column"

# Views
SHOW_HIDDEN_PREFERENCE = "show-hidden"
FORBID_THUMBNAIL_IN_VIEW = "do-not-thumbnail"
DEFAULT_VIEW_ID = "directory-view/default-view-id"
DEFAULT_VIEW_ZOOM_LEVEL = "directory-view/default-view-zoom-level"

# Window geometry
DEFAULT_WINDOW_SIZE = "default-window-size"
DEFAULT_SIDEBAR_WIDTH = "default-sidebar-width"

# Remote servers
REMOTE_SERVER_IP = "remote-server/ip-list"

# Mirrored from the desktop style feed
SIDEBAR_BG_OPACITY = "sidebar-bg-opacity"

# Mirrored from the control center panel feed
CONTROL_CENTER_TIME_FORMAT = "control-center/time-format"
CONTROL_CENTER_DATE_FORMAT = "control-center/date-format"

# External schemas and their keys
PANEL_PLUGINS_SCHEMA = "org.ukui.control-center.panel.plugins"
PANEL_TIME_KEY = "hoursystem"
PANEL_DATE_KEY = "date"

STYLE_SCHEMA = "org.ukui.style"
STYLE_SIDEBAR_TRANSPARENCY_KEY = "peonySideBarTransparency"
