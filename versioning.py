"""Centralised version and naming information for peony-prefs.

This module is the single source of truth for the application version and
human-readable metadata shown by the command line tool.
"""

APP_NAME: str = "peony-prefs"
APP_VERSION: str = "1.0.0"
APP_DESCRIPTION: str = "Preferences cache and sidebar ordering for the Peony file manager."


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
]
