"""Preferences cache for the file manager."""

from .config import SettingsConfig
from .config_feed import DesktopConfigFeed, GioConfigFeed, MemoryConfigFeed, find_config_feed
from .global_settings import GlobalSettings

__all__ = [
    'SettingsConfig',
    'DesktopConfigFeed',
    'GioConfigFeed',
    'MemoryConfigFeed',
    'find_config_feed',
    'GlobalSettings',
]
