"""
Shared pytest fixtures for preferences tests.
"""
import os
import pytest
import sys
from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

# Headless runs (CI, containers) have no display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def settings_path(tmp_path):
    """Path of a throwaway INI preferences file."""
    return str(tmp_path / "peony-qt-preferences.conf")


@pytest.fixture
def settings_file(settings_path):
    """INI-backed QSettings standing in for the native store."""
    store = QSettings(settings_path, QSettings.Format.IniFormat)
    yield store
    store.clear()
    store.sync()


@pytest.fixture
def thread_manager():
    """Create ThreadManager instance for testing."""
    from core.threading.manager import ThreadManager
    manager = ThreadManager()
    yield manager
    manager.shutdown(wait=True)


@pytest.fixture
def make_settings(qt_app, settings_file, thread_manager):
    """Factory building GlobalSettings over the test store.

    Feeds are disabled and the locale is English unless overridden.
    """
    from core.settings.global_settings import GlobalSettings

    created = []

    def _make(**kwargs):
        kwargs.setdefault('store', settings_file)
        kwargs.setdefault('thread_manager', thread_manager)
        kwargs.setdefault('feed_lookup', lambda schema: None)
        kwargs.setdefault('locale_name', 'en_US')
        instance = GlobalSettings(**kwargs)
        created.append(instance)
        return instance

    yield _make
    for instance in created:
        instance.close(wait=True)


@pytest.fixture
def global_settings(make_settings):
    """GlobalSettings with first-run writes already persisted."""
    settings = make_settings()
    assert settings.wait_for_pending_writes(timeout=5.0)
    return settings
