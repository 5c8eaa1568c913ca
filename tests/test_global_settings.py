"""
Tests for GlobalSettings.

Covers:
- First-run defaults
- Synchronous reads after asynchronous writes
- reset / reset_all notifications
- force_sync reloads
- Ordered, best-effort durable writes
"""
import pytest
from PySide6.QtCore import QSettings, QSize

from core.settings import keys
from core.settings.global_settings import GlobalSettings


def _collect(settings):
    seen = []
    settings.value_changed.connect(seen.append)
    return seen


class TestFirstRunDefaults:
    """Construction over an empty store."""

    def test_empty_store_gets_defaults(self, global_settings):
        s = global_settings
        assert s.get_value(keys.ALLOW_FILE_OP_PARALLEL) is True
        assert s.get_value(keys.DEFAULT_SIDEBAR_WIDTH) == 195
        assert s.get_value(keys.DEFAULT_WINDOW_SIZE) == QSize(850, 525)
        assert s.get_value(keys.DEFAULT_VIEW_ZOOM_LEVEL) == 25
        assert s.get_value(keys.SORT_ORDER) == 0
        assert s.get_value(keys.SORT_COLUMN) == 0
        assert s.get_value(keys.DEFAULT_VIEW_ID) == "Icon View"
        assert s.get_value(keys.REMOTE_SERVER_IP) == []

    def test_sidebar_opacity_defaults_without_style_feed(self, global_settings):
        assert global_settings.get_value(keys.SIDEBAR_BG_OPACITY) == 50

    def test_defaults_are_persisted(self, global_settings, settings_file):
        assert settings_file.contains(keys.ALLOW_FILE_OP_PARALLEL)
        assert settings_file.contains(keys.DEFAULT_SIDEBAR_WIDTH)
        assert settings_file.contains(keys.DEFAULT_VIEW_ID)

    def test_chinese_locale_sets_chinese_first(self, make_settings):
        settings = make_settings(locale_name="zh_CN")
        assert settings.get_value(keys.SORT_CHINESE_FIRST) is True

    def test_other_locale_leaves_chinese_first_unset(self, global_settings):
        assert global_settings.is_exist(keys.SORT_CHINESE_FIRST) is False

    def test_stored_values_are_loaded(self, make_settings, settings_file):
        settings_file.setValue(keys.ALLOW_FILE_OP_PARALLEL, False)
        settings_file.setValue(keys.DEFAULT_VIEW_ID, "List View")
        settings_file.setValue("custom/key", "hello")
        settings_file.sync()

        settings = make_settings()
        assert settings.get_bool(keys.ALLOW_FILE_OP_PARALLEL, True) is False
        assert settings.get_value(keys.DEFAULT_VIEW_ID) == "List View"
        assert settings.get_value("custom/key") == "hello"

    def test_non_positive_sidebar_width_resets_window_defaults(self, make_settings, settings_file):
        settings_file.setValue(keys.DEFAULT_WINDOW_SIZE, QSize(1000, 700))
        settings_file.setValue(keys.DEFAULT_SIDEBAR_WIDTH, 0)
        settings_file.sync()

        settings = make_settings()
        assert settings.get_value(keys.DEFAULT_WINDOW_SIZE) == QSize(850, 525)
        assert settings.get_int(keys.DEFAULT_SIDEBAR_WIDTH) == 195

    def test_valid_geometry_is_kept(self, make_settings, settings_file):
        settings_file.setValue(keys.DEFAULT_WINDOW_SIZE, QSize(1000, 700))
        settings_file.setValue(keys.DEFAULT_SIDEBAR_WIDTH, 240)
        settings_file.sync()

        settings = make_settings()
        assert settings.get_value(keys.DEFAULT_WINDOW_SIZE) == QSize(1000, 700)
        assert settings.get_int(keys.DEFAULT_SIDEBAR_WIDTH) == 240

    def test_second_start_reads_persisted_defaults(self, global_settings, make_settings, settings_path):
        reopened = QSettings(settings_path, QSettings.Format.IniFormat)
        settings = make_settings(store=reopened)
        assert settings.get_int(keys.DEFAULT_SIDEBAR_WIDTH) == 195
        assert settings.get_int(keys.DEFAULT_VIEW_ZOOM_LEVEL) == 25
        assert settings.get_bool(keys.ALLOW_FILE_OP_PARALLEL) is True


class TestReads:

    def test_missing_key_is_none(self, global_settings):
        assert global_settings.get_value("does/not/exist") is None
        assert global_settings.is_exist("does/not/exist") is False

    def test_none_value_does_not_exist(self, global_settings):
        global_settings.set_value("nullable", None)
        assert global_settings.is_exist("nullable") is False

    def test_default_system_time_format(self, global_settings):
        assert global_settings.get_system_time_format() == "yyyy/MM/dd HH:mm:ss"


class TestSetValue:

    def test_value_visible_immediately(self, global_settings):
        global_settings.set_value("view/icon-size", 64)
        assert global_settings.get_value("view/icon-size") == 64
        assert global_settings.is_exist("view/icon-size") is True

    def test_value_reaches_store(self, global_settings, settings_file):
        global_settings.set_value(keys.SHOW_HIDDEN_PREFERENCE, True)
        assert global_settings.wait_for_pending_writes(timeout=5.0)
        assert settings_file.contains(keys.SHOW_HIDDEN_PREFERENCE)

    def test_set_value_is_silent_by_default(self, global_settings):
        seen = _collect(global_settings)
        global_settings.set_value(keys.SORT_COLUMN, 2)
        assert seen == []

    def test_notify_on_set_emits(self, make_settings):
        settings = make_settings(notify_on_set=True)
        seen = _collect(settings)
        settings.set_value(keys.SORT_COLUMN, 3)
        assert seen == [keys.SORT_COLUMN]

    def test_writes_land_in_call_order(self, global_settings, settings_file):
        for i in range(50):
            global_settings.set_value("order/seq", i)
        assert global_settings.wait_for_pending_writes(timeout=5.0)
        assert GlobalSettings.to_int(settings_file.value("order/seq")) == 49

    def test_lock_timeout_skips_durable_write(self, make_settings, settings_file):
        settings = make_settings(lock_timeout=0.05)
        assert settings.wait_for_pending_writes(timeout=5.0)

        settings._store_lock.acquire()
        try:
            settings.set_value("skipped/key", "memory-only")
            assert settings.wait_for_pending_writes(timeout=5.0)
        finally:
            settings._store_lock.release()

        assert settings.get_value("skipped/key") == "memory-only"
        assert not settings_file.contains("skipped/key")


class TestReset:

    def test_reset_removes_and_notifies_once(self, global_settings):
        global_settings.set_value("reset/me", "x")
        seen = _collect(global_settings)

        global_settings.reset("reset/me")

        assert global_settings.is_exist("reset/me") is False
        assert seen == ["reset/me"]

    def test_reset_removes_from_store(self, global_settings, settings_file):
        global_settings.set_value("reset/me", "x")
        global_settings.reset("reset/me")
        assert global_settings.wait_for_pending_writes(timeout=5.0)
        assert not settings_file.contains("reset/me")

    def test_reset_missing_key_still_notifies(self, global_settings):
        seen = _collect(global_settings)
        global_settings.reset("never/set")
        assert seen == ["never/set"]

    def test_reset_all_notifies_in_capture_order(self, global_settings):
        before = global_settings.keys()
        seen = _collect(global_settings)

        global_settings.reset_all()

        assert seen == before
        assert global_settings.keys() == []

    def test_reset_all_clears_store(self, global_settings, settings_file):
        global_settings.reset_all()
        assert global_settings.wait_for_pending_writes(timeout=5.0)
        assert settings_file.allKeys() == []


class TestForceSync:

    def test_full_reload_matches_store(self, global_settings, settings_file):
        global_settings.set_value("sync/a", "1")
        assert global_settings.wait_for_pending_writes(timeout=5.0)
        with global_settings._store_lock:
            settings_file.setValue("sync/external", "outside")
            settings_file.remove(keys.DEFAULT_VIEW_ID)

        global_settings.force_sync()

        assert sorted(global_settings.keys()) == sorted(settings_file.allKeys())
        assert global_settings.get_value("sync/external") == "outside"
        assert global_settings.is_exist(keys.DEFAULT_VIEW_ID) is False
        # Mirrored, never-persisted entries are dropped by a full reload.
        assert global_settings.is_exist(keys.SIDEBAR_BG_OPACITY) is False

    def test_single_key_reload(self, global_settings, settings_file):
        with global_settings._store_lock:
            settings_file.setValue(keys.DEFAULT_VIEW_ID, "Compact View")
            settings_file.setValue("sync/untouched", "store-only")

        global_settings.force_sync(keys.DEFAULT_VIEW_ID)

        assert global_settings.get_value(keys.DEFAULT_VIEW_ID) == "Compact View"
        assert global_settings.is_exist("sync/untouched") is False

    def test_single_key_reload_of_removed_key(self, global_settings, settings_file):
        with global_settings._store_lock:
            settings_file.remove(keys.DEFAULT_VIEW_ID)
        global_settings.force_sync(keys.DEFAULT_VIEW_ID)
        assert global_settings.is_exist(keys.DEFAULT_VIEW_ID) is False

    def test_force_sync_sees_queued_writes(self, global_settings):
        global_settings.set_value("sync/queued", "v")
        global_settings.force_sync()
        assert global_settings.get_value("sync/queued") == "v"


class TestTypeConversion:

    @pytest.mark.parametrize("raw", [True, "true", "TRUE", "1", "yes", "on", 1])
    def test_to_bool_true_values(self, raw):
        assert GlobalSettings.to_bool(raw, False) is True

    @pytest.mark.parametrize("raw", [False, "false", "0", "no", "off", 0])
    def test_to_bool_false_values(self, raw):
        assert GlobalSettings.to_bool(raw, True) is False

    def test_to_bool_unknown_string_uses_default(self):
        assert GlobalSettings.to_bool("maybe", True) is True
        assert GlobalSettings.to_bool(None, True) is True

    def test_to_int(self):
        assert GlobalSettings.to_int("195") == 195
        assert GlobalSettings.to_int("12.0") == 12
        assert GlobalSettings.to_int(None, 50) == 50
        assert GlobalSettings.to_int("abc", 50) == 50
        assert GlobalSettings.to_int(True) == 1


class TestClose:

    def test_close_drops_later_writes(self, make_settings, settings_file):
        settings = make_settings()
        settings.close(wait=True)

        settings.set_value("after/close", 1)

        assert settings.get_value("after/close") == 1
        assert not settings_file.contains("after/close")

    def test_close_is_idempotent(self, make_settings):
        settings = make_settings()
        settings.close()
        settings.close()

    def test_owned_thread_manager_is_shut_down(self, qt_app, settings_file):
        settings = GlobalSettings(store=settings_file, feed_lookup=lambda schema: None,
                                  locale_name="en_US")
        manager = settings._thread_manager
        settings.close(wait=True)
        assert manager.is_shut_down
