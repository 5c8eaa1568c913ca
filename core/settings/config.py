"""
Runtime configuration for GlobalSettings.

Values come from keyword arguments or PEONY_PREFS_* environment variables.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUE_STRINGS = ("1", "true", "on", "yes")


@dataclass(frozen=True)
class SettingsConfig:
    """How and where the preferences store is opened."""
    organization: str = "org.ukui"
    application: str = "peony-qt-preferences"
    # Path to an INI file; when set it replaces the native store.
    file_path: Optional[str] = None
    lock_timeout: float = 1.0
    notify_on_set: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SettingsConfig":
        env = os.environ if environ is None else environ
        base = cls()
        timeout_raw = env.get("PEONY_PREFS_LOCK_TIMEOUT")
        try:
            lock_timeout = float(timeout_raw) if timeout_raw else base.lock_timeout
        except ValueError:
            lock_timeout = base.lock_timeout
        return cls(
            organization=env.get("PEONY_PREFS_ORG") or base.organization,
            application=env.get("PEONY_PREFS_APP") or base.application,
            file_path=env.get("PEONY_PREFS_FILE") or None,
            lock_timeout=lock_timeout,
            notify_on_set=str(env.get("PEONY_PREFS_NOTIFY_ON_SET", "")).strip().lower() in _TRUE_STRINGS,
        )
