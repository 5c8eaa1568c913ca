"""
Centralized logging configuration for the preferences library.

Uses a rotating file handler with logs stored in a logs/ directory.
Includes colored console output for debug mode.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


_VERBOSE: bool = False
# Base directory for logs. Defaults to the project root and is replaced by
# setup_logging() when the caller passes an explicit log directory.
_BASE_DIR: Path = Path(__file__).parent.parent.parent
_LOG_DIR: Optional[Path] = None

_env_verbose = os.getenv("PEONY_PREFS_VERBOSE")
if _env_verbose is not None:
    if str(_env_verbose).strip().lower() in ("1", "true", "on", "yes"):
        _VERBOSE = True

LOG_FORMAT = '%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',       # Cyan
        'INFO': '\033[32m',        # Green
        'WARNING': '\033[33m',     # Yellow
        'ERROR': '\033[31m',       # Red
        'CRITICAL': '\033[35m',    # Magenta
    }
    STORAGE_COLOR = '\033[38;5;135m'   # Purple for durable store diagnostics
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def format(self, record):
        original_levelname = record.levelname

        color = None
        if '[STORE]' in str(record.msg):
            color = self.STORAGE_COLOR
        elif record.levelname in self.COLORS:
            color = self.COLORS[record.levelname]

        if color is None:
            return super().format(record)

        record.levelname = f"{self.BOLD}{color}{record.levelname}{self.RESET}"
        try:
            message = super().format(record)
        finally:
            record.levelname = original_levelname
        return f"{color}{message}{self.RESET}"


def get_log_dir() -> Path:
    """Return the directory used for log files.

    setup_logging() should be called once at startup so the returned path
    matches the location used by the active RotatingFileHandler.
    """

    if _LOG_DIR is not None:
        return _LOG_DIR
    return _BASE_DIR / "logs"


def setup_logging(debug: bool = False, verbose: bool = False,
                  log_dir: Optional[Path] = None) -> None:
    """
    Configure application logging with file rotation.

    Args:
        debug: If True, set log level to DEBUG and enable console output.
        verbose: When True, settings writes log their full values instead
            of just the key. Verbose mode also implies debug-level logging.
        log_dir: Optional directory for prefs.log. Defaults to logs/ under
            the project root.
    """
    global _VERBOSE, _LOG_DIR

    debug_enabled = debug or verbose
    if log_dir is not None:
        _LOG_DIR = Path(log_dir)

    target_dir = get_log_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / "prefs.log"

    level = logging.DEBUG if debug_enabled else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # File handler with rotation (1MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    if debug_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        if sys.stdout.isatty():
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

    _VERBOSE = _VERBOSE or bool(verbose)

    root_logger.info("=" * 60)
    root_logger.info(
        "Preferences logging initialized (debug=%s, verbose=%s)",
        debug_enabled,
        _VERBOSE,
    )
    root_logger.info("=" * 60)


_SHORT_NAME_OVERRIDES = {
    "core.settings.global_settings": "settings.global",
    "core.settings.config_feed": "settings.feed",
    "core.threading.manager": "threading",
    "ui.sidebar.proxy_model": "sidebar.proxy",
}


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with optional short-name overrides for noisy modules."""
    actual = _SHORT_NAME_OVERRIDES.get(name, name)
    return logging.getLogger(actual)


def is_verbose_logging() -> bool:
    """Return True when verbose debug logging is enabled globally."""

    return _VERBOSE
