"""
peony-prefs - command line entry point

Inspect and edit the file manager's preferences store from a terminal.
Writes go through GlobalSettings, so they follow the same defaults and
best-effort persistence as the file manager itself.
"""
import argparse
import json
import sys
from dataclasses import replace
from typing import Any, List, Optional

from PySide6.QtCore import QCoreApplication, QSize

from core.context import AppContext
from core.logging.logger import get_logger, setup_logging
from core.settings.config import SettingsConfig
from versioning import APP_DESCRIPTION, APP_NAME, APP_VERSION

logger = get_logger(__name__)

VALUE_TYPES = ("str", "bool", "int", "list", "size")


def parse_value(raw: str, value_type: str) -> Any:
    """Convert a command line string into a typed settings value.

    Raises:
        ValueError: If *raw* cannot be read as *value_type*
    """
    if value_type == "str":
        return raw
    if value_type == "bool":
        lowered = raw.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    if value_type == "int":
        return int(raw)
    if value_type == "list":
        return [part for part in raw.split(",") if part]
    if value_type == "size":
        width, sep, height = raw.lower().partition("x")
        if not sep:
            raise ValueError(f"size must look like WIDTHxHEIGHT: {raw!r}")
        return QSize(int(width), int(height))
    raise ValueError(f"unknown value type: {value_type}")


def format_value(value: Any) -> str:
    """Render a settings value for terminal output."""
    if isinstance(value, QSize):
        return f"{value.width()}x{value.height()}"
    if isinstance(value, (list, tuple, dict, bool)) or value is None:
        return json.dumps(value)
    return str(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description=APP_DESCRIPTION)
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("-d", "--debug", action="store_true", help="enable debug logging")
    parser.add_argument("-v", "--verbose", action="store_true", help="log full setting values")
    parser.add_argument("--file", help="use this INI file instead of the native store")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="print every key and value")

    get_cmd = sub.add_parser("get", help="print one value")
    get_cmd.add_argument("key")

    set_cmd = sub.add_parser("set", help="store one value")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value")
    set_cmd.add_argument("--type", choices=VALUE_TYPES, default="str", dest="value_type")

    reset_cmd = sub.add_parser("reset", help="remove one key")
    reset_cmd.add_argument("key")

    sub.add_parser("reset-all", help="remove every key")
    sub.add_parser("time-format", help="print the desktop date/time display format")
    return parser


def run_command(args: argparse.Namespace, context: AppContext) -> int:
    settings = context.settings

    if args.command == "list":
        for key in sorted(settings.keys()):
            print(f"{key}={format_value(settings.get_value(key))}")
        return 0

    if args.command == "get":
        if not settings.is_exist(args.key):
            logger.info("Key not set: %s", args.key)
            return 1
        print(format_value(settings.get_value(args.key)))
        return 0

    if args.command == "set":
        try:
            value = parse_value(args.value, args.value_type)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        settings.set_value(args.key, value)
        return 0

    if args.command == "reset":
        settings.reset(args.key)
        return 0

    if args.command == "reset-all":
        settings.reset_all()
        return 0

    if args.command == "time-format":
        print(settings.get_system_time_format())
        return 0

    return 2


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the preferences tool."""
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug, verbose=args.verbose)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)

    config = SettingsConfig.from_env()
    if args.file:
        config = replace(config, file_path=args.file)

    context = AppContext(config)
    try:
        exit_code = run_command(args, context)
    except Exception as e:
        logger.exception("Fatal error in %s: %s", args.command, e)
        exit_code = 1
    finally:
        context.shutdown()

    logger.debug("%s exiting (code=%d)", APP_NAME, exit_code)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
