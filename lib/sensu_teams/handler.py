"""
Sensu Teams Handler
===================
Entry point invoked by the Sensu server once per event.

Reads the event JSON from stdin, resolves the settings section named by
-j/--json (default "microsoft-teams") and posts the notification.

Usage:
    handler-microsoft-teams -j microsoft-teams < event.json
"""

import argparse
import sys
import traceback
from typing import List, Optional, TextIO

from jinja2 import TemplateError

from .config import (
    DEFAULT_CONFIG_NAME,
    HANDLER_VERSION,
    SettingsError,
    TeamsSettings,
    decrypt_settings,
    get_settings_section,
    load_settings,
    mask_settings,
)
from .events import EventError, read_event
from .notifications import DeliveryError, handle

VERSION = f"{HANDLER_VERSION}-teams-handler"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="handler-microsoft-teams",
        description="Send Sensu events to a Microsoft Teams incoming webhook.",
    )
    parser.add_argument(
        "-j", "--json",
        dest="json_config",
        default=DEFAULT_CONFIG_NAME,
        metavar="JSONCONFIG",
        help="Configuration name (default: %(default)s)",
    )
    parser.add_argument(
        "-c", "--config",
        dest="config_files",
        action="append",
        metavar="PATH",
        help="Settings file to load; may be repeated. Overrides Sensu's file discovery.",
    )
    parser.add_argument("--version", action="version", version=VERSION)
    return parser


def _load_teams_settings(name: str, config_files: Optional[List[str]]) -> TeamsSettings:
    """Load, decrypt and type the named settings section."""
    settings = load_settings(config_files)
    section = get_settings_section(settings, name)

    if not section:
        print(f"Settings section '{name}' not found")

    print(f"Using settings '{name}': {mask_settings(section)}")

    try:
        section = decrypt_settings(section)
    except ValueError as e:
        raise SettingsError(str(e))

    return TeamsSettings.from_section(section)


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    """
    Run the handler.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
        stdin: Stream holding the event JSON (defaults to sys.stdin)

    Returns:
        0 on success, 1 on any failure
    """
    args = build_parser().parse_args(argv)
    stream = stdin if stdin is not None else sys.stdin

    try:
        event = read_event(stream)
        settings = _load_teams_settings(args.json_config, args.config_files)
        handle(event, settings)
        return 0

    except DeliveryError as e:
        print(f"Failed to deliver Teams notification: {e}")
        return 1

    except (EventError, SettingsError) as e:
        print(f"Teams handler error: {e}")
        return 1

    except TemplateError as e:
        print(f"Template rendering failed: {e}")
        print(f"Traceback: {traceback.format_exc()}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
