#!/usr/bin/env python3
"""
Main entry point for QBoss.
Provides both CLI and GUI interfaces.
"""

import sys
import json
import argparse
from typing import List, Optional

from qboss.core.config import ConfigManager
from qboss.core.debug import setup_logging, get_logger, get_debug_info
from qboss.core.services import create_services
from qboss.cli.commands import process_command

logger = get_logger(__name__)

COMMANDS = (
    "list", "search", "class", "info", "activate", "minimize", "maximize",
    "close", "fullscreen", "monitor", "click", "script", "apps", "app-save",
    "app-list", "app-delete", "toggle", "service", "introspect", "exec",
)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="qboss",
        description="QBoss - KDE window manager companion",
        epilog="Any other first argument is treated as a saved app name to launch or toggle.",
    )

    # General options
    parser.add_argument("--version", action="store_true", help="Show version information")
    parser.add_argument("--init", action="store_true", help="Initialize default configuration")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--debug-info", action="store_true", help="Show environment diagnostics")
    parser.add_argument("-l", "--log-level", choices=["debug", "info", "warn", "error"],
                        help="Set and save the log level")
    parser.add_argument("--compact", action="store_true", help="Enable and save compact view mode")
    parser.add_argument("--config-dir", help="Use an alternative configuration directory")
    parser.add_argument("--gui", action="store_true", help="Launch GUI (default if no command)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("list", help="List all windows")

    search_parser = subparsers.add_parser("search", help="Search windows by term")
    search_parser.add_argument("term", nargs="?", default="", help="Text to search for")
    search_parser.add_argument("--by", choices=["class", "title", "both"], default="both",
                               help="Attribute to match (default: both)")

    class_parser = subparsers.add_parser("class", help="List window classes")
    class_parser.add_argument("filter", nargs="?", default="", help="Optional class filter")

    info_parser = subparsers.add_parser("info", help="Show window information")
    info_parser.add_argument("window_id", help="Window ID")

    for action in ("activate", "minimize", "maximize", "close"):
        action_parser = subparsers.add_parser(action, help=f"{action.capitalize()} a window")
        action_parser.add_argument("window_id", help="Window ID")

    fullscreen_parser = subparsers.add_parser("fullscreen", help="Toggle fullscreen for a window")
    fullscreen_parser.add_argument("window_id", help="Window ID")

    subparsers.add_parser("monitor", help="Monitor window creation/destruction")
    subparsers.add_parser("click", help="Capture window properties on click")

    service_parser = subparsers.add_parser("service", help="List DBus services")
    service_parser.add_argument("filter", nargs="?", default="", help="Optional service filter")

    introspect_parser = subparsers.add_parser("introspect", help="List object paths or members of a DBus service")
    introspect_parser.add_argument("service", help="DBus service name")
    introspect_parser.add_argument("path", nargs="?", help="Object path whose members to list")

    exec_parser = subparsers.add_parser("exec", help="Execute a custom qdbus command")
    exec_parser.add_argument("qdbus_args", nargs=argparse.REMAINDER, help="Arguments passed to qdbus")

    script_parser = subparsers.add_parser("script", help="Generate shell script for a window")
    script_parser.add_argument("window_id", help="Window ID")

    subparsers.add_parser("apps", help="Manage saved applications in the GUI")

    save_parser = subparsers.add_parser("app-save", help="Save a clicked window as an app")
    save_parser.add_argument("name", help="Name of the application")
    save_parser.add_argument("--window", help="Save this window ID instead of clicking")

    subparsers.add_parser("app-list", help="List saved applications")

    delete_parser = subparsers.add_parser("app-delete", help="Delete a saved application")
    delete_parser.add_argument("name", help="Name of the application")

    toggle_parser = subparsers.add_parser("toggle", help="Launch or toggle a saved application")
    toggle_parser.add_argument("name", help="Name of the application")

    return parser


def normalize_argv(argv: List[str]) -> List[str]:
    """Rewrite `qboss <app-name>` into `qboss toggle <app-name>`.

    The first argument that is not an option is the command; if it is not a
    known command it names a saved app.
    """
    argv = list(argv)
    options_with_values = ("-l", "--log-level", "--config-dir")

    index = 0
    while index < len(argv):
        arg = argv[index]
        if arg in options_with_values:
            index += 2
            continue
        if arg.startswith("-"):
            index += 1
            continue
        if arg not in COMMANDS:
            argv.insert(index, "toggle")
        break

    return argv


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    if argv is None:
        argv = sys.argv[1:]
    return build_parser().parse_args(normalize_argv(argv))


def run_gui(config: ConfigManager, initial_tab: str = "windows") -> int:
    """Launch the GUI."""
    from PyQt5.QtWidgets import QApplication
    from qboss.gui.main_window import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName("QBoss")

    services = create_services(config.settings)
    main_window = MainWindow(services, initial_tab=initial_tab)
    main_window.show()

    return app.exec_()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)

    config = ConfigManager(args.config_dir)

    if args.log_level:
        config.set_log_level(args.log_level)
        config.save_config()
        print(f"Log level set to {args.log_level}.")

    if args.compact:
        config.set_setting("display", "compact_view", True)
        config.save_config()
        print("Compact view enabled.")

    settings = config.settings
    setup_logging("debug" if args.debug else settings.log_level, str(settings.log_dir))

    if args.init:
        logger.info("Initializing default configuration")
        if not config.initialize_default():
            print("Failed to initialize configuration.")
            return 1
        print(f"Configuration initialized in {config.user_config_dir}")
        return 0

    if args.version:
        from qboss import __version__
        print(f"QBoss version {__version__}")
        return 0

    if args.debug_info:
        print(json.dumps(get_debug_info(), indent=2, default=str))
        return 0

    if args.command == "apps":
        return run_gui(config, initial_tab="apps")

    if args.command:
        return process_command(args, create_services(settings))

    if args.gui or not (args.log_level or args.compact):
        return run_gui(config)

    return 0


if __name__ == "__main__":
    sys.exit(main())
