"""
Command-line interface commands for QBoss.

This module handles processing of command-line arguments and executing
the corresponding actions.
"""

import argparse
import shlex
from typing import Any, List

from qboss.core.capture import process_name
from qboss.core.debug import get_logger
from qboss.core.errors import BackendUnavailable, QBossError, WindowNotFound
from qboss.core.monitor import EventKind, WindowEvent
from qboss.core.services import Services
from qboss.core.toggle_manager import ToggleAction
from qboss.core.windows import SearchField, WindowRecord

logger = get_logger(__name__)

WINDOW_ACTIONS = ("activate", "minimize", "maximize", "close")


def process_command(args: argparse.Namespace, services: Services) -> int:
    """Process a command-line command.

    Args:
        args: The parsed command-line arguments
        services: The core components for this invocation

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    handlers = {
        "list": cmd_list,
        "search": cmd_search,
        "class": cmd_class,
        "info": cmd_info,
        "fullscreen": cmd_fullscreen,
        "monitor": cmd_monitor,
        "click": cmd_click,
        "script": cmd_script,
        "app-save": cmd_app_save,
        "app-list": cmd_app_list,
        "app-delete": cmd_app_delete,
        "toggle": cmd_toggle,
        "service": cmd_service,
        "introspect": cmd_introspect,
        "exec": cmd_exec,
    }

    if args.command in WINDOW_ACTIONS:
        handler = cmd_window_action
    else:
        handler = handlers.get(args.command)

    if handler is None:
        print(f"Unknown command: {args.command}")
        return 1

    try:
        return handler(args, services)
    except (QBossError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}")
        return 1


def _value(value: Any) -> str:
    """Render an optional attribute for display."""
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _truncate(text: str, width: int = 40) -> str:
    if len(text) > width:
        return text[:width - 3] + "..."
    return text


def _print_windows(records: List[WindowRecord], compact: bool) -> None:
    """Print a table of windows."""
    if compact:
        print(f"{'ID':<12} {'Class':<28} Title")
    else:
        print(f"{'ID':<12} {'Class':<28} {'Desktop':<8} {'State':<11} Title")

    for record in records:
        window_class = _truncate(_value(record.window_class), 28)
        if compact:
            print(f"{record.id:<12} {window_class:<28} {_value(record.title)}")
        else:
            print(f"{record.id:<12} {window_class:<28} {_value(record.desktop):<8} "
                  f"{record.state:<11} {_value(record.title)}")


def cmd_list(args: argparse.Namespace, services: Services) -> int:
    """List all windows.

    Unlike the other listings, an empty enumeration is reported as an error.
    """
    try:
        source, ids = services.backend.enumerate()
    except BackendUnavailable as e:
        print(f"Error listing windows: {e}")
        logger.error(f"Error listing windows: {e}")
        return 1

    logger.debug(f"Listing windows from {source}")
    records = [services.directory.resolve(window_id) for window_id in ids]
    records = [record for record in records if not record.is_noise]

    _print_windows(records, services.settings.compact_view)
    print("")
    print(f"{len(records)} windows found.")
    logger.info(f"Listed {len(records)} windows")
    return 0


def cmd_search(args: argparse.Namespace, services: Services) -> int:
    """Search windows by class, title or both."""
    term = args.term or ""
    if not term:
        print("Search term cannot be empty.")
        logger.warning("Search term cannot be empty")
        return 1

    snapshot = services.directory.snapshot()
    if not len(snapshot):
        print("No windows found.")
        return 0

    matches = services.directory.find(term, SearchField(args.by), snapshot)
    if not matches:
        print(f"No matches found for '{term}'.")
        logger.info(f"No matches found for '{term}'")
        return 0

    print(f"Search results for \"{term}\":")
    print("")
    _print_windows(matches, services.settings.compact_view)
    print("")
    print(f"{len(matches)} matches found.")
    logger.info(f"Search for '{term}' found {len(matches)} matches")
    return 0


def cmd_class(args: argparse.Namespace, services: Services) -> int:
    """List window classes with their window counts."""
    class_filter = args.filter or ""
    snapshot = services.directory.snapshot()
    if not len(snapshot):
        print("No windows found.")
        return 0

    groups = services.directory.classes(class_filter, snapshot)
    if not groups:
        if class_filter:
            print(f"No classes found matching '{class_filter}'.")
        else:
            print("No classes found.")
        return 0

    print(f"{'Class':<32} {'Windows':<8} Example Window")
    for window_class, records in groups.items():
        example = _truncate(_value(records[0].title))
        print(f"{_truncate(_value(window_class), 32):<32} {len(records):<8} {example}")

    print("")
    print(f"{len(groups)} classes found.")
    logger.info(f"Listed {len(groups)} window classes")
    return 0


def cmd_info(args: argparse.Namespace, services: Services) -> int:
    """Show the details of one window."""
    record = services.directory.get(args.window_id)
    if record is None:
        raise WindowNotFound(args.window_id)

    _print_window_details(record, services)
    logger.info(f"Displayed info for window ID {record.id}")
    return 0


def _print_window_details(record: WindowRecord, services: Services) -> None:
    pid = services.capture.window_pid(record.id)

    print(f"Window ID: {record.id}")
    print(f"  Title:      {_value(record.title)}")
    print(f"  Class:      {_value(record.window_class)}")
    print(f"  Desktop:    {_value(record.desktop)}")
    print(f"  Geometry:   {_value(record.geometry)}")
    print(f"  Process ID: {_value(pid)}")
    print(f"  Process:    {_value(process_name(pid))}")
    print(f"  Fullscreen: {_value(record.fullscreen)}")
    print(f"  Minimized:  {_value(record.minimized)}")
    print(f"  Maximized:  {_value(record.maximized)}")


def cmd_window_action(args: argparse.Namespace, services: Services) -> int:
    """Activate, minimize, maximize or close a window."""
    action = getattr(services.executor, args.command)

    if action(args.window_id):
        print(f"Window {args.command}d: {args.window_id}")
        return 0

    print(f"Error: Failed to {args.command} window.")
    return 1


def cmd_fullscreen(args: argparse.Namespace, services: Services) -> int:
    """Toggle the fullscreen state of a window."""
    record = services.directory.get(args.window_id)
    if record is None:
        raise WindowNotFound(args.window_id)

    enable = not record.fullscreen
    if services.executor.set_fullscreen(record.id, enable):
        print(f"Fullscreen {'enabled' if enable else 'disabled'}: {_value(record.title)}")
        return 0

    print("Error: Failed to change fullscreen state.")
    return 1


def _print_event(event: WindowEvent) -> None:
    if event.kind is EventKind.DISAPPEARED:
        print(f"Closed window: ID: {event.window_id}", flush=True)
        return

    record = event.record
    prefix = "New window: " if event.kind is EventKind.APPEARED else ""
    print(f"{prefix}ID: {event.window_id}, Class: {_value(record.window_class)}, "
          f"Title: {_value(record.title)}", flush=True)


def cmd_monitor(args: argparse.Namespace, services: Services) -> int:
    """Monitor window creation and destruction until interrupted."""
    print("Monitoring window creation/destruction...")
    print("Press Ctrl+C to stop monitoring.")
    print("")
    print("Initial windows:")

    monitor = services.create_monitor()
    monitor.run(_print_event)

    print("")
    print("Monitoring stopped.")
    return 0


def cmd_click(args: argparse.Namespace, services: Services) -> int:
    """Capture a window by clicking on it and show its details."""
    print("Click on a window to capture its properties...", flush=True)
    window_id = services.capture.capture()

    _print_window_details(services.directory.resolve(window_id), services)
    return 0


def cmd_script(args: argparse.Namespace, services: Services) -> int:
    """Generate a shell script for interacting with a window."""
    record = services.directory.get(args.window_id)
    if record is None:
        raise WindowNotFound(args.window_id)

    script_path = services.script_generator.generate(record)
    print(f"Script created: {script_path}")
    return 0


def cmd_app_save(args: argparse.Namespace, services: Services) -> int:
    """Save a window as a named application."""
    if not args.name:
        print("App name cannot be empty.")
        return 1

    window_id = args.window
    if not window_id:
        print(f"Click on a window to save as '{args.name}'...", flush=True)
        window_id = services.capture.capture()

    record = services.directory.get(window_id)
    if record is None:
        raise WindowNotFound(window_id)

    app = services.registry.create_from_window(args.name, record)
    updated = services.registry.save(app)

    print(f"{'Updated' if updated else 'Saved'} app: {app.name} "
          f"(class: {app.window_class}, desktop file: {app.desktop_file})")
    return 0


def cmd_app_list(args: argparse.Namespace, services: Services) -> int:
    """List saved applications."""
    apps = services.registry.list()
    if not apps:
        print("No saved applications found.")
        return 0

    print(f"{'#':<4} {'Name':<20} {'Class':<28} Desktop File")
    for index, app in enumerate(apps, start=1):
        print(f"{index:<4} {app.name:<20} {app.window_class:<28} {app.desktop_file}")

    print("")
    print(f"{len(apps)} application(s) found.")
    print("Use `qboss <app-name>` to launch or toggle an application.")
    logger.info(f"Listed {len(apps)} saved applications")
    return 0


def cmd_app_delete(args: argparse.Namespace, services: Services) -> int:
    """Delete a saved application."""
    if not services.registry.delete(args.name):
        print(f"App not found: {args.name}")
        return 1

    print(f"Deleted app: {args.name}")
    return 0


def cmd_toggle(args: argparse.Namespace, services: Services) -> int:
    """Launch or toggle a saved application."""
    result = services.toggle_manager.launch_or_toggle(args.name)

    if not result.success:
        print(f"Error: Failed to toggle app: {result.app.name}")
        return 1

    if result.action is ToggleAction.LAUNCHED:
        print(f"App launched: {result.app.name}")
    else:
        print(f"App {result.action.value}: {result.app.name} (window ID: {result.window_id})")
    return 0


def cmd_service(args: argparse.Namespace, services: Services) -> int:
    """List DBus services, optionally filtered by substring."""
    name_filter = args.filter or ""
    names = services.explorer.services(name_filter)

    if not names:
        if name_filter:
            print(f"No services found matching '{name_filter}'.")
        else:
            print("No DBus services found.")
        return 0

    if name_filter:
        print(f"DBus services matching \"{name_filter}\":")
        print("")
    for name in names:
        print(name)

    print("")
    print(f"{len(names)} services found.")
    logger.info(f"Listed {len(names)} DBus services")
    return 0


def cmd_introspect(args: argparse.Namespace, services: Services) -> int:
    """List the object paths of a service, or the members of one object."""
    explorer = services.explorer

    if args.path:
        lines = explorer.members(args.service, args.path)
        empty = f"No methods found for {args.service} {args.path}."
    else:
        lines = explorer.object_paths(args.service)
        empty = f"No objects found for service '{args.service}'."

    if not lines:
        print(empty)
        return 0

    for line in lines:
        print(line)
    logger.info(f"Introspected {args.service} {args.path or ''}".rstrip())
    return 0


def cmd_exec(args: argparse.Namespace, services: Services) -> int:
    """Execute a custom qdbus command and print its result."""
    output = services.explorer.execute(shlex.join(args.qdbus_args))

    print("Result:")
    print(output)
    return 0
