"""
D-Bus explorer for QBoss.

Lists the services on the session bus, walks their object paths and
members through org.freedesktop.DBus.Introspectable, and runs custom
qdbus commands for the calls the window actions do not cover.
"""

import shlex
import subprocess
import xml.etree.ElementTree as ElementTree
from typing import List

from qboss.core.debug import get_logger
from qboss.core.errors import DBusCallFailed

logger = get_logger(__name__)

INTROSPECTABLE = "org.freedesktop.DBus.Introspectable"


def _arguments(element, direction: str) -> str:
    args = []
    for arg in element.findall("arg"):
        if arg.get("direction", "in") != direction:
            continue
        name = arg.get("name")
        args.append(f"{arg.get('type')} {name}" if name else arg.get("type"))
    return ", ".join(args)


def parse_members(xml_data: str) -> List[str]:
    """Describe the methods, signals and properties of an introspection document."""
    try:
        root = ElementTree.fromstring(xml_data)
    except ElementTree.ParseError as e:
        raise DBusCallFailed(f"Invalid introspection data: {e}") from e

    members = []
    for interface in root.findall("interface"):
        prefix = interface.get("name")

        for prop in interface.findall("property"):
            members.append(f"property {prop.get('access')} {prop.get('type')} "
                           f"{prefix}.{prop.get('name')}")

        for signal in interface.findall("signal"):
            members.append(f"signal {prefix}.{signal.get('name')}({_arguments(signal, 'in')})")

        for method in interface.findall("method"):
            line = f"method {prefix}.{method.get('name')}({_arguments(method, 'in')})"
            returns = _arguments(method, "out")
            if returns:
                line += f" -> {returns}"
            members.append(line)

    return members


def parse_children(xml_data: str, path: str) -> List[str]:
    """Return the child object paths named by an introspection document."""
    try:
        root = ElementTree.fromstring(xml_data)
    except ElementTree.ParseError as e:
        raise DBusCallFailed(f"Invalid introspection data: {e}") from e

    base = path.rstrip("/")
    return [f"{base}/{node.get('name')}" for node in root.findall("node") if node.get("name")]


class DBusExplorer:
    """Browses the session bus the way `qdbus` does."""

    command = "qdbus"

    def __init__(self, bus=None):
        """Initialize the explorer.

        Args:
            bus: Optional D-Bus connection; the session bus is used by default
        """
        self._bus = bus

    def _get_bus(self):
        if self._bus is None:
            import dbus

            self._bus = dbus.SessionBus()
        return self._bus

    def services(self, name_filter: str = "") -> List[str]:
        """Well-known service names on the bus, sorted, optionally filtered by substring.

        Raises:
            DBusCallFailed: If the bus cannot be reached
        """
        try:
            names = [str(name) for name in self._get_bus().list_names()]
        except Exception as e:
            logger.error(f"Error listing DBus services: {e}")
            raise DBusCallFailed(f"Could not list DBus services: {e}") from e

        names = sorted(name for name in names if not name.startswith(":"))
        if name_filter:
            names = [name for name in names if name_filter in name]

        logger.debug(f"Found {len(names)} DBus services")
        return names

    def introspect(self, service: str, path: str = "/") -> str:
        """Return the raw introspection XML of one object.

        Raises:
            DBusCallFailed: If the object cannot be introspected
        """
        try:
            proxy = self._get_bus().get_object(service, path, introspect=False)
            return str(proxy.Introspect(dbus_interface=INTROSPECTABLE))
        except Exception as e:
            logger.debug(f"Introspection of {service} {path} failed: {e}")
            raise DBusCallFailed(f"Could not introspect {service} {path}: {e}") from e

    def object_paths(self, service: str) -> List[str]:
        """All object paths a service exports, depth first from the root."""
        paths = []
        pending = ["/"]

        while pending:
            path = pending.pop(0)
            paths.append(path)
            children = parse_children(self.introspect(service, path), path)
            pending = children + pending

        return paths

    def members(self, service: str, path: str) -> List[str]:
        """Methods, signals and properties of one object."""
        return parse_members(self.introspect(service, path))

    def execute(self, command: str) -> str:
        """Run `qdbus <command>` and return its output.

        Raises:
            DBusCallFailed: If the command is empty or qdbus failed
        """
        args = shlex.split(command) if command else []
        if not args:
            logger.warning("Custom qdbus command cannot be empty")
            raise DBusCallFailed("Command cannot be empty.")

        try:
            result = subprocess.run([self.command] + args,
                                    stdout=subprocess.PIPE,
                                    stderr=subprocess.STDOUT,
                                    encoding='utf-8',
                                    check=False)
        except OSError as e:
            logger.error(f"Error running {self.command}: {e}")
            raise DBusCallFailed(f"Error executing command: {e}") from e

        output = result.stdout.strip()
        if result.returncode != 0:
            logger.error(f"Error executing command '{self.command} {command}': {output}")
            raise DBusCallFailed(f"Error executing command: {output}")

        logger.info(f"Executed custom command '{self.command} {command}'")
        return output
