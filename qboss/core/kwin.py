"""
KWin integration for QBoss.

This module talks to KDE's window manager (KWin) over the session D-Bus.
It is the primary window interface: enumeration, property queries and
state-changing calls all go through it.
"""

from typing import Any, List

from qboss.core.debug import get_logger
from qboss.core.errors import PropertyUnavailable

logger = get_logger(__name__)

KWIN_SERVICE = "org.kde.KWin"
KWIN_PATH = "/KWin"
KWIN_INTERFACE = "org.kde.KWin"


class KWinInterface:
    """Thin wrapper around the org.kde.KWin D-Bus interface."""

    def __init__(self, bus=None):
        """Initialize the KWin interface.

        Args:
            bus: Optional D-Bus connection; the session bus is used by default
        """
        self._bus = bus
        self._interface = None

    def _get_interface(self):
        """Connect to KWin on first use."""
        if self._interface is None:
            import dbus

            bus = self._bus if self._bus is not None else dbus.SessionBus()
            proxy = bus.get_object(KWIN_SERVICE, KWIN_PATH)
            self._interface = dbus.Interface(proxy, dbus_interface=KWIN_INTERFACE)
            logger.debug(f"Connected to {KWIN_SERVICE} {KWIN_PATH}")

        return self._interface

    def call(self, method: str, *args) -> Any:
        """Call a KWin method.

        Args:
            method: The method name on the org.kde.KWin interface
            *args: Method arguments

        Returns:
            The raw D-Bus reply

        Raises:
            PropertyUnavailable: If the connection or the call failed
        """
        try:
            return getattr(self._get_interface(), method)(*args)
        except Exception as e:
            logger.debug(f"KWin call {method}{args} failed: {e}")
            raise PropertyUnavailable(method, str(e)) from e

    def is_available(self) -> bool:
        """Check whether the KWin D-Bus interface can be reached."""
        try:
            self._get_interface()
            return True
        except Exception as e:
            logger.error(f"KWin DBus interface not available: {e}")
            return False

    def list_windows(self) -> List[str]:
        """Return the raw window ids KWin reports."""
        reply = self.call("listWindows")
        if reply is None:
            return []
        if isinstance(reply, str):
            return reply.split()
        return [str(item) for item in reply]
