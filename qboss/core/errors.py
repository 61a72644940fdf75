"""
Error types raised by the QBoss core.

Every error carries a short human-readable message suitable for printing
directly to the user.
"""


class QBossError(Exception):
    """Base class for all QBoss errors."""


class BackendUnavailable(QBossError):
    """No window enumeration source produced any data."""

    def __init__(self, message: str = "No windows found or DBus interface error"):
        super().__init__(message)


class PropertyUnavailable(QBossError):
    """A single compositor call failed or returned nothing."""

    def __init__(self, method: str, reason: str = ""):
        self.method = method
        self.reason = reason
        message = f"KWin call {method} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class WindowNotFound(QBossError):
    """A referenced window id is absent from a fresh enumeration."""

    def __init__(self, window_id: str):
        self.window_id = window_id
        super().__init__(f"Window ID {window_id} does not exist.")


class AppNotFound(QBossError):
    """A saved application name is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"App not found: {name}")


class LaunchFailed(QBossError):
    """The desktop-entry launcher reported failure."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to launch app {name}: {reason}")


class RegistryError(QBossError):
    """The saved application document could not be read or written."""


class CaptureFailed(QBossError):
    """A window could not be captured by clicking on it."""


class DBusCallFailed(QBossError):
    """A D-Bus introspection or a custom qdbus command failed."""
