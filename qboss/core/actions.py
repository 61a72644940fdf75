"""
Window actions for QBoss.

Every action re-enumerates the windows first and refuses to touch an id
that is not currently present. Actions are fire-and-forget: KWin's reply
is the only success signal, nothing is polled or retried afterwards.
"""

from typing import Optional

from qboss.core.backend import WindowProperty, WindowQueryBackend, normalize_window_id
from qboss.core.debug import get_logger
from qboss.core.errors import WindowNotFound
from qboss.core.notify import Notifier

logger = get_logger(__name__)


class WindowActionExecutor:
    """Issues state-changing KWin calls against a single window."""

    def __init__(self, backend: WindowQueryBackend, notifier: Optional[Notifier] = None):
        """Initialize the action executor.

        Args:
            backend: The window query backend
            notifier: Optional notifier for successful actions
        """
        self.backend = backend
        self.notifier = notifier

    def _require_window(self, window_id: str) -> str:
        """Return the canonical id of a window that currently exists.

        Raises:
            WindowNotFound: If the id is absent from a fresh enumeration
        """
        canonical = normalize_window_id(window_id)
        if canonical is None or canonical not in self.backend.list_window_ids():
            logger.error(f"Window ID {window_id} does not exist")
            raise WindowNotFound(str(window_id))
        return canonical

    def _perform(self, window_id: str, method: str, verb: str, *extra) -> bool:
        window_id = self._require_window(window_id)

        title = self.backend.query_property(window_id, WindowProperty.TITLE)
        title = str(title) if title is not None else window_id

        if not self.backend.invoke(method, window_id, *extra):
            logger.error(f"Failed to {verb} window ID {window_id}")
            return False

        logger.info(f"Window {window_id} {verb}d: {title}")
        if self.notifier:
            self.notifier.notify(f"Window {verb}d: {title}")
        return True

    def activate(self, window_id: str) -> bool:
        """Bring a window to the foreground."""
        return self._perform(window_id, "setCurrentWindow", "activate")

    def minimize(self, window_id: str) -> bool:
        return self._perform(window_id, "minimizeWindow", "minimize")

    def unminimize(self, window_id: str) -> bool:
        return self._perform(window_id, "unminimizeWindow", "unminimize")

    def maximize(self, window_id: str) -> bool:
        return self._perform(window_id, "maximizeWindow", "maximize")

    def set_fullscreen(self, window_id: str, enabled: bool) -> bool:
        """Set the fullscreen state. This is a setter, not a toggle."""
        verb = "fullscreen" if enabled else "unfullscreen"
        window_id = self._require_window(window_id)

        if not self.backend.invoke("setFullScreen", window_id, bool(enabled)):
            logger.error(f"Failed to {verb} window ID {window_id}")
            return False

        logger.info(f"Fullscreen {'enabled' if enabled else 'disabled'} for window {window_id}")
        if self.notifier:
            self.notifier.notify(f"Fullscreen {'enabled' if enabled else 'disabled'}: {window_id}")
        return True

    def close(self, window_id: str) -> bool:
        return self._perform(window_id, "closeWindow", "close")
