"""
Toggle Manager for QBoss.

This module decides what happens when a saved application is invoked by
name: launch it when no window of its class exists, bring its window back
when it is minimized, and minimize it otherwise.
"""

from enum import Enum
from typing import NamedTuple, Optional

from qboss.core.actions import WindowActionExecutor
from qboss.core.apps import AppRegistry, SavedApp
from qboss.core.debug import get_logger
from qboss.core.launcher import DesktopLauncher
from qboss.core.notify import Notifier
from qboss.core.windows import WindowDirectory, WindowRecord

logger = get_logger(__name__)


class ToggleAction(Enum):
    LAUNCHED = "launched"
    ACTIVATED = "activated"
    MINIMIZED = "minimized"


class ToggleResult(NamedTuple):
    """Outcome of a launch-or-toggle request."""
    action: ToggleAction
    app: SavedApp
    window_id: Optional[str] = None
    success: bool = True


class ToggleManager:
    """Launches or toggles saved applications."""

    def __init__(self, registry: AppRegistry, directory: WindowDirectory,
                 executor: WindowActionExecutor, launcher: Optional[DesktopLauncher] = None,
                 notifier: Optional[Notifier] = None):
        """Initialize the toggle manager.

        Args:
            registry: The saved application registry
            directory: The window directory
            executor: The window action executor
            launcher: The desktop entry launcher
            notifier: Optional notifier for toggle results
        """
        self.registry = registry
        self.directory = directory
        self.executor = executor
        self.launcher = launcher if launcher is not None else DesktopLauncher()
        self.notifier = notifier

    def find_window(self, app: SavedApp) -> Optional[WindowRecord]:
        """Return the first live window whose class equals the app's class."""
        return self.directory.first_with_class(app.window_class)

    def launch_or_toggle(self, name: str) -> ToggleResult:
        """Launch, activate or minimize a saved application.

        Only the first window of the app's class in enumeration order is
        considered; its minimized state alone decides the branch.

        Args:
            name: The saved app name

        Returns:
            The action taken and whether the compositor accepted it

        Raises:
            AppNotFound: If the name is not registered
            LaunchFailed: If no window exists and launching failed
            WindowNotFound: If the window vanished before it could be changed
        """
        app = self.registry.find(name)
        window = self.find_window(app)

        if window is None:
            self.launcher.launch(app.name, app.desktop_file)
            self._notify(f"App launched: {app.name}")
            return ToggleResult(ToggleAction.LAUNCHED, app)

        if window.minimized:
            success = self.executor.unminimize(window.id)
            success = self.executor.activate(window.id) and success
            action = ToggleAction.ACTIVATED
        else:
            success = self.executor.minimize(window.id)
            action = ToggleAction.MINIMIZED

        if success:
            logger.info(f"{action.value.capitalize()} app: {app.name} (window ID: {window.id})")
            self._notify(f"App {action.value}: {app.name}")
        else:
            logger.error(f"Failed to toggle app: {app.name} (window ID: {window.id})")

        return ToggleResult(action, app, window.id, success)

    def _notify(self, message: str) -> None:
        if self.notifier:
            self.notifier.notify(message)
