"""
Wiring of the QBoss core components.

Every component receives the immutable Settings value or the collaborators
it needs through its constructor; this module builds them in one place for
the CLI and the GUI.
"""

from typing import NamedTuple, Optional

from qboss.core.actions import WindowActionExecutor
from qboss.core.apps import AppRegistry
from qboss.core.backend import WindowQueryBackend
from qboss.core.capture import WindowCapture
from qboss.core.config import Settings
from qboss.core.dbus_explorer import DBusExplorer
from qboss.core.launcher import DesktopLauncher
from qboss.core.monitor import ChangeMonitor
from qboss.core.notify import Notifier
from qboss.core.script_generator import ScriptGenerator
from qboss.core.toggle_manager import ToggleManager
from qboss.core.windows import WindowDirectory


class Services(NamedTuple):
    settings: Settings
    backend: WindowQueryBackend
    directory: WindowDirectory
    executor: WindowActionExecutor
    registry: AppRegistry
    toggle_manager: ToggleManager
    capture: WindowCapture
    script_generator: ScriptGenerator
    explorer: DBusExplorer

    def create_monitor(self) -> ChangeMonitor:
        return ChangeMonitor(self.directory, interval=self.settings.poll_interval)


def create_services(settings: Settings, backend: Optional[WindowQueryBackend] = None,
                    launcher: Optional[DesktopLauncher] = None) -> Services:
    """Build the core components for one invocation.

    Args:
        settings: The resolved configuration
        backend: Optional window backend; KWin with xdotool/wmctrl fallbacks by default
        launcher: Optional desktop entry launcher
    """
    if backend is None:
        backend = WindowQueryBackend()

    notifier = Notifier(settings)
    directory = WindowDirectory(backend)
    executor = WindowActionExecutor(backend, notifier)
    registry = AppRegistry(settings.apps_file)
    toggle_manager = ToggleManager(registry, directory, executor, launcher, notifier)

    return Services(
        settings=settings,
        backend=backend,
        directory=directory,
        executor=executor,
        registry=registry,
        toggle_manager=toggle_manager,
        capture=WindowCapture(backend),
        script_generator=ScriptGenerator(settings),
        explorer=DBusExplorer(),
    )
