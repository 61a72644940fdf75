"""
Core package for QBoss.

This package provides window enumeration, window actions, change monitoring
and the saved application registry.
"""

from qboss.core.config import ConfigManager, Settings
from qboss.core.debug import get_logger, setup_logging
from qboss.core.errors import (
    QBossError, BackendUnavailable, PropertyUnavailable, WindowNotFound,
    AppNotFound, LaunchFailed, RegistryError, CaptureFailed, DBusCallFailed
)
from qboss.core.kwin import KWinInterface
from qboss.core.backend import WindowQueryBackend, WindowProperty, normalize_window_id
from qboss.core.windows import WindowDirectory, WindowRecord, WindowSnapshot, SearchField
from qboss.core.actions import WindowActionExecutor
from qboss.core.monitor import ChangeMonitor, WindowEvent, EventKind, MonitorState
from qboss.core.apps import AppRegistry, SavedApp
from qboss.core.launcher import DesktopLauncher
from qboss.core.toggle_manager import ToggleManager, ToggleResult, ToggleAction
from qboss.core.dbus_explorer import DBusExplorer
