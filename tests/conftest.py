"""
Shared fixtures for the QBoss test suite.

The KWin interface, the external tool runner and the launcher are replaced
by in-memory fakes so no D-Bus session, X server or Qt is needed.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from qboss.core.backend import KWinSource, WindowQueryBackend, WindowSource
from qboss.core.config import Settings
from qboss.core.errors import PropertyUnavailable

ACTION_METHODS = (
    "setCurrentWindow", "minimizeWindow", "unminimizeWindow",
    "maximizeWindow", "setFullScreen", "closeWindow",
)


class FakeKWin:
    """In-memory stand-in for KWinInterface.

    `windows` maps a window id to the replies of its property methods;
    a property missing from the mapping behaves like a failed D-Bus call.
    """

    def __init__(self, windows: Optional[Dict[str, Dict[str, object]]] = None):
        self.windows = windows if windows is not None else {}
        self.calls = []  # type: List[tuple]
        self.failing = set()

    def list_windows(self) -> List[str]:
        return list(self.windows)

    def call(self, method: str, *args):
        self.calls.append((method,) + args)

        if method in self.failing:
            raise PropertyUnavailable(method, "simulated failure")

        if method in ACTION_METHODS:
            window_id = args[0]
            if method == "minimizeWindow":
                self.windows[window_id]["isMinimized"] = True
            elif method == "unminimizeWindow":
                self.windows[window_id]["isMinimized"] = False
            elif method == "setFullScreen":
                self.windows[window_id]["isFullScreen"] = args[1]
            return None

        properties = self.windows.get(args[0]) if args else None
        if properties is None or method not in properties:
            raise PropertyUnavailable(method, "no reply")
        return properties[method]

    def action_calls(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in ACTION_METHODS]


class FakeSource(WindowSource):
    """Enumeration source returning a fixed, mutable list of raw ids."""

    def __init__(self, name: str, ids: Optional[List[str]] = None):
        self.name = name
        self.ids = ids if ids is not None else []
        self.calls = 0

    def list_ids(self) -> List[str]:
        self.calls += 1
        return list(self.ids)


def window(window_class=None, title=None, desktop=1, minimized=False,
           maximized=False, fullscreen=False) -> Dict[str, object]:
    """Build the KWin replies for one window; None leaves a property unavailable."""
    replies = {
        "windowClass": window_class,
        "windowTitle": title,
        "windowDesktop": desktop,
        "getWindowGeometry": {"x": 0, "y": 0, "width": 800, "height": 600},
        "isMinimized": minimized,
        "isMaximized": maximized,
        "isFullScreen": fullscreen,
    }
    return {method: value for method, value in replies.items() if value is not None}


@pytest.fixture
def kwin():
    return FakeKWin()


@pytest.fixture
def backend(kwin):
    return WindowQueryBackend(kwin=kwin, sources=[KWinSource(kwin)])


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        config_dir=tmp_path,
        apps_file=tmp_path / "apps.json",
        log_dir=tmp_path / "logs",
        script_dir=tmp_path / "scripts",
        notifications=False,
    )


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() changes to the root logger after a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
