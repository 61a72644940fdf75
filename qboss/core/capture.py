"""
Click-to-capture support for QBoss.

The user clicks a window, xdotool reports the owning process id, and the
enumerated windows are scanned for the one whose _NET_WM_PID matches.
"""

import re
from typing import Optional

import psutil

from qboss.core.backend import Runner, WindowQueryBackend, run_command
from qboss.core.debug import get_logger
from qboss.core.errors import CaptureFailed

logger = get_logger(__name__)

_PID_VALUE = re.compile(r"=\s*(\d+)")


class WindowCapture:
    """Resolves a clicked window or a process id to a window id."""

    def __init__(self, backend: WindowQueryBackend, runner: Runner = run_command):
        self.backend = backend
        self.runner = runner

    def select_pid(self) -> Optional[int]:
        """Let the user click a window and return its process id."""
        output = self.runner(["xdotool", "selectwindow", "getwindowpid"])
        if not output or not output.strip().isdigit():
            return None
        return int(output.strip())

    def window_pid(self, window_id: str) -> Optional[int]:
        """Read _NET_WM_PID of a window with xprop."""
        output = self.runner(["xprop", "-id", window_id, "_NET_WM_PID"])
        if not output:
            return None

        match = _PID_VALUE.search(output)
        return int(match.group(1)) if match else None

    def window_for_pid(self, pid: int) -> Optional[str]:
        """Return the first enumerated window owned by the process."""
        for window_id in self.backend.list_window_ids():
            if self.window_pid(window_id) == pid:
                return window_id
        return None

    def capture(self) -> str:
        """Capture a window by clicking on it.

        Raises:
            CaptureFailed: If the click or the pid lookup failed
        """
        pid = self.select_pid()
        if pid is None:
            logger.error("Failed to capture window with xdotool")
            raise CaptureFailed("Failed to capture window. Make sure xdotool is installed.")

        window_id = self.window_for_pid(pid)
        if window_id is None:
            logger.warning(f"Could not find KWin window ID for process ID {pid}")
            raise CaptureFailed(f"Could not find KWin window ID for process ID {pid}.")

        logger.info(f"Captured window ID {window_id} (pid {pid}, {process_name(pid)})")
        return window_id


def process_name(pid: Optional[int]) -> Optional[str]:
    """Return the name of a running process, or None."""
    if pid is None:
        return None
    try:
        return psutil.Process(pid).name()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return None
