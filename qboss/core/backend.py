"""
Window query backend for QBoss.

Window ids are enumerated from an ordered chain of sources: KWin over D-Bus
first, then xdotool, then wmctrl. The first source that returns a non-empty
list wins; results are never merged. Property queries always go to KWin.
"""

import re
import shutil
import subprocess
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple

from qboss.core.debug import get_logger
from qboss.core.errors import BackendUnavailable, PropertyUnavailable
from qboss.core.kwin import KWinInterface

logger = get_logger(__name__)

_HEX_ID = re.compile(r"^0x([0-9a-fA-F]+)$")
_DEC_ID = re.compile(r"^[0-9]+$")


class WindowProperty(str, Enum):
    """Per-window properties, valued by their KWin method name."""
    CLASS = "windowClass"
    TITLE = "windowTitle"
    DESKTOP = "windowDesktop"
    GEOMETRY = "getWindowGeometry"
    MINIMIZED = "isMinimized"
    MAXIMIZED = "isMaximized"
    FULLSCREEN = "isFullScreen"


def normalize_window_id(raw: Any) -> Optional[str]:
    """Bring a window id into its canonical string form.

    Decimal and 0x-prefixed hexadecimal ids become plain decimal strings so
    ids from every source compare equal. Anything else (for example the
    UUIDs newer KWin versions use) is kept as is.

    Args:
        raw: The id as reported by a source or typed by the user

    Returns:
        The canonical id, or None if the value is empty
    """
    if raw is None:
        return None

    text = str(raw).strip()
    if not text:
        return None

    match = _HEX_ID.match(text)
    if match:
        return str(int(match.group(1), 16))
    if _DEC_ID.match(text):
        return str(int(text))
    return text


def run_command(args: Sequence[str]) -> Optional[str]:
    """Run an external tool and return its stdout.

    Returns:
        The command output, or None if the tool is missing or failed
    """
    if not shutil.which(args[0]):
        logger.debug(f"{args[0]} not found in PATH")
        return None

    try:
        result = subprocess.run(list(args),
                                stdout=subprocess.PIPE,
                                stderr=subprocess.PIPE,
                                encoding='utf-8',
                                check=False)
    except OSError as e:
        logger.debug(f"Error running {args[0]}: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"{args[0]} exited with {result.returncode}: {result.stderr.strip()}")
        return None

    return result.stdout


Runner = Callable[[Sequence[str]], Optional[str]]


class WindowSource:
    """A source of window ids. Subclasses implement list_ids()."""

    name = "source"

    def list_ids(self) -> List[str]:
        raise NotImplementedError


class KWinSource(WindowSource):
    """Primary source: KWin's own window list."""

    name = "kwin"

    def __init__(self, kwin: KWinInterface):
        self.kwin = kwin

    def list_ids(self) -> List[str]:
        try:
            return self.kwin.list_windows()
        except PropertyUnavailable:
            return []


class XdotoolSource(WindowSource):
    """Fallback: visible named windows reported by xdotool."""

    name = "xdotool"

    def __init__(self, runner: Runner = run_command):
        self.runner = runner

    def list_ids(self) -> List[str]:
        output = self.runner(["xdotool", "search", "--all", "--onlyvisible", "--name", ""])
        if not output:
            return []
        return output.split()


class WmctrlSource(WindowSource):
    """Fallback: the first column of `wmctrl -l`."""

    name = "wmctrl"

    def __init__(self, runner: Runner = run_command):
        self.runner = runner

    def list_ids(self) -> List[str]:
        output = self.runner(["wmctrl", "-l"])
        if not output:
            return []
        return [line.split()[0] for line in output.splitlines() if line.strip()]


class WindowQueryBackend:
    """Enumerates windows through the fallback chain and queries properties."""

    def __init__(self, kwin: Optional[KWinInterface] = None,
                 sources: Optional[List[WindowSource]] = None):
        """Initialize the backend.

        Args:
            kwin: The primary KWin interface
            sources: Optional ordered enumeration sources; defaults to
                KWin, xdotool and wmctrl
        """
        self.kwin = kwin if kwin is not None else KWinInterface()
        if sources is None:
            sources = [KWinSource(self.kwin), XdotoolSource(), WmctrlSource()]
        self.sources = sources

    def enumerate(self) -> Tuple[str, List[str]]:
        """Return the name of the winning source and its normalized ids.

        Raises:
            BackendUnavailable: If no source produced any id
        """
        for source in self.sources:
            ids = []
            for raw in source.list_ids():
                window_id = normalize_window_id(raw)
                if window_id is not None and window_id not in ids:
                    ids.append(window_id)

            if ids:
                logger.debug(f"Enumerated {len(ids)} windows via {source.name}")
                return source.name, ids

            logger.debug(f"Window source {source.name} returned nothing")

        raise BackendUnavailable()

    def list_window_ids(self) -> List[str]:
        """Return the current window ids, or an empty list if none are available."""
        try:
            return self.enumerate()[1]
        except BackendUnavailable:
            logger.warning("No window source produced any windows")
            return []

    def query_property(self, window_id: str, prop: WindowProperty) -> Optional[Any]:
        """Query one property of one window from KWin.

        Returns:
            The raw value, or None if the query failed or returned nothing
        """
        try:
            return self.kwin.call(prop.value, window_id)
        except PropertyUnavailable:
            return None

    def invoke(self, method: str, *args) -> bool:
        """Issue a state-changing KWin call.

        Returns:
            True if KWin accepted the call, False otherwise
        """
        try:
            self.kwin.call(method, *args)
            return True
        except PropertyUnavailable as e:
            logger.error(str(e))
            return False
