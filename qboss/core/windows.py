"""
Window directory for QBoss.

Snapshots capture the ordered window ids at one instant; records are
resolved from them on demand, one KWin query per attribute. Nothing is
cached: every snapshot and every resolve asks the backend again.
"""

from collections import OrderedDict
from enum import Enum
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple

from qboss.core.backend import WindowProperty, WindowQueryBackend, normalize_window_id
from qboss.core.debug import get_logger

logger = get_logger(__name__)


class WindowRecord(NamedTuple):
    """Best-effort view of one window. None marks an unavailable attribute."""
    id: str
    window_class: Optional[str] = None
    title: Optional[str] = None
    desktop: Optional[int] = None
    geometry: Optional[str] = None
    minimized: Optional[bool] = None
    maximized: Optional[bool] = None
    fullscreen: Optional[bool] = None

    @property
    def is_noise(self) -> bool:
        """Helper and tooltip windows report neither a class nor a title."""
        return self.window_class is None and self.title is None

    @property
    def state(self) -> str:
        """Human readable window state."""
        if self.fullscreen:
            return "Fullscreen"
        if self.maximized:
            return "Maximized"
        if self.minimized:
            return "Minimized"
        if self.minimized is None and self.maximized is None and self.fullscreen is None:
            return "Unknown"
        return "Normal"


class SearchField(str, Enum):
    """Which attribute a search term is matched against."""
    CLASS = "class"
    TITLE = "title"
    BOTH = "both"


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1", "yes"):
            return True
        if text in ("false", "0", "no"):
            return False
        return None
    return bool(value)


def _as_geometry(value: Any) -> Optional[str]:
    if value is None:
        return None
    try:
        if isinstance(value, dict):
            keys = ("x", "y", "width", "height")
            if all(key in value for key in keys):
                return f"{int(value['width'])}x{int(value['height'])}+{int(value['x'])}+{int(value['y'])}"
        if isinstance(value, (list, tuple)) and len(value) == 4:
            x, y, width, height = (int(part) for part in value)
            return f"{width}x{height}+{x}+{y}"
    except (TypeError, ValueError):
        logger.debug(f"Unexpected geometry reply: {value!r}")
    return str(value)


class WindowSnapshot:
    """Ordered window ids captured at one instant."""

    def __init__(self, directory: "WindowDirectory", ids: List[str]):
        self._directory = directory
        self._ids = tuple(ids)

    @property
    def ids(self) -> Tuple[str, ...]:
        return self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, window_id: object) -> bool:
        return window_id in self._ids

    def __sub__(self, other: "WindowSnapshot") -> List[str]:
        """Ids present here but not in the other snapshot, in this snapshot's order."""
        others = set(other.ids)
        return [window_id for window_id in self._ids if window_id not in others]

    def resolve(self, window_id: str) -> WindowRecord:
        return self._directory.resolve(window_id)

    def records(self, include_noise: bool = False) -> List[WindowRecord]:
        """Resolve every window of the snapshot, in enumeration order."""
        records = [self._directory.resolve(window_id) for window_id in self._ids]
        if include_noise:
            return records
        return [record for record in records if not record.is_noise]


class WindowDirectory:
    """Point-in-time window lookup built on the query backend."""

    def __init__(self, backend: WindowQueryBackend):
        """Initialize the window directory.

        Args:
            backend: The window query backend
        """
        self.backend = backend

    def snapshot(self) -> WindowSnapshot:
        """Capture the current window ids."""
        return WindowSnapshot(self, self.backend.list_window_ids())

    def resolve(self, window_id: str) -> WindowRecord:
        """Query every attribute of a window.

        Each attribute is fetched independently; a failed query leaves that
        attribute as None and never raises.
        """
        window_id = normalize_window_id(window_id) or str(window_id)
        query = self.backend.query_property

        return WindowRecord(
            id=window_id,
            window_class=_as_text(query(window_id, WindowProperty.CLASS)),
            title=_as_text(query(window_id, WindowProperty.TITLE)),
            desktop=_as_int(query(window_id, WindowProperty.DESKTOP)),
            geometry=_as_geometry(query(window_id, WindowProperty.GEOMETRY)),
            minimized=_as_bool(query(window_id, WindowProperty.MINIMIZED)),
            maximized=_as_bool(query(window_id, WindowProperty.MAXIMIZED)),
            fullscreen=_as_bool(query(window_id, WindowProperty.FULLSCREEN)),
        )

    def window_class(self, window_id: str) -> Optional[str]:
        """Query only the class of a window."""
        return _as_text(self.backend.query_property(window_id, WindowProperty.CLASS))

    def get(self, window_id: str) -> Optional[WindowRecord]:
        """Look a window up by id in a fresh snapshot."""
        window_id = normalize_window_id(window_id)
        if window_id is None or window_id not in self.snapshot():
            return None
        return self.resolve(window_id)

    def windows(self, snapshot: Optional[WindowSnapshot] = None) -> List[WindowRecord]:
        """All listable windows, in enumeration order."""
        if snapshot is None:
            snapshot = self.snapshot()
        return snapshot.records()

    def find(self, term: str, field: SearchField = SearchField.BOTH,
             snapshot: Optional[WindowSnapshot] = None) -> List[WindowRecord]:
        """Filter windows by a case-sensitive substring.

        Args:
            term: The text to look for
            field: Match against the class, the title, or either
            snapshot: Optional snapshot to search; a fresh one by default

        Returns:
            Matching records in enumeration order
        """
        field = SearchField(field)
        matches = []

        for record in self.windows(snapshot):
            class_match = record.window_class is not None and term in record.window_class
            title_match = record.title is not None and term in record.title

            if field is SearchField.CLASS and class_match:
                matches.append(record)
            elif field is SearchField.TITLE and title_match:
                matches.append(record)
            elif field is SearchField.BOTH and (class_match or title_match):
                matches.append(record)

        logger.debug(f"Search for '{term}' by {field.value} found {len(matches)} windows")
        return matches

    def classes(self, class_filter: str = "",
                snapshot: Optional[WindowSnapshot] = None) -> Dict[Optional[str], List[WindowRecord]]:
        """Group listable windows by class, in first-seen order.

        Args:
            class_filter: Optional substring the class must contain
            snapshot: Optional snapshot to group; a fresh one by default
        """
        groups = OrderedDict()

        for record in self.windows(snapshot):
            if class_filter and (record.window_class is None or class_filter not in record.window_class):
                continue
            groups.setdefault(record.window_class, []).append(record)

        return groups

    def first_with_class(self, window_class: str,
                         snapshot: Optional[WindowSnapshot] = None) -> Optional[WindowRecord]:
        """Return the first window whose class equals window_class exactly."""
        if snapshot is None:
            snapshot = self.snapshot()

        for window_id in snapshot:
            if self.window_class(window_id) == window_class:
                return self.resolve(window_id)

        return None
