"""
Window change monitor for QBoss.

KWin offers no window lifecycle subscription we can rely on, so windows are
polled: every interval a fresh snapshot is taken and compared with the
previous one by id alone. New ids are reported with their attributes,
vanished ids by id only since they can no longer be queried.
"""

import time
from enum import Enum
from typing import Callable, List, NamedTuple, Optional, Set

from qboss.core.debug import get_logger
from qboss.core.windows import WindowDirectory, WindowRecord, WindowSnapshot

logger = get_logger(__name__)


class MonitorState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class EventKind(Enum):
    INITIAL = "initial"
    APPEARED = "appeared"
    DISAPPEARED = "disappeared"


class WindowEvent(NamedTuple):
    kind: EventKind
    window_id: str
    record: Optional[WindowRecord] = None


class ChangeMonitor:
    """Polls the window directory and reports appeared/disappeared windows."""

    def __init__(self, directory: WindowDirectory, interval: float = 1.0,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the change monitor.

        Args:
            directory: The window directory to poll
            interval: Seconds between polls
            sleep: Blocking sleep function
        """
        self.directory = directory
        self.interval = interval
        self._sleep = sleep
        self.state = MonitorState.IDLE
        self._baseline = None  # type: Optional[WindowSnapshot]
        self._noise = set()  # type: Set[str]

    def start(self) -> List[WindowRecord]:
        """Take the baseline snapshot and return it as the initial observation."""
        self._baseline = self.directory.snapshot()
        records = self._baseline.records(include_noise=True)
        self._noise = {record.id for record in records if record.is_noise}
        self.state = MonitorState.RUNNING
        logger.info(f"Started window monitoring with {len(self._baseline)} windows")
        return [record for record in records if not record.is_noise]

    def poll(self) -> List[WindowEvent]:
        """Compare a fresh snapshot with the baseline and return the changes."""
        if self.state is not MonitorState.RUNNING:
            raise RuntimeError("Monitor is not running")

        current = self.directory.snapshot()
        events = []

        for window_id in current - self._baseline:
            record = current.resolve(window_id)
            if record.is_noise:
                self._noise.add(window_id)
                continue
            events.append(WindowEvent(EventKind.APPEARED, window_id, record))
            logger.info(f"New window: ID: {window_id}, Class: {record.window_class}, Title: {record.title}")

        for window_id in self._baseline - current:
            if window_id in self._noise:
                self._noise.discard(window_id)
                continue
            events.append(WindowEvent(EventKind.DISAPPEARED, window_id))
            logger.info(f"Closed window: ID: {window_id}")

        self._baseline = current
        return events

    def stop(self) -> None:
        if self.state is MonitorState.RUNNING:
            logger.info("Stopped window monitoring")
        self.state = MonitorState.STOPPED

    def run(self, callback: Callable[[WindowEvent], None]) -> None:
        """Monitor until stop() is called or the process is interrupted.

        The initial windows are reported as INITIAL events, every change
        after that as APPEARED or DISAPPEARED.
        """
        try:
            for record in self.start():
                callback(WindowEvent(EventKind.INITIAL, record.id, record))

            while self.state is MonitorState.RUNNING:
                self._sleep(self.interval)
                if self.state is not MonitorState.RUNNING:
                    break
                for event in self.poll():
                    callback(event)
        except KeyboardInterrupt:
            logger.debug("Window monitoring interrupted")
        finally:
            self.stop()
