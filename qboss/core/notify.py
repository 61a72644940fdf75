"""
Desktop notifications for QBoss.
"""

import shutil
import subprocess

from qboss.core.config import Settings
from qboss.core.debug import get_logger

logger = get_logger(__name__)


class Notifier:
    """Sends notify-send notifications when they are enabled."""

    def __init__(self, settings: Settings):
        self.enabled = settings.notifications

    def notify(self, message: str, title: str = "QBoss") -> None:
        if not self.enabled:
            return

        if not shutil.which("notify-send"):
            logger.info(f"{title}: {message}")
            return

        try:
            subprocess.run(["notify-send", title, message],
                           stdout=subprocess.DEVNULL,
                           stderr=subprocess.DEVNULL,
                           check=False)
        except OSError as e:
            logger.warning(f"Error sending notification: {e}")
