"""
Desktop entry launcher for QBoss.
"""

import subprocess

from qboss.core.debug import get_logger
from qboss.core.errors import LaunchFailed

logger = get_logger(__name__)


def desktop_entry_name(desktop_file: str) -> str:
    """Strip the .desktop extension, as gtk-launch expects."""
    if desktop_file.endswith(".desktop"):
        return desktop_file[:-len(".desktop")]
    return desktop_file


class DesktopLauncher:
    """Launches applications from their desktop entries with gtk-launch."""

    command = "gtk-launch"

    def launch(self, app_name: str, desktop_file: str) -> None:
        """Launch an application.

        Args:
            app_name: The saved app name, used in messages
            desktop_file: The desktop file name, with or without extension

        Raises:
            LaunchFailed: If there is no desktop file or gtk-launch failed
        """
        if not desktop_file:
            logger.error(f"No desktop file found for app: {app_name}")
            raise LaunchFailed(app_name, "no desktop file")

        entry = desktop_entry_name(desktop_file)
        try:
            result = subprocess.run([self.command, entry],
                                    stdout=subprocess.DEVNULL,
                                    stderr=subprocess.PIPE,
                                    encoding='utf-8',
                                    check=False)
        except OSError as e:
            logger.error(f"Error running {self.command}: {e}")
            raise LaunchFailed(app_name, str(e)) from e

        if result.returncode != 0:
            reason = result.stderr.strip() or f"{self.command} exited with {result.returncode}"
            logger.error(f"Failed to launch app: {app_name} (desktop file: {desktop_file}): {reason}")
            raise LaunchFailed(app_name, reason)

        logger.info(f"Launched app: {app_name} (desktop file: {desktop_file})")
