"""
Saved application registry for QBoss.

Saved apps live in a single JSON document of the form {"apps": [...]}.
The document is always rewritten as a whole: a complete replacement is
written to a temporary file next to it and renamed over the original.
"""

import os
import json
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, TextIO

from qboss.core.debug import get_logger
from qboss.core.errors import AppNotFound, RegistryError
from qboss.core.windows import WindowRecord

logger = get_logger(__name__)

DESKTOP_FILE_DIRS = [
    "/usr/share/applications",
    "/usr/local/share/applications",
    "~/.local/share/applications",
]


class SavedApp(NamedTuple):
    """An application that can be launched or toggled by name."""
    name: str
    window_class: str
    desktop_file: str
    title: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "class": self.window_class,
            "title": self.title,
            "desktop_file": self.desktop_file,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "SavedApp":
        return cls(
            name=str(data["name"]),
            window_class=str(data.get("class", "")),
            desktop_file=str(data.get("desktop_file", "")),
            title=str(data.get("title", "")),
        )


def find_desktop_file(window_class: Optional[str], title: Optional[str],
                      search_dirs: Sequence[str] = DESKTOP_FILE_DIRS) -> Optional[str]:
    """Search the application directories for a matching desktop file.

    A file matches when its name contains the window class or the first
    word of the window title. Directories are searched in order and the
    first match wins.

    Returns:
        The desktop file's base name, or None if nothing matched
    """
    tokens = []
    if window_class:
        tokens.append(window_class)
    if title and title.split():
        tokens.append(title.split()[0])

    if not tokens:
        return None

    for location in search_dirs:
        directory = Path(os.path.expanduser(location))
        if not directory.is_dir():
            continue

        for path in sorted(directory.rglob("*.desktop")):
            stem = path.name[:-len(".desktop")]
            if any(token in stem for token in tokens):
                logger.debug(f"Found desktop file {path} for class {window_class}")
                return path.name

    return None


class AppRegistry:
    """Create, update, list and delete saved applications."""

    def __init__(self, apps_file: Path, search_dirs: Sequence[str] = DESKTOP_FILE_DIRS):
        """Initialize the registry.

        Args:
            apps_file: Path of the JSON document
            search_dirs: Directories searched for desktop files
        """
        self.apps_file = Path(apps_file)
        self.search_dirs = search_dirs

    def _load(self) -> List[SavedApp]:
        if not self.apps_file.exists():
            return []

        try:
            with open(self.apps_file, 'r') as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {self.apps_file}: {e}")
            raise RegistryError(f"Could not read saved apps from {self.apps_file}: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("apps", []), list):
            raise RegistryError(f"Unexpected document structure in {self.apps_file}")

        try:
            return [SavedApp.from_dict(entry) for entry in document.get("apps", [])]
        except (KeyError, TypeError, AttributeError) as e:
            raise RegistryError(f"Invalid app entry in {self.apps_file}: {e}") from e

    def _file_mode(self) -> int:
        """Mode for the rewritten document: the current one, or 0644 for a new file."""
        try:
            return stat.S_IMODE(os.stat(self.apps_file).st_mode)
        except FileNotFoundError:
            return 0o644

    @contextmanager
    def _atomic_write(self) -> Iterator[TextIO]:
        """Yield a temporary file that replaces the document on success.

        The temporary file is removed if anything fails before the rename.
        """
        self.apps_file.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(prefix=".apps-", suffix=".tmp", dir=str(self.apps_file.parent))

        try:
            with os.fdopen(fd, 'w') as f:
                yield f
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_path, self._file_mode())
            os.replace(temp_path, self.apps_file)
        except BaseException:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def _write(self, apps: List[SavedApp]) -> None:
        try:
            with self._atomic_write() as f:
                json.dump({"apps": [app.to_dict() for app in apps]}, f, indent=2)
        except OSError as e:
            logger.error(f"Error writing {self.apps_file}: {e}")
            raise RegistryError(f"Could not write saved apps to {self.apps_file}: {e}") from e

    def list(self) -> List[SavedApp]:
        """All saved apps in insertion order."""
        return self._load()

    def get(self, name: str) -> Optional[SavedApp]:
        for app in self._load():
            if app.name == name:
                return app
        return None

    def find(self, name: str) -> SavedApp:
        """Look up a saved app by name.

        Raises:
            AppNotFound: If no app has that name
        """
        app = self.get(name)
        if app is None:
            raise AppNotFound(name)
        return app

    def save(self, app: SavedApp) -> bool:
        """Add an app, or replace the app with the same name in place.

        Returns:
            True if an existing app was updated, False if it was appended
        """
        apps = self._load()

        for index, existing in enumerate(apps):
            if existing.name == app.name:
                apps[index] = app
                self._write(apps)
                logger.info(f"Updated app: {app.name} with class {app.window_class}")
                return True

        apps.append(app)
        self._write(apps)
        logger.info(f"Saved app: {app.name} with class {app.window_class}")
        return False

    def delete(self, name: str) -> bool:
        """Delete an app by name.

        Returns:
            False if there was no app with that name
        """
        apps = self._load()
        remaining = [app for app in apps if app.name != name]

        if len(remaining) == len(apps):
            logger.warning(f"App not found for delete operation: {name}")
            return False

        self._write(remaining)
        logger.info(f"Deleted app: {name}")
        return True

    def create_from_window(self, name: str, record: WindowRecord) -> SavedApp:
        """Build a saved app from a live window.

        Raises:
            ValueError: If the name is empty or the window class is unavailable
        """
        if not name:
            raise ValueError("App name cannot be empty.")
        if not record.window_class:
            raise ValueError(f"Could not get window class for window ID {record.id}.")

        desktop_file = find_desktop_file(record.window_class, record.title, self.search_dirs)
        if desktop_file is None:
            desktop_file = f"{record.window_class.lower()}.desktop"
            logger.debug(f"No desktop file found for {record.window_class}, guessing {desktop_file}")

        return SavedApp(
            name=name,
            window_class=record.window_class,
            desktop_file=desktop_file,
            title=record.title or "",
        )
