"""
Window script generator for QBoss.

This module writes small standalone bash scripts that locate a window by its
class and show the qdbus calls available for it.
"""

import os
import re
import stat
import time
from pathlib import Path
from string import Template

from qboss.core.config import Settings
from qboss.core.debug import get_logger
from qboss.core.windows import WindowRecord

logger = get_logger(__name__)

SCRIPT_TEMPLATE = Template('''#!/bin/bash

# QBoss-generated script to interact with window: $TITLE ($WINDOW_CLASS)
# Generated on $TIMESTAMP

# Get window ID by class
get_window_id_by_class() {
    local class="$WINDOW_CLASS"
    local window_ids

    window_ids=$$(qdbus org.kde.KWin /KWin org.kde.KWin.listWindows 2>/dev/null)

    # If listWindows fails, try alternative methods
    if [[ -z "$$window_ids" ]]; then
        if command -v xdotool &> /dev/null; then
            window_ids=$$(xdotool search --all --onlyvisible --name "" 2>/dev/null)
        fi
        if [[ -z "$$window_ids" ]] && command -v wmctrl &> /dev/null; then
            window_ids=$$(wmctrl -l | awk '{print $$1}' | while read -r hex; do printf '%d\\n' "$$hex"; done)
        fi
    fi

    for id in $$window_ids; do
        local window_class
        window_class=$$(qdbus org.kde.KWin /KWin org.kde.KWin.windowClass "$$id" 2>/dev/null)

        if [[ "$$window_class" == "$$class" ]]; then
            echo "$$id"
            return 0
        fi
    done

    return 1
}

window_id=$$(get_window_id_by_class)

if [[ -n "$$window_id" ]]; then
    echo "Found window ID: $$window_id"

    # Available actions (uncomment to use)
    # qdbus org.kde.KWin /KWin org.kde.KWin.setCurrentWindow "$$window_id"   # Activate window
    # qdbus org.kde.KWin /KWin org.kde.KWin.minimizeWindow "$$window_id"     # Minimize window
    # qdbus org.kde.KWin /KWin org.kde.KWin.maximizeWindow "$$window_id"     # Maximize window
    # qdbus org.kde.KWin /KWin org.kde.KWin.setFullScreen "$$window_id" true # Set fullscreen
    # qdbus org.kde.KWin /KWin org.kde.KWin.closeWindow "$$window_id"        # Close window

    # Get window properties
    # title=$$(qdbus org.kde.KWin /KWin org.kde.KWin.windowTitle "$$window_id")
    # desktop=$$(qdbus org.kde.KWin /KWin org.kde.KWin.windowDesktop "$$window_id")
    # geometry=$$(qdbus org.kde.KWin /KWin org.kde.KWin.getWindowGeometry "$$window_id")
else
    echo "No window found with class: $WINDOW_CLASS"
fi
''')


def sanitize_class(window_class: str) -> str:
    """Replace everything but letters and digits with underscores."""
    return re.sub(r"[^A-Za-z0-9]", "_", window_class)


class ScriptGenerator:
    """Generates window interaction scripts."""

    def __init__(self, settings: Settings):
        self.script_dir = Path(settings.script_dir)

    def render(self, record: WindowRecord) -> str:
        """Render the script for a window.

        Raises:
            ValueError: If the window class is unavailable
        """
        if not record.window_class:
            raise ValueError(f"Could not get window class for window ID {record.id}.")

        return SCRIPT_TEMPLATE.substitute(
            TITLE=(record.title or "N/A").replace("\n", " "),
            WINDOW_CLASS=record.window_class.replace('"', '\\"'),
            TIMESTAMP=time.strftime("%Y-%m-%d %H:%M:%S"),
        )

    def generate(self, record: WindowRecord) -> Path:
        """Write the script for a window and make it executable.

        Returns:
            The path of the generated script
        """
        content = self.render(record)

        self.script_dir.mkdir(parents=True, exist_ok=True)
        script_path = self.script_dir / f"qboss_{sanitize_class(record.window_class)}_script.sh"

        with open(script_path, 'w') as f:
            f.write(content)

        os.chmod(script_path, os.stat(script_path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

        logger.info(f"Generated script for window ID {record.id}: {script_path}")
        return script_path
