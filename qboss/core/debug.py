"""
Debug utilities for QBoss.

This module provides logging functionality and debugging tools for QBoss.
"""

import os
import sys
import logging
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional, Any

_LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
_LOG_DIR = None
_LOG_FILE = None


def parse_log_level(name: str) -> int:
    """Translate a configured level name into a logging level.

    Args:
        name: One of debug, info, warn or error

    Returns:
        The matching logging level

    Raises:
        ValueError: If the name is not a known level
    """
    try:
        return _LOG_LEVELS[name.lower()]
    except KeyError:
        raise ValueError(f"Invalid log level: {name}") from None


def setup_logging(level: str = "info", log_dir: Optional[str] = None) -> None:
    """Set up logging for the application.

    Args:
        level: The log level name (debug, info, warn, error)
        log_dir: Optional directory to store log files
    """
    global _LOG_DIR, _LOG_FILE

    log_level = parse_log_level(level)
    debug = log_level == logging.DEBUG

    # Set up log directory
    if log_dir:
        _LOG_DIR = Path(log_dir)
    else:
        _LOG_DIR = Path(os.path.expanduser("~/.config/qboss/logs"))

    _LOG_DIR.mkdir(parents=True, exist_ok=True)

    timestamp = time.strftime("%Y-%m-%d")
    _LOG_FILE = _LOG_DIR / f"qboss-{timestamp}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(_LOG_FORMAT)

    # Console output is reserved for command results, so only problems show up there
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = RotatingFileHandler(_LOG_FILE, maxBytes=1024 * 1024 * 5, backupCount=5)
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    root_logger.debug(f"Logging initialized (level: {logging.getLevelName(log_level)})")
    root_logger.debug(f"Log file: {_LOG_FILE}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.

    Args:
        name: The name of the logger (usually __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)


def get_log_file() -> Optional[str]:
    """Get the path to the current log file."""
    return str(_LOG_FILE) if _LOG_FILE else None


def get_log_files() -> List[str]:
    """Get a list of all log files, newest first."""
    if not _LOG_DIR:
        return []

    log_files = list(_LOG_DIR.glob("qboss-*.log*"))
    return [str(f) for f in sorted(log_files, key=lambda x: x.stat().st_mtime, reverse=True)]


def get_debug_info() -> Dict[str, Any]:
    """Get debugging information about the desktop environment.

    Returns:
        A dictionary containing debugging information
    """
    import platform
    import psutil

    memory = psutil.virtual_memory()
    info = {
        "platform": platform.platform(),
        "python_version": sys.version,
        "python_path": sys.executable,
        "cpu_count": os.cpu_count(),
        "memory": {
            "total": memory.total,
            "available": memory.available,
            "percent": memory.percent
        },
        "session_type": os.environ.get("XDG_SESSION_TYPE", "unknown"),
        "desktop": os.environ.get("XDG_CURRENT_DESKTOP", "unknown"),
        "log_file": get_log_file(),
    }

    info["wayland"] = info["session_type"] == "wayland"

    # External tools the window backends and launcher depend on
    commands = ["qdbus", "xdotool", "wmctrl", "xprop", "gtk-launch", "notify-send"]
    info["commands"] = {}

    for cmd in commands:
        info["commands"][cmd] = _check_command(cmd)

    return info


def _check_command(command: str) -> Dict[str, Any]:
    """Check if a command is available.

    Args:
        command: The command to check

    Returns:
        A dictionary with information about the command
    """
    import shutil

    path = shutil.which(command)
    return {
        "available": path is not None,
        "path": path,
    }
