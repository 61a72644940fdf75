"""
Configuration management for QBoss.

This module handles loading, saving, and validating the application
configuration, and turns it into the immutable Settings value that the
core components are constructed with.
"""

import os
import copy
import json
import yaml
from pathlib import Path
from typing import Dict, NamedTuple, Optional, Any

from qboss.core.debug import get_logger, parse_log_level

logger = get_logger(__name__)

DEFAULT_CONFIG = {
    "general": {
        "notifications": True,
        "script_dir": str(Path.home()),
    },
    "display": {
        "log_level": "info",
        "compact_view": False,
    },
    "monitor": {
        "interval": 1.0,
    },
}


class Settings(NamedTuple):
    """Resolved configuration values handed to the core components."""
    config_dir: Path
    apps_file: Path
    log_dir: Path
    script_dir: Path
    notifications: bool = True
    log_level: str = "info"
    compact_view: bool = False
    poll_interval: float = 1.0


def default_config_dir() -> Path:
    """Return the configuration directory, honouring XDG_CONFIG_HOME."""
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(base) / "qboss"


class ConfigManager:
    """Manages the QBoss configuration file."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Optional override for the configuration directory
        """
        self.user_config_dir = Path(config_dir) if config_dir else default_config_dir()
        self.config_file = self.user_config_dir / "config.yaml"
        self.apps_file = self.user_config_dir / "apps.json"
        self.logs_dir = self.user_config_dir / "logs"

        self.user_config_dir.mkdir(parents=True, exist_ok=True)

        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load the main configuration file."""
        if not self.config_file.exists():
            default_config = copy.deepcopy(DEFAULT_CONFIG)

            try:
                with open(self.config_file, 'w') as f:
                    yaml.dump(default_config, f, default_flow_style=False)
            except OSError as e:
                logger.error(f"Error writing default configuration: {e}")

            return default_config

        try:
            with open(self.config_file, 'r') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading configuration: {e}")
            config = None

        if not isinstance(config, dict):
            config = {}

        # Ensure all required sections exist
        for section in DEFAULT_CONFIG:
            if not isinstance(config.get(section), dict):
                config[section] = {}

        return config

    def save_config(self) -> bool:
        """Save the main configuration to disk."""
        try:
            with open(self.config_file, 'w') as f:
                yaml.dump(self.config, f, default_flow_style=False)
            logger.info(f"Configuration saved to {self.config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration: {e}")
            return False

    def get_setting(self, section: str, key: str, default: Any = None) -> Any:
        """Get a setting from the configuration."""
        if section in self.config and key in self.config[section]:
            return self.config[section][key]
        if default is None:
            return DEFAULT_CONFIG.get(section, {}).get(key)
        return default

    def set_setting(self, section: str, key: str, value: Any) -> None:
        """Set a setting in the configuration."""
        if section not in self.config:
            self.config[section] = {}

        self.config[section][key] = value

    def set_log_level(self, level: str) -> None:
        """Validate and store the log level."""
        parse_log_level(level)
        self.set_setting("display", "log_level", level.lower())

    @property
    def settings(self) -> Settings:
        """Build the immutable settings value from the current configuration."""
        log_level = str(self.get_setting("display", "log_level"))
        try:
            parse_log_level(log_level)
        except ValueError:
            logger.warning(f"Invalid log level '{log_level}' in configuration, using info")
            log_level = "info"

        try:
            interval = float(self.get_setting("monitor", "interval"))
        except (TypeError, ValueError):
            interval = DEFAULT_CONFIG["monitor"]["interval"]
        if interval <= 0:
            interval = DEFAULT_CONFIG["monitor"]["interval"]

        return Settings(
            config_dir=self.user_config_dir,
            apps_file=self.apps_file,
            log_dir=self.logs_dir,
            script_dir=Path(os.path.expanduser(str(self.get_setting("general", "script_dir")))),
            notifications=bool(self.get_setting("general", "notifications")),
            log_level=log_level.lower(),
            compact_view=bool(self.get_setting("display", "compact_view")),
            poll_interval=interval,
        )

    def initialize_default(self) -> bool:
        """Write the default configuration and an empty app registry."""
        try:
            self.config = copy.deepcopy(DEFAULT_CONFIG)
            if not self.save_config():
                return False

            if not self.apps_file.exists():
                with open(self.apps_file, 'w') as f:
                    json.dump({"apps": []}, f, indent=2)

            return True

        except OSError as e:
            logger.error(f"Error initializing default configuration: {e}")
            return False
