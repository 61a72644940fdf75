"""
Tests for the YAML configuration manager.
"""

import json
from pathlib import Path

import pytest
import yaml

from qboss.core.config import DEFAULT_CONFIG, ConfigManager, default_config_dir


def test_defaults_are_written_on_first_use(tmp_path):
    config = ConfigManager(str(tmp_path))

    assert config.config_file.exists()
    with open(config.config_file) as f:
        assert yaml.safe_load(f) == DEFAULT_CONFIG


def test_settings_reflect_configuration(tmp_path):
    config = ConfigManager(str(tmp_path))
    config.set_setting("display", "compact_view", True)
    config.set_setting("monitor", "interval", 2.5)
    config.set_setting("general", "script_dir", str(tmp_path / "scripts"))

    settings = config.settings

    assert settings.compact_view is True
    assert settings.poll_interval == 2.5
    assert settings.script_dir == tmp_path / "scripts"
    assert settings.apps_file == tmp_path / "apps.json"
    assert settings.log_dir == tmp_path / "logs"


def test_settings_are_persisted(tmp_path):
    config = ConfigManager(str(tmp_path))
    config.set_log_level("DEBUG")
    assert config.save_config() is True

    assert ConfigManager(str(tmp_path)).settings.log_level == "debug"


def test_invalid_log_level_is_rejected(tmp_path):
    config = ConfigManager(str(tmp_path))

    with pytest.raises(ValueError):
        config.set_log_level("verbose")


def test_invalid_values_fall_back_to_defaults(tmp_path):
    (tmp_path / "config.yaml").write_text(
        "display:\n  log_level: loud\nmonitor:\n  interval: -3\n")

    settings = ConfigManager(str(tmp_path)).settings

    assert settings.log_level == "info"
    assert settings.poll_interval == 1.0


def test_missing_sections_are_filled(tmp_path):
    (tmp_path / "config.yaml").write_text("general:\n  notifications: false\n")

    config = ConfigManager(str(tmp_path))

    assert set(DEFAULT_CONFIG) <= set(config.config)
    assert config.settings.notifications is False
    assert config.get_setting("display", "compact_view") is False


def test_broken_yaml_uses_defaults(tmp_path):
    (tmp_path / "config.yaml").write_text("general: [unclosed\n")

    settings = ConfigManager(str(tmp_path)).settings

    assert settings.notifications is True


def test_initialize_default_creates_empty_registry(tmp_path):
    config = ConfigManager(str(tmp_path))
    config.set_setting("display", "compact_view", True)

    assert config.initialize_default() is True

    assert config.get_setting("display", "compact_view") is False
    with open(config.apps_file) as f:
        assert json.load(f) == {"apps": []}


def test_default_config_dir_honours_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert default_config_dir() == Path(tmp_path) / "qboss"
