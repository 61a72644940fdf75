"""
Tests for the saved application registry.
"""

import json
import os
import stat
from unittest.mock import patch

import pytest

from qboss.core.apps import AppRegistry, SavedApp, find_desktop_file
from qboss.core.errors import AppNotFound, RegistryError
from qboss.core.windows import WindowRecord


@pytest.fixture
def apps_dir(tmp_path):
    applications = tmp_path / "applications"
    applications.mkdir()
    return applications


@pytest.fixture
def registry(tmp_path, apps_dir):
    return AppRegistry(tmp_path / "config" / "apps.json", search_dirs=[str(apps_dir)])


def test_missing_document_is_an_empty_registry(registry):
    assert registry.list() == []
    assert registry.get("term") is None


def test_save_and_delete_round_trip(registry):
    app = SavedApp("term", "konsole", "org.kde.konsole.desktop", "shell")

    assert registry.save(app) is False
    assert registry.find("term") == app

    assert registry.delete("term") is True
    assert registry.list() == []
    with pytest.raises(AppNotFound):
        registry.find("term")


def test_save_is_idempotent_by_name_and_keeps_position(registry):
    registry.save(SavedApp("term", "konsole", "konsole.desktop"))
    registry.save(SavedApp("web", "firefox", "firefox.desktop"))

    assert registry.save(SavedApp("term", "alacritty", "Alacritty.desktop")) is True

    apps = registry.list()
    assert [app.name for app in apps] == ["term", "web"]
    assert apps[0].window_class == "alacritty"


def test_delete_missing_name_returns_false(registry):
    registry.save(SavedApp("term", "konsole", "konsole.desktop"))

    assert registry.delete("nope") is False
    assert len(registry.list()) == 1


def test_document_format(registry):
    registry.save(SavedApp("term", "konsole", "konsole.desktop", "shell"))

    with open(registry.apps_file) as f:
        document = json.load(f)

    assert document == {"apps": [
        {"name": "term", "class": "konsole", "title": "shell", "desktop_file": "konsole.desktop"},
    ]}


def test_corrupt_document_raises(registry):
    registry.apps_file.parent.mkdir(parents=True)
    registry.apps_file.write_text("{not json")

    with pytest.raises(RegistryError):
        registry.list()


def test_unexpected_structure_raises(registry):
    registry.apps_file.parent.mkdir(parents=True)
    registry.apps_file.write_text('{"apps": {"term": {}}}')

    with pytest.raises(RegistryError):
        registry.list()


def test_failed_write_leaves_document_and_no_temp_file(registry):
    original = SavedApp("term", "konsole", "konsole.desktop")
    registry.save(original)

    with patch("qboss.core.apps.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(RegistryError):
            registry.save(SavedApp("web", "firefox", "firefox.desktop"))

    assert registry.list() == [original]
    assert sorted(path.name for path in registry.apps_file.parent.iterdir()) == ["apps.json"]


def test_find_desktop_file_by_class(apps_dir):
    (apps_dir / "org.kde.konsole.desktop").write_text("[Desktop Entry]\n")
    (apps_dir / "firefox.desktop").write_text("[Desktop Entry]\n")

    assert find_desktop_file("konsole", "shell", [str(apps_dir)]) == "org.kde.konsole.desktop"


def test_find_desktop_file_by_title_word(apps_dir):
    (apps_dir / "Zotero.desktop").write_text("[Desktop Entry]\n")

    assert find_desktop_file("zotero-bin", "Zotero - Library", [str(apps_dir)]) == "Zotero.desktop"


def test_create_from_window_uses_found_desktop_file(registry, apps_dir):
    (apps_dir / "org.kde.konsole.desktop").write_text("[Desktop Entry]\n")
    record = WindowRecord("10", window_class="konsole", title="shell")

    app = registry.create_from_window("term", record)

    assert app == SavedApp("term", "konsole", "org.kde.konsole.desktop", "shell")


def test_create_from_window_guesses_desktop_file(registry):
    record = WindowRecord("10", window_class="Gimp-2.10", title=None)

    app = registry.create_from_window("gimp", record)

    assert app.desktop_file == "gimp-2.10.desktop"
    assert app.title == ""


def test_create_from_window_requires_class_and_name(registry):
    with pytest.raises(ValueError):
        registry.create_from_window("x", WindowRecord("10", title="untitled"))
    with pytest.raises(ValueError):
        registry.create_from_window("", WindowRecord("10", window_class="konsole"))


def test_desktop_suffix_is_not_part_of_the_match(apps_dir):
    (apps_dir / "android-studio.desktop").write_text("[Desktop Entry]\n")
    (apps_dir / "org.kde.konsole.desktop").write_text("[Desktop Entry]\n")

    assert find_desktop_file("konsole", "top - Konsole", [str(apps_dir)]) == "org.kde.konsole.desktop"
    assert find_desktop_file("desk", None, [str(apps_dir)]) is None


def test_first_search_dir_with_a_match_wins(tmp_path):
    system = tmp_path / "system"
    local = tmp_path / "local"
    for directory in (system, local):
        directory.mkdir()
    (system / "firefox.desktop").write_text("[Desktop Entry]\n")
    (local / "a-firefox-profile.desktop").write_text("[Desktop Entry]\n")

    assert find_desktop_file("firefox", None, [str(system), str(local)]) == "firefox.desktop"
    assert find_desktop_file("firefox", None, [str(local), str(system)]) == "a-firefox-profile.desktop"


def test_missing_search_dirs_are_skipped(tmp_path, apps_dir):
    (apps_dir / "org.kde.konsole.desktop").write_text("[Desktop Entry]\n")

    assert find_desktop_file("konsole", None, [str(tmp_path / "nowhere"), str(apps_dir)]) \
        == "org.kde.konsole.desktop"


def test_save_keeps_document_mode(registry):
    registry.save(SavedApp("term", "konsole", "konsole.desktop"))
    os.chmod(registry.apps_file, 0o640)

    registry.save(SavedApp("web", "firefox", "firefox.desktop"))

    assert stat.S_IMODE(os.stat(registry.apps_file).st_mode) == 0o640


def test_new_document_is_world_readable(registry):
    registry.save(SavedApp("term", "konsole", "konsole.desktop"))

    assert stat.S_IMODE(os.stat(registry.apps_file).st_mode) == 0o644
