"""
Tests for the D-Bus service explorer and custom qdbus commands.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from qboss.core.dbus_explorer import DBusExplorer, parse_members
from qboss.core.errors import DBusCallFailed

ROOT_XML = """
<node>
  <interface name="org.freedesktop.DBus.Introspectable">
    <method name="Introspect"><arg name="xml_data" type="s" direction="out"/></method>
  </interface>
  <node name="KWin"/>
  <node name="Scripting"/>
</node>
"""

KWIN_XML = """
<node>
  <interface name="org.kde.KWin">
    <property name="showingDesktop" type="b" access="read"/>
    <signal name="reloadConfig"/>
    <method name="windowTitle">
      <arg name="id" type="s" direction="in"/>
      <arg type="s" direction="out"/>
    </method>
    <method name="closeWindow"><arg name="id" type="s" direction="in"/></method>
  </interface>
</node>
"""


class FakeBus:
    """Session bus stand-in answering Introspect per object path."""

    def __init__(self, names, objects):
        self.names = names
        self.objects = objects

    def list_names(self):
        return self.names

    def get_object(self, service, path, introspect=True):
        if path not in self.objects:
            raise Exception(f"org.freedesktop.DBus.Error.UnknownObject: {path}")
        proxy = MagicMock()
        proxy.Introspect.return_value = self.objects[path]
        return proxy


@pytest.fixture
def explorer():
    bus = FakeBus(
        names=["org.kde.KWin", ":1.42", "org.freedesktop.Notifications", "org.kde.plasmashell"],
        objects={"/": ROOT_XML, "/KWin": KWIN_XML, "/Scripting": "<node/>"},
    )
    return DBusExplorer(bus)


def test_services_are_sorted_without_unique_names(explorer):
    assert explorer.services() == [
        "org.freedesktop.Notifications", "org.kde.KWin", "org.kde.plasmashell",
    ]


def test_services_filter_is_a_substring_match(explorer):
    assert explorer.services("kde") == ["org.kde.KWin", "org.kde.plasmashell"]
    assert explorer.services("gnome") == []


def test_unreachable_bus_raises():
    bus = MagicMock()
    bus.list_names.side_effect = Exception("org.freedesktop.DBus.Error.NoServer")

    with pytest.raises(DBusCallFailed):
        DBusExplorer(bus).services()


def test_object_paths_walk_the_tree(explorer):
    assert explorer.object_paths("org.kde.KWin") == ["/", "/KWin", "/Scripting"]


def test_members_describe_the_interface(explorer):
    assert explorer.members("org.kde.KWin", "/KWin") == [
        "property read b org.kde.KWin.showingDesktop",
        "signal org.kde.KWin.reloadConfig()",
        "method org.kde.KWin.windowTitle(s id) -> s",
        "method org.kde.KWin.closeWindow(s id)",
    ]


def test_unknown_object_raises(explorer):
    with pytest.raises(DBusCallFailed):
        explorer.members("org.kde.KWin", "/Nope")


def test_invalid_introspection_data_raises():
    with pytest.raises(DBusCallFailed):
        parse_members("<node>")


@patch("qboss.core.dbus_explorer.subprocess.run")
def test_execute_runs_qdbus(mock_run, explorer):
    mock_run.return_value = subprocess.CompletedProcess(["qdbus"], 0, stdout="Konsole\n")

    assert explorer.execute("org.kde.KWin /KWin windowTitle '{abc def}'") == "Konsole"
    assert mock_run.call_args[0][0] == ["qdbus", "org.kde.KWin", "/KWin", "windowTitle", "{abc def}"]


@patch("qboss.core.dbus_explorer.subprocess.run")
def test_execute_failure_raises_with_output(mock_run, explorer):
    mock_run.return_value = subprocess.CompletedProcess(
        ["qdbus"], 2, stdout="Service 'org.nope' does not exist.\n")

    with pytest.raises(DBusCallFailed) as excinfo:
        explorer.execute("org.nope")
    assert "does not exist" in str(excinfo.value)


@patch("qboss.core.dbus_explorer.subprocess.run")
def test_empty_command_is_rejected(mock_run, explorer):
    with pytest.raises(DBusCallFailed):
        explorer.execute("")
    mock_run.assert_not_called()
