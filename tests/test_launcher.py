"""
Tests for the gtk-launch desktop entry launcher.
"""

import subprocess
from unittest.mock import patch

import pytest

from qboss.core.errors import LaunchFailed
from qboss.core.launcher import DesktopLauncher, desktop_entry_name


def test_desktop_entry_name_strips_extension():
    assert desktop_entry_name("org.kde.konsole.desktop") == "org.kde.konsole"
    assert desktop_entry_name("firefox") == "firefox"


@patch("qboss.core.launcher.subprocess.run")
def test_launch_runs_gtk_launch(mock_run):
    mock_run.return_value = subprocess.CompletedProcess(["gtk-launch"], 0, stderr="")

    DesktopLauncher().launch("term", "org.kde.konsole.desktop")

    assert mock_run.call_args[0][0] == ["gtk-launch", "org.kde.konsole"]


@patch("qboss.core.launcher.subprocess.run")
def test_non_zero_exit_raises(mock_run):
    mock_run.return_value = subprocess.CompletedProcess(
        ["gtk-launch"], 1, stderr="gtk-launch: no such application nope\n")

    with pytest.raises(LaunchFailed) as excinfo:
        DesktopLauncher().launch("nope", "nope.desktop")

    assert "no such application" in str(excinfo.value)


@patch("qboss.core.launcher.subprocess.run", side_effect=FileNotFoundError("gtk-launch"))
def test_missing_launcher_raises(mock_run):
    with pytest.raises(LaunchFailed):
        DesktopLauncher().launch("term", "konsole.desktop")


@patch("qboss.core.launcher.subprocess.run")
def test_empty_desktop_file_raises_without_running(mock_run):
    with pytest.raises(LaunchFailed):
        DesktopLauncher().launch("term", "")
    mock_run.assert_not_called()
