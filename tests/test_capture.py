"""
Tests for click-to-capture and process lookups.
"""

import os
from unittest.mock import patch

import psutil
import pytest

from conftest import window
from qboss.core.capture import WindowCapture, process_name
from qboss.core.errors import CaptureFailed


def make_runner(outputs):
    """Return a runner answering each command from `outputs` by its key words."""
    calls = []

    def runner(args):
        calls.append(list(args))
        return outputs.get(" ".join(args))

    runner.calls = calls
    return runner


def test_capture_matches_clicked_pid(backend, kwin):
    kwin.windows["10"] = window("konsole", "shell")
    kwin.windows["20"] = window("firefox", "web")
    runner = make_runner({
        "xdotool selectwindow getwindowpid": "4242\n",
        "xprop -id 10 _NET_WM_PID": "_NET_WM_PID(CARDINAL) = 1000\n",
        "xprop -id 20 _NET_WM_PID": "_NET_WM_PID(CARDINAL) = 4242\n",
    })

    assert WindowCapture(backend, runner).capture() == "20"


def test_capture_fails_when_click_is_cancelled(backend):
    with pytest.raises(CaptureFailed):
        WindowCapture(backend, make_runner({})).capture()


def test_capture_fails_when_no_window_has_the_pid(backend, kwin):
    kwin.windows["10"] = window("konsole", "shell")
    runner = make_runner({
        "xdotool selectwindow getwindowpid": "4242\n",
        "xprop -id 10 _NET_WM_PID": "_NET_WM_PID:  not found.\n",
    })

    with pytest.raises(CaptureFailed) as excinfo:
        WindowCapture(backend, runner).capture()
    assert "4242" in str(excinfo.value)


def test_process_name_of_current_process():
    assert process_name(os.getpid()) == psutil.Process().name()
    assert process_name(None) is None


def test_process_name_of_vanished_process():
    with patch("qboss.core.capture.psutil.Process", side_effect=psutil.NoSuchProcess(99999)):
        assert process_name(99999) is None
