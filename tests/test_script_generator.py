"""
Tests for the window script generator.
"""

import os

import pytest

from qboss.core.script_generator import ScriptGenerator, sanitize_class
from qboss.core.windows import WindowRecord


def test_sanitize_class():
    assert sanitize_class("org.kde.konsole") == "org_kde_konsole"
    assert sanitize_class("Gimp-2.10") == "Gimp_2_10"


def test_generate_writes_executable_script(settings):
    record = WindowRecord("10", window_class="org.kde.konsole", title="shell")

    script_path = ScriptGenerator(settings).generate(record)

    assert script_path == settings.script_dir / "qboss_org_kde_konsole_script.sh"
    assert os.access(script_path, os.X_OK)

    content = script_path.read_text()
    assert content.startswith("#!/bin/bash")
    assert 'local class="org.kde.konsole"' in content
    assert "interact with window: shell (org.kde.konsole)" in content
    assert 'window_ids=$(qdbus org.kde.KWin /KWin org.kde.KWin.listWindows' in content
    assert "$$" not in content


def test_render_requires_window_class(settings):
    with pytest.raises(ValueError):
        ScriptGenerator(settings).render(WindowRecord("10", title="untitled"))
