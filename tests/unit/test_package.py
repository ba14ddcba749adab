"""Tests for script-guard package structure and imports."""

from __future__ import annotations

import subprocess
import sys


def test_package_version() -> None:
    import script_guard

    assert script_guard.__version__ == "0.1.0"


def test_public_api_exports() -> None:
    import script_guard

    for name in script_guard.__all__:
        assert hasattr(script_guard, name), name


def test_main_module_without_command_prints_help() -> None:
    """``python -m script_guard`` with no subcommand prints usage and exits 0."""
    result = subprocess.run(
        [sys.executable, "-m", "script_guard"],
        capture_output=True,
        text=True,
        timeout=10,
    )

    assert result.returncode == 0
    assert "usage" in result.stdout.lower()
    assert "Traceback" not in result.stderr
