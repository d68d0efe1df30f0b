"""Pytest configuration for tramp tests.

Ensures the project root is in sys.path so imports work correctly.
"""

import stat
import sys
from pathlib import Path

import pytest

# Add project root to sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point HOME at an empty directory so ~/.tramp.toml is under test control."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def make_script(tmp_path):
    """Write an executable /bin/sh script and return its path."""

    def _make(name: str, body: str, directory: Path | None = None) -> Path:
        target_dir = directory or tmp_path / "scripts"
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture
def write_config():
    """Write a .tramp.toml into a directory (created if needed)."""

    def _write(directory: Path, content: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / ".tramp.toml"
        path.write_text(content)
        return path

    return _write
