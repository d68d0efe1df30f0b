"""Command path resolution."""

from __future__ import annotations

import os
import shutil
from pathlib import Path


def resolve_command(command: str | Path, cwd: Path | None = None) -> Path | None:
    """Resolve a command name to an absolute path.

    Names containing a path separator are taken relative to ``cwd`` and must
    exist; bare names are looked up on ``PATH``. Returns None when nothing is
    found.
    """
    command = str(command)
    if not command:
        return None

    if os.sep in command or (os.altsep and os.altsep in command):
        path = Path(command).expanduser()
        if not path.is_absolute():
            path = (cwd or Path.cwd()) / path
        return path if path.exists() else None

    found = shutil.which(command)
    return Path(found) if found else None


def resolve_or_keep(command: str | Path, cwd: Path | None = None) -> Path:
    """Like resolve_command, but falls back to the name as given.

    Spawning an unresolved name later fails with a spawn error, which the
    proxy turns into its reserved exit code.
    """
    return resolve_command(command, cwd) or Path(command)
