"""Error taxonomy and reserved exit codes."""

from __future__ import annotations

from pathlib import Path

# tramp's own failures, kept apart from pass-through exit codes
EXIT_INTERNAL_ERROR = 2
# shell convention for "command not found / not executable"
EXIT_SPAWN_FAILURE = 127


class TrampError(Exception):
    """Base class for every error tramp reports itself."""


class ConfigError(TrampError):
    """A present config file could not be used."""

    kind = "invalid config file"

    def __init__(self, path: Path | str, detail: str):
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"{self.kind} {self.path}: {detail}")


class ConfigParseError(ConfigError):
    kind = "failed to parse config file"


class ConfigIOError(ConfigError):
    kind = "failed to read config file"


class HookError(TrampError):
    pass


class HookSpawnError(HookError):
    """The hook process could not be started at all."""

    def __init__(self, hook_path: Path | str, detail: str):
        self.hook_path = Path(hook_path)
        self.detail = detail
        super().__init__(f"failed to spawn hook {self.hook_path}: {detail}")


class CommandSpawnError(TrampError):
    """The target command could not be started (not found, not executable)."""

    def __init__(self, command: str, detail: str):
        self.command = command
        self.detail = detail
        super().__init__(f"failed to execute {command}: {detail}")
