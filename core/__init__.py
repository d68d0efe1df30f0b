"""Rule resolution and process-proxy engine for tramp."""

from core.errors import (
    EXIT_INTERNAL_ERROR,
    EXIT_SPAWN_FAILURE,
    CommandSpawnError,
    ConfigError,
    ConfigIOError,
    ConfigParseError,
    HookError,
    HookSpawnError,
    TrampError,
)
from core.types import ExecutionOutcome, Invocation, OutcomePath

__all__ = [
    "EXIT_INTERNAL_ERROR",
    "EXIT_SPAWN_FAILURE",
    "CommandSpawnError",
    "ConfigError",
    "ConfigIOError",
    "ConfigParseError",
    "ExecutionOutcome",
    "HookError",
    "HookSpawnError",
    "Invocation",
    "OutcomePath",
    "TrampError",
]
