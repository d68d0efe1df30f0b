"""Hook types, the environment handed to hook scripts, and hook results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from core.types import Invocation

ENV_PREFIX = "TRAMP_"


class HookType(str, Enum):
    """Value of ``TRAMP_HOOK_TYPE``."""

    PRE = "pre"
    POST = "post"
    INTERCEPT = "intercept"


@dataclass(frozen=True)
class HookContext:
    """Everything a hook script learns about the invocation.

    ``executed_*`` describe the command after rewriting (post and intercept
    hooks); ``exit_code`` is the primary command's status (post hooks only).
    """

    invocation: Invocation
    hook_type: HookType
    executed_binary: Path | None = None
    executed_args: tuple[str, ...] | None = None
    exit_code: int | None = None

    def to_env(self) -> dict[str, str]:
        """Build the ``TRAMP_*`` variables for the hook process."""
        inv = self.invocation
        env = {
            "TRAMP_ORIGINAL_BINARY": str(inv.binary),
            "TRAMP_ORIGINAL_ARGS": inv.joined_args,
            "TRAMP_ORIGINAL_ARGC": str(len(inv.args)),
            "TRAMP_CWD": str(inv.cwd),
            "TRAMP_HOOK_TYPE": self.hook_type.value,
        }
        for i, arg in enumerate(inv.args):
            env[f"TRAMP_ORIGINAL_ARG_{i}"] = arg

        if self.executed_binary is not None:
            env["TRAMP_EXECUTED_BINARY"] = str(self.executed_binary)
        if self.executed_args is not None:
            env["TRAMP_EXECUTED_ARGS"] = " ".join(self.executed_args)
        if self.hook_type is HookType.POST and self.exit_code is not None:
            env["TRAMP_EXIT_CODE"] = str(self.exit_code)
        return env


@dataclass
class HookResult:
    """Hook execution result."""

    hook_path: Path
    hook_type: HookType
    exit_code: int

    @property
    def allow(self) -> bool:
        """For pre-hooks: whether the invocation may continue."""
        return self.exit_code == 0

    def __repr__(self) -> str:
        return f"<HookResult({self.hook_type.value} {self.hook_path} -> {self.exit_code})>"
