"""Value types shared by the matcher, hooks and proxy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class Invocation:
    """What the user asked to run. Built once at startup."""

    binary: Path
    args: tuple[str, ...]
    cwd: Path

    @classmethod
    def create(cls, binary: Path | str, args: list[str] | tuple[str, ...], cwd: Path | str) -> Invocation:
        return cls(binary=Path(binary), args=tuple(args), cwd=Path(cwd).absolute())

    @property
    def joined_args(self) -> str:
        return " ".join(self.args)


class OutcomePath(str, Enum):
    """Which branch of the proxy produced the exit code."""

    ORIGINAL = "original"
    REWRITTEN = "rewritten"
    INTERCEPTED = "intercepted"


@dataclass
class ExecutionOutcome:
    """Result of one proxy run."""

    exit_code: int
    path: OutcomePath
    aborted_by_pre_hook: bool = False
