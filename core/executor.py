"""Base executor class and result types for running child processes.

Every child (hook or target command) runs in the foreground with the
parent's stdin/stdout/stderr, and the caller blocks until it exits.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from core.errors import CommandSpawnError

logger = logging.getLogger(__name__)


@dataclass
class ExecuteResult:
    """Result of a finished child process."""

    exit_code: int
    signal: int | None = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @classmethod
    def from_returncode(cls, returncode: int) -> ExecuteResult:
        """Map a Popen returncode; death by signal N becomes 128 + N like a shell."""
        if returncode < 0:
            signum = -returncode
            return cls(exit_code=128 + signum, signal=signum)
        return cls(exit_code=returncode)


class BaseExecutor(ABC):
    """Capability to run one process to completion with inherited stdio."""

    @abstractmethod
    def execute(
        self,
        argv: Sequence[str],
        cwd: Path | str,
        env: Mapping[str, str] | None = None,
        inherit_env: bool = True,
    ) -> ExecuteResult:
        """
        Run ``argv`` and wait for it.

        Args:
            argv: Program followed by its arguments
            cwd: Working directory
            env: Extra environment variables layered over the parent's
            inherit_env: When False, ``env`` is the complete environment

        Returns:
            ExecuteResult with the exit code

        Raises:
            CommandSpawnError: the program could not be started
        """
        ...


class SubprocessExecutor(BaseExecutor):
    """Runs children with :mod:`subprocess`, stdio passed straight through."""

    def execute(
        self,
        argv: Sequence[str],
        cwd: Path | str,
        env: Mapping[str, str] | None = None,
        inherit_env: bool = True,
    ) -> ExecuteResult:
        merged_env = None
        if not inherit_env:
            merged_env = dict(env or {})
        elif env:
            merged_env = os.environ.copy()
            merged_env.update(env)

        # anything we buffered must land before the child writes
        sys.stdout.flush()
        sys.stderr.flush()

        try:
            proc = subprocess.Popen(list(argv), cwd=cwd, env=merged_env)
        except OSError as e:
            raise CommandSpawnError(str(argv[0]), e.strerror or str(e)) from e

        logger.debug("Spawned pid %d: %s", proc.pid, " ".join(argv))
        returncode = _wait_forwarding_interrupts(proc)
        result = ExecuteResult.from_returncode(returncode)
        logger.debug("pid %d exited with %d", proc.pid, result.exit_code)
        return result


def _wait_forwarding_interrupts(proc: subprocess.Popen) -> int:
    """Wait for ``proc``, riding out Ctrl-C.

    The terminal delivers SIGINT to the whole foreground group, so the child
    gets it too and decides how to exit; its status is what we report.
    """
    while True:
        try:
            return proc.wait()
        except KeyboardInterrupt:
            logger.debug("SIGINT received while waiting on pid %d", proc.pid)
