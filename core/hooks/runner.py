"""Runs pre, post and intercept hook scripts."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from core.errors import CommandSpawnError, HookSpawnError
from core.executor import BaseExecutor, SubprocessExecutor
from core.hooks.base import ENV_PREFIX, HookContext, HookResult, HookType
from core.types import Invocation

logger = logging.getLogger(__name__)


def hook_environment(context: HookContext, environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Parent environment minus any inherited ``TRAMP_*`` keys, plus this hook's own."""
    env = os.environ if environ is None else environ
    merged = {k: v for k, v in env.items() if not k.startswith(ENV_PREFIX)}
    merged.update(context.to_env())
    return merged


class HookRunner:
    """Synchronously executes hook scripts with the ``TRAMP_*`` environment.

    Hooks are executed directly (they need a shebang and the executable bit),
    in the invocation's working directory, sharing the parent's stdio.
    """

    def __init__(self, executor: BaseExecutor | None = None):
        self.executor = executor or SubprocessExecutor()

    def run(self, hook_path: Path | str, context: HookContext) -> HookResult:
        """Run one hook and return its exit status.

        Raises:
            HookSpawnError: the hook could not be started at all
        """
        hook_path = Path(hook_path)
        logger.debug("Running %s hook %s", context.hook_type.value, hook_path)
        try:
            result = self.executor.execute(
                [str(hook_path)],
                cwd=context.invocation.cwd,
                env=hook_environment(context),
                inherit_env=False,
            )
        except CommandSpawnError as e:
            raise HookSpawnError(hook_path, e.detail) from e

        logger.debug("%s hook %s exited with %d", context.hook_type.value, hook_path, result.exit_code)
        return HookResult(hook_path=hook_path, hook_type=context.hook_type, exit_code=result.exit_code)

    def run_pre(self, hook_path: Path | str, invocation: Invocation) -> HookResult:
        return self.run(hook_path, HookContext(invocation=invocation, hook_type=HookType.PRE))

    def run_intercept(
        self,
        hook_path: Path | str,
        invocation: Invocation,
        executed_binary: Path,
        executed_args: tuple[str, ...],
    ) -> HookResult:
        return self.run(
            hook_path,
            HookContext(
                invocation=invocation,
                hook_type=HookType.INTERCEPT,
                executed_binary=executed_binary,
                executed_args=executed_args,
            ),
        )

    def run_post(
        self,
        hook_path: Path | str,
        invocation: Invocation,
        executed_binary: Path,
        executed_args: tuple[str, ...],
        exit_code: int,
    ) -> HookResult:
        return self.run(
            hook_path,
            HookContext(
                invocation=invocation,
                hook_type=HookType.POST,
                executed_binary=executed_binary,
                executed_args=executed_args,
                exit_code=exit_code,
            ),
        )
