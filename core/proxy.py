"""ProcessProxy: match, pre-hook, execute or intercept, post-hook.

States::

    START -> MATCHED -> [PRE_HOOK] -> EXECUTING -> [POST_HOOK] -> DONE
                                   \\-> INTERCEPTED -------------> DONE

The final exit code is, in priority order: a failing pre-hook's code, the
intercept hook's code, the primary command's code. A post-hook never changes
it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from config.types import EffectiveConfig
from core.errors import EXIT_SPAWN_FAILURE, CommandSpawnError, HookSpawnError
from core.executor import BaseExecutor, SubprocessExecutor
from core.hooks import HookRunner
from core.rules import CompiledRule, RuleMatcher, TransformedCommand, transform
from core.types import ExecutionOutcome, Invocation, OutcomePath

logger = logging.getLogger(__name__)


class ProxyState(str, Enum):
    START = "start"
    MATCHED = "matched"
    PRE_HOOK = "pre_hook"
    INTERCEPTED = "intercepted"
    EXECUTING = "executing"
    POST_HOOK = "post_hook"
    DONE = "done"


@dataclass(frozen=True)
class ProxyPlan:
    """The MATCHED state: what will run and which hooks surround it."""

    rule: CompiledRule | None
    command: TransformedCommand
    pre_hook: Path | None = None
    post_hook: Path | None = None

    @property
    def outcome_path(self) -> OutcomePath:
        if self.command.is_intercept:
            return OutcomePath.INTERCEPTED
        if self.command.is_rewritten:
            return OutcomePath.REWRITTEN
        return OutcomePath.ORIGINAL


class ProcessProxy:
    """Runs one invocation through the matched rule's pipeline."""

    def __init__(
        self,
        config: EffectiveConfig | RuleMatcher,
        *,
        executor: BaseExecutor | None = None,
        hook_runner: HookRunner | None = None,
    ):
        self.matcher = config if isinstance(config, RuleMatcher) else RuleMatcher(config)
        self.executor = executor or SubprocessExecutor()
        self.hook_runner = hook_runner or HookRunner(self.executor)
        self.states: list[ProxyState] = []

    def plan(self, invocation: Invocation) -> ProxyPlan:
        """START -> MATCHED."""
        rule = self.matcher.match(invocation)
        command = transform(rule, invocation)
        if rule is None:
            return ProxyPlan(rule=None, command=command)
        return ProxyPlan(
            rule=rule,
            command=command,
            pre_hook=Path(rule.rule.pre_hook) if rule.rule.pre_hook else None,
            post_hook=Path(rule.rule.post_hook) if rule.rule.post_hook else None,
        )

    def run(self, invocation: Invocation) -> ExecutionOutcome:
        """Run the full lifecycle and return the exit code to propagate.

        Raises:
            HookSpawnError: a pre or intercept hook could not be started
        """
        self.states = [ProxyState.START]
        plan = self.plan(invocation)
        self._enter(ProxyState.MATCHED)
        path = plan.outcome_path

        if plan.pre_hook is not None:
            self._enter(ProxyState.PRE_HOOK)
            pre = self.hook_runner.run_pre(plan.pre_hook, invocation)
            if not pre.allow:
                logger.info("Pre-hook %s exited with %d; not running %s", plan.pre_hook, pre.exit_code, invocation.binary)
                self._enter(ProxyState.DONE)
                return ExecutionOutcome(exit_code=pre.exit_code, path=path, aborted_by_pre_hook=True)

        command = plan.command
        if command.is_intercept:
            self._enter(ProxyState.INTERCEPTED)
            result = self.hook_runner.run_intercept(command.intercept_hook, invocation, command.binary, command.args)
            self._enter(ProxyState.DONE)
            return ExecutionOutcome(exit_code=result.exit_code, path=path)

        self._enter(ProxyState.EXECUTING)
        exit_code = self._execute(command, invocation)

        if plan.post_hook is not None:
            self._enter(ProxyState.POST_HOOK)
            try:
                self.hook_runner.run_post(plan.post_hook, invocation, command.binary, command.args, exit_code)
            except HookSpawnError as e:
                logger.warning("post-hook failed: %s", e)

        self._enter(ProxyState.DONE)
        return ExecutionOutcome(exit_code=exit_code, path=path)

    def _execute(self, command: TransformedCommand, invocation: Invocation) -> int:
        try:
            return self.executor.execute(command.argv, cwd=invocation.cwd).exit_code
        except CommandSpawnError as e:
            logger.error("%s", e)
            return EXIT_SPAWN_FAILURE

    def _enter(self, state: ProxyState) -> None:
        logger.debug("proxy: %s -> %s", self.states[-1].value, state.value)
        self.states.append(state)


def run_invocation(config: EffectiveConfig, invocation: Invocation) -> ExecutionOutcome:
    """Convenience function: proxy ``invocation`` with real subprocesses."""
    return ProcessProxy(config).run(invocation)
