"""Turn a matched rule into the command that will actually run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from core.paths import resolve_or_keep
from core.rules.matcher import CompiledRule
from core.rules.rewriter import rewrite_args, rewrite_command
from core.types import Invocation

logger = logging.getLogger(__name__)


class TransformKind(str, Enum):
    UNCHANGED = "unchanged"
    ARG_REWRITE = "arg_rewrite"
    COMMAND_REWRITE = "command_rewrite"
    ALTERNATE_COMMAND = "alternate_command"
    INTERCEPT = "intercept"


@dataclass(frozen=True)
class TransformedCommand:
    """Final binary and arguments, or an intercept signal.

    For INTERCEPT, ``binary``/``args`` describe what would have run and
    ``intercept_hook`` is the script that runs instead.
    """

    kind: TransformKind
    binary: Path
    args: tuple[str, ...]
    intercept_hook: Path | None = None

    @property
    def is_intercept(self) -> bool:
        return self.kind is TransformKind.INTERCEPT

    @property
    def is_rewritten(self) -> bool:
        return self.kind not in (TransformKind.UNCHANGED, TransformKind.INTERCEPT)

    @property
    def argv(self) -> list[str]:
        return [str(self.binary), *self.args]


def transform(rule: CompiledRule | None, invocation: Invocation) -> TransformedCommand:
    """Apply ``rule``'s action to ``invocation``.

    A rewrite whose pattern does not match leaves the command as it was.
    """
    unchanged = TransformedCommand(TransformKind.UNCHANGED, invocation.binary, invocation.args)
    if rule is None:
        return unchanged

    config = rule.rule

    if config.intercept_hook is not None:
        return TransformedCommand(
            TransformKind.INTERCEPT,
            invocation.binary,
            invocation.args,
            intercept_hook=Path(config.intercept_hook),
        )

    if config.alternate_command is not None:
        binary = resolve_or_keep(config.alternate_command, invocation.cwd)
        result = TransformedCommand(TransformKind.ALTERNATE_COMMAND, binary, invocation.args)
    elif config.arg_rewrite is not None and rule.substitution is not None:
        args = rewrite_args(invocation.args, rule.substitution)
        result = TransformedCommand(TransformKind.ARG_REWRITE, invocation.binary, tuple(args))
    elif config.command_rewrite is not None and rule.substitution is not None:
        new_binary, args = rewrite_command(str(invocation.binary), invocation.args, rule.substitution)
        binary = invocation.binary if new_binary == str(invocation.binary) else resolve_or_keep(new_binary, invocation.cwd)
        result = TransformedCommand(TransformKind.COMMAND_REWRITE, binary, tuple(args))
    else:
        return unchanged

    logger.debug("Transformed (%s): %s", result.kind.value, " ".join(result.argv))
    return result
