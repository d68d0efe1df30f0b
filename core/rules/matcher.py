"""Rule matching: binary path and working directory, first match wins."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from core.errors import ConfigParseError
from core.rules.rewriter import Substitution, SubstitutionSyntaxError
from core.types import Invocation

if TYPE_CHECKING:
    from config.schema import RuleConfig
    from config.types import EffectiveConfig, RuleWithSource

logger = logging.getLogger(__name__)


def compile_regex(pattern: str, source: Path) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigParseError(source, f"invalid regex pattern {pattern!r}: {e}") from e


def compile_substitution(text: str, source: Path) -> Substitution:
    try:
        return Substitution.parse(text)
    except SubstitutionSyntaxError as e:
        raise ConfigParseError(source, str(e)) from e


@dataclass(frozen=True)
class CompiledRule:
    """A rule with its patterns and rewrite compiled, ready for matching."""

    rule: RuleConfig
    source: Path
    binary_regex: re.Pattern[str] | None = None
    cwd_regex: re.Pattern[str] | None = None
    substitution: Substitution | None = None

    @classmethod
    def from_rule_with_source(cls, rws: RuleWithSource) -> CompiledRule:
        rule = rws.rule
        rewrite = rule.arg_rewrite or rule.command_rewrite
        return cls(
            rule=rule,
            source=rws.source,
            binary_regex=compile_regex(rule.binary_pattern, rws.source) if rule.binary_pattern is not None else None,
            cwd_regex=compile_regex(rule.cwd_pattern, rws.source) if rule.cwd_pattern is not None else None,
            substitution=compile_substitution(rewrite, rws.source) if rewrite is not None else None,
        )

    def matches(self, invocation: Invocation) -> bool:
        """Every declared pattern must match; no patterns matches everything."""
        if self.binary_regex is not None and not self.binary_regex.search(str(invocation.binary)):
            return False
        if self.cwd_regex is not None and not self.cwd_regex.search(str(invocation.cwd)):
            return False
        return True

    def describe(self) -> str:
        return f"{self.source} ({self.rule.summary()})"


def compile_rules(config: EffectiveConfig) -> list[CompiledRule]:
    """Compile every rule of ``config`` in cascade order.

    Raises:
        ConfigParseError: a pattern or rewrite string does not compile
    """
    return [CompiledRule.from_rule_with_source(rws) for rws in config.rules]


def find_matching_rule(rules: list[CompiledRule], invocation: Invocation) -> CompiledRule | None:
    """Return the first rule matching ``invocation``, or None."""
    for rule in rules:
        if rule.matches(invocation):
            logger.debug("Matched rule from %s", rule.describe())
            return rule
    logger.debug("No rule matched %s", invocation.binary)
    return None


class RuleMatcher:
    """Compiled view of an EffectiveConfig."""

    def __init__(self, config: EffectiveConfig):
        self.config = config
        self.rules = compile_rules(config)

    def match(self, invocation: Invocation) -> CompiledRule | None:
        return find_matching_rule(self.rules, invocation)
