"""Rule matching and command rewriting."""

from core.rules.matcher import CompiledRule, RuleMatcher, compile_rules, find_matching_rule
from core.rules.rewriter import Substitution, SubstitutionSyntaxError, rewrite_args, rewrite_command
from core.rules.transformer import TransformedCommand, TransformKind, transform

__all__ = [
    "CompiledRule",
    "RuleMatcher",
    "Substitution",
    "SubstitutionSyntaxError",
    "TransformKind",
    "TransformedCommand",
    "compile_rules",
    "find_matching_rule",
    "rewrite_args",
    "rewrite_command",
    "transform",
]
