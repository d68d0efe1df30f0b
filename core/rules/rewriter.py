"""sed-style substitutions for argument and command rewriting.

Syntax: ``s<d>pattern<d>replacement<d>[flags]`` where ``<d>`` is any single
character (usually ``/``). A backslash before the delimiter escapes it.
The only flag is ``g`` (replace every match); without it just the first
match is replaced.

Replacement templates understand ``$1``, ``${1}``, ``${name}`` and ``$$`` in
addition to Python's own ``\\1`` and ``\\g<name>``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_DOLLAR_REF = re.compile(r"\$(?:\$|(\d+)|\{(\w+)\})")
_ALLOWED_FLAGS = frozenset("g")


class SubstitutionSyntaxError(ValueError):
    """Raised for a malformed ``s/pattern/replacement/`` string."""


def _split_by_delimiter(body: str, delimiter: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body) and body[i + 1] == delimiter:
            current.append(delimiter)
            i += 2
            continue
        if c == delimiter:
            parts.append("".join(current))
            current = []
        else:
            current.append(c)
        i += 1
    parts.append("".join(current))
    return parts


def _convert_template(replacement: str) -> str:
    """Translate ``$N`` / ``${name}`` references into ``re.sub`` syntax."""

    def repl(m: re.Match[str]) -> str:
        if m.group(0) == "$$":
            return "$"
        return f"\\g<{m.group(1) or m.group(2)}>"

    return _DOLLAR_REF.sub(repl, replacement)


@dataclass(frozen=True)
class Substitution:
    """A parsed, compiled substitution."""

    source: str
    pattern: re.Pattern[str]
    replacement: str
    global_: bool = False

    @classmethod
    def parse(cls, text: str) -> Substitution:
        if not text.startswith("s"):
            raise SubstitutionSyntaxError(f"substitution must start with 's': {text!r}")
        if len(text) < 2:
            raise SubstitutionSyntaxError(f"substitution too short: {text!r}")

        delimiter = text[1]
        if delimiter.isalnum() or delimiter.isspace() or delimiter == "\\":
            raise SubstitutionSyntaxError(f"invalid delimiter {delimiter!r} in {text!r}")

        parts = _split_by_delimiter(text[2:], delimiter)
        # s/pat/repl/flags -> ["pat", "repl", "flags"]; the closing delimiter is required
        if len(parts) != 3:
            raise SubstitutionSyntaxError(
                f"expected s{delimiter}pattern{delimiter}replacement{delimiter}[flags], got {text!r}"
            )

        pattern_str, replacement, flags = parts
        unknown = set(flags) - _ALLOWED_FLAGS
        if unknown:
            raise SubstitutionSyntaxError(f"unknown flag(s) {''.join(sorted(unknown))!r} in {text!r}")

        try:
            pattern = re.compile(pattern_str)
        except re.error as e:
            raise SubstitutionSyntaxError(f"invalid regex {pattern_str!r}: {e}") from e

        template = _convert_template(replacement)
        try:
            # re compiles the template before searching, so bad group
            # references fail here even though "" never matches them
            pattern.sub(template, "")
        except (re.error, IndexError) as e:
            raise SubstitutionSyntaxError(f"invalid replacement {replacement!r}: {e}") from e

        return cls(source=text, pattern=pattern, replacement=template, global_="g" in flags)

    def apply(self, text: str) -> str:
        """Replace the first match (or all, with ``g``). No match leaves ``text`` unchanged."""
        return self.apply_n(text)[0]

    def apply_n(self, text: str) -> tuple[str, int]:
        return self.pattern.subn(self.replacement, text, count=0 if self.global_ else 1)


def rewrite_args(args: list[str] | tuple[str, ...], substitution: Substitution) -> list[str]:
    """Apply ``substitution`` to the space-joined arguments and re-split on whitespace.

    Without a match the arguments come back exactly as given.
    """
    rewritten, count = substitution.apply_n(" ".join(args))
    if not count:
        return list(args)
    return rewritten.split()


def rewrite_command(
    binary: str,
    args: list[str] | tuple[str, ...],
    substitution: Substitution,
) -> tuple[str, list[str]]:
    """Apply ``substitution`` to ``binary + args`` and split into a new binary and args.

    Without a match, or if the result is empty, the original binary is kept.
    """
    rewritten, count = substitution.apply_n(" ".join([binary, *args]))
    parts = rewritten.split()
    if not count:
        return binary, list(args)
    if not parts:
        return binary, []
    return parts[0], parts[1:]
