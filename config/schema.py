"""Schema for ``.tramp.toml`` files using Pydantic.

A file holds three cascade flags and an ordered list of rules:

    root = true
    no-external-lookup = false
    root-config-lookup-disable-env-var = "CI"

    [[rules]]
    binary_pattern = ".*/cargo$"
    arg_rewrite = "s/^build$/build --release/"
    pre_hook = "./hooks/check.sh"

Structural problems, bad regexes, bad substitutions and conflicting actions
are all rejected here, so a loaded config can always be matched.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.rules.rewriter import Substitution

# A rule may declare at most one of these; pre_hook/post_hook combine with any.
ACTION_FIELDS = ("arg_rewrite", "command_rewrite", "alternate_command", "intercept_hook")
PATH_FIELDS = ("alternate_command", "pre_hook", "post_hook", "intercept_hook")

# ============================================================================
# Rules
# ============================================================================


class RuleConfig(BaseModel):
    """One matching condition plus its action and hooks."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    binary_pattern: str | None = Field(None, description="Regex searched in the binary path")
    cwd_pattern: str | None = Field(None, description="Regex searched in the working directory")

    arg_rewrite: str | None = Field(None, description="s/pattern/replacement/ applied to the joined args")
    command_rewrite: str | None = Field(None, description="s/pattern/replacement/ applied to binary + args")
    alternate_command: str | None = Field(None, description="Binary to run instead, keeping the args")
    intercept_hook: str | None = Field(None, description="Script that runs instead of the command")

    pre_hook: str | None = Field(None, description="Script run before; non-zero aborts")
    post_hook: str | None = Field(None, description="Script run after; exit code ignored")

    @field_validator("binary_pattern", "cwd_pattern")
    @classmethod
    def validate_pattern(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regex pattern {v!r}: {e}") from e
        return v

    @field_validator("arg_rewrite", "command_rewrite")
    @classmethod
    def validate_substitution(cls, v: str | None) -> str | None:
        if v is not None:
            Substitution.parse(v)
        return v

    @field_validator(*PATH_FIELDS)
    @classmethod
    def validate_path(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("path must not be empty")
        return v

    @model_validator(mode="after")
    def validate_single_action(self) -> RuleConfig:
        """Reject rules declaring more than one primary action."""
        declared = [name for name in ACTION_FIELDS if getattr(self, name) is not None]
        if len(declared) > 1:
            raise ValueError(f"mutually exclusive options: {declared[0]} and {declared[1]}")
        return self

    @property
    def action(self) -> str | None:
        for name in ACTION_FIELDS:
            if getattr(self, name) is not None:
                return name
        return None

    def summary(self) -> str:
        """Short ``key=value`` description of the fields that are set."""
        return ", ".join(f"{name}={value!r}" for name, value in self.model_dump(exclude_none=True).items()) or "match-all"


# ============================================================================
# File
# ============================================================================


class TrampFileConfig(BaseModel):
    """Contents of a single ``.tramp.toml``.

    The flags stay ``None`` when a file does not mention them, so the cascade
    can tell "unset" from an explicit ``false``.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    root: bool | None = Field(None, description="Stop walking up after this directory")
    no_external_lookup: bool | None = Field(
        None,
        alias="no-external-lookup",
        description="Never consult the user-level config",
    )
    root_config_lookup_disable_env_var: str | None = Field(
        None,
        alias="root-config-lookup-disable-env-var",
        description="Env var that, when truthy, skips the user-level config",
    )
    rules: list[RuleConfig] = Field(default_factory=list, description="Rules in priority order")

    @field_validator("root_config_lookup_disable_env_var")
    @classmethod
    def validate_env_var_name(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("environment variable name must not be empty")
        return v
