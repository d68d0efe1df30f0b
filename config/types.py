"""Type definitions for loaded and merged configuration."""

from pathlib import Path

from pydantic import BaseModel, Field

from config.schema import RuleConfig, TrampFileConfig


class LoadedConfig(BaseModel):
    """A parsed config file and where it came from."""

    config: TrampFileConfig
    path: Path
    user_level: bool = False


class RuleWithSource(BaseModel):
    """A rule plus the file that declared it."""

    rule: RuleConfig
    source: Path


class EffectiveConfig(BaseModel):
    """Result of the cascade: rules in priority order plus the winning flags."""

    rules: list[RuleWithSource] = Field(default_factory=list)
    root: bool = False
    no_external_lookup: bool = False
    root_config_lookup_disable_env_var: str | None = None
    sources: list[Path] = Field(default_factory=list)
