"""Configuration management for tramp."""

from .loader import CONFIG_FILENAME, ConfigLoader, is_env_truthy, load_config, parse_config_file, parse_config_str, user_config_path
from .schema import RuleConfig, TrampFileConfig
from .types import EffectiveConfig, LoadedConfig, RuleWithSource

__all__ = [
    "CONFIG_FILENAME",
    "ConfigLoader",
    "EffectiveConfig",
    "LoadedConfig",
    "RuleConfig",
    "RuleWithSource",
    "TrampFileConfig",
    "is_env_truthy",
    "load_config",
    "parse_config_file",
    "parse_config_str",
    "user_config_path",
]
