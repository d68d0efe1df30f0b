"""Cascading ``.tramp.toml`` loader.

Walks from the start directory up to the filesystem root collecting every
``.tramp.toml`` it finds, then appends ``~/.tramp.toml``:

1. Nearer directories first: their rules are tried before their ancestors'.
2. A file with ``root = true`` ends the walk after its own directory.
3. The user-level config comes last, unless ``no-external-lookup`` is set or
   the env var named by ``root-config-lookup-disable-env-var`` is truthy.

Scalar flags take the first value found along the walk. Nothing is cached;
every invocation re-reads the files.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from config.schema import PATH_FIELDS, RuleConfig, TrampFileConfig
from config.types import EffectiveConfig, LoadedConfig, RuleWithSource
from core.errors import ConfigIOError, ConfigParseError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".tramp.toml"

_FALSY_VALUES = frozenset({"0", "false", "no"})


def user_config_path() -> Path:
    """Path of the user-level config (``~/.tramp.toml``)."""
    return Path.home() / CONFIG_FILENAME


def is_env_truthy(var_name: str, environ: Mapping[str, str] | None = None) -> bool:
    """True when ``var_name`` is set to something other than "", "0", "false" or "no"."""
    env = os.environ if environ is None else environ
    value = env.get(var_name)
    if not value:
        return False
    return value.lower() not in _FALSY_VALUES


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def parse_config_str(content: str, path: Path | str) -> TrampFileConfig:
    """Parse and validate config text. ``path`` is used for error messages and relative paths."""
    path = Path(path)
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(path, str(e)) from e

    try:
        config = TrampFileConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(path, _format_validation_error(e)) from e

    return _resolve_rule_paths(config, path.parent)


def parse_config_file(path: Path | str) -> TrampFileConfig:
    """Read and parse one config file.

    Raises:
        FileNotFoundError: the file vanished between discovery and read
        ConfigIOError: the file exists but cannot be read
        ConfigParseError: malformed TOML or an invalid rule
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except UnicodeDecodeError as e:
        raise ConfigParseError(path, f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise ConfigIOError(path, e.strerror or str(e)) from e
    return parse_config_str(content, path)


def _expand_path(value: str, base_dir: Path) -> str:
    """Expand ``~`` and ``$VAR``; anchor relative paths with a separator at ``base_dir``.

    Bare names (``deploy-hook``) are left alone for PATH lookup.
    """
    expanded = os.path.expandvars(os.path.expanduser(value))
    if os.sep in expanded and not os.path.isabs(expanded):
        return str(base_dir / expanded)
    return expanded


def _resolve_rule_paths(config: TrampFileConfig, base_dir: Path) -> TrampFileConfig:
    rules: list[RuleConfig] = []
    for rule in config.rules:
        updates: dict[str, Any] = {
            name: _expand_path(getattr(rule, name), base_dir)
            for name in PATH_FIELDS
            if getattr(rule, name) is not None
        }
        rules.append(rule.model_copy(update=updates) if updates else rule)
    return config.model_copy(update={"rules": rules})


class ConfigLoader:
    """Discovers and merges the config cascade for one directory."""

    def __init__(
        self,
        start_dir: str | Path | None = None,
        *,
        user_config: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.start_dir = Path(start_dir).absolute() if start_dir else Path.cwd()
        self._user_config = Path(user_config) if user_config else None
        self.environ = os.environ if environ is None else environ

    @property
    def user_config_path(self) -> Path:
        return self._user_config or user_config_path()

    def load(self) -> EffectiveConfig:
        """Discover and merge all configs."""
        return self.merge(self.discover())

    def discover(self) -> list[LoadedConfig]:
        """Return every config in cascade order (nearest first, user-level last).

        Raises:
            ConfigIOError / ConfigParseError: a present file is unreadable or invalid
        """
        configs: list[LoadedConfig] = []
        no_external_lookup: bool | None = None
        disable_env_var: str | None = None

        for directory in self._ancestry():
            loaded = self._load_if_present(directory / CONFIG_FILENAME)
            if loaded is None:
                continue
            configs.append(loaded)

            if no_external_lookup is None:
                no_external_lookup = loaded.config.no_external_lookup
            if disable_env_var is None:
                disable_env_var = loaded.config.root_config_lookup_disable_env_var

            if loaded.config.root:
                logger.debug("Cascade stopped at %s (root = true)", loaded.path)
                break

        if no_external_lookup:
            logger.debug("User config skipped: no-external-lookup is set")
            return configs

        if disable_env_var and is_env_truthy(disable_env_var, self.environ):
            logger.debug("User config skipped: $%s is truthy", disable_env_var)
            return configs

        user_path = self.user_config_path
        if any(_same_file(c.path, user_path) for c in configs):
            # already picked up by the walk (home is an ancestor)
            return configs

        user = self._load_if_present(user_path, user_level=True)
        if user is not None:
            configs.append(user)
        return configs

    @staticmethod
    def merge(configs: list[LoadedConfig]) -> EffectiveConfig:
        """Concatenate rules in cascade order; first explicit value wins for each flag."""
        rules: list[RuleWithSource] = []
        flags: dict[str, Any] = {}

        for loaded in configs:
            for rule in loaded.config.rules:
                rules.append(RuleWithSource(rule=rule, source=loaded.path))
            for key in ("root", "no_external_lookup", "root_config_lookup_disable_env_var"):
                value = getattr(loaded.config, key)
                if value is not None and key not in flags:
                    flags[key] = value

        return EffectiveConfig(
            rules=rules,
            sources=[c.path for c in configs],
            **flags,
        )

    def _ancestry(self) -> list[Path]:
        directory = self.start_dir
        dirs = [directory]
        while directory.parent != directory:
            directory = directory.parent
            dirs.append(directory)
        return dirs

    @staticmethod
    def _load_if_present(path: Path, user_level: bool = False) -> LoadedConfig | None:
        try:
            path.stat()
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as e:
            raise ConfigIOError(path, e.strerror or str(e)) from e
        try:
            config = parse_config_file(path)
        except FileNotFoundError:
            return None
        logger.debug("Loaded %s (%d rules)", path, len(config.rules))
        return LoadedConfig(config=config, path=path, user_level=user_level)


def _same_file(a: Path, b: Path) -> bool:
    try:
        return a.samefile(b)
    except OSError:
        return False


def load_config(start_dir: str | Path | None = None) -> EffectiveConfig:
    """Convenience function to load the effective config for ``start_dir``."""
    return ConfigLoader(start_dir).load()
