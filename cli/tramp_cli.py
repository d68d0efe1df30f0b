#!/usr/bin/env python3
"""
tramp CLI - run a command through the .tramp.toml rule cascade

    tramp <command> [args...]      proxy a command
    tramp config show|validate     inspect the cascade for the current directory
    tramp --init [--force]         write a template .tramp.toml
    tramp --setup <binary>         print a trampoline script
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from config.loader import CONFIG_FILENAME, ConfigLoader
from config.types import LoadedConfig
from core.errors import EXIT_INTERNAL_ERROR, ConfigError, TrampError
from core.paths import resolve_command
from core.proxy import ProcessProxy
from core.types import Invocation

from cli import __version__
from cli.templates import generate_init_template, generate_trampoline_script

logger = logging.getLogger(__name__)

CONFIG_ACTIONS = ("show", "validate")


def _stdout() -> Console:
    return Console(soft_wrap=True, highlight=False)


def _stderr() -> Console:
    return Console(stderr=True, soft_wrap=True, highlight=False)


def setup_logging(verbose: bool = False) -> None:
    """Log to stderr only; stdout belongs to the proxied command."""
    level = logging.WARNING
    level_name = os.environ.get("TRAMP_LOG", "").upper()
    if level_name and isinstance(logging.getLevelName(level_name), int):
        level = logging.getLevelName(level_name)
    if verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="tramp: %(levelname)s: %(message)s", stream=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tramp",
        description="Proxy commands with rewrite rules and pre/post/intercept hooks",
        epilog="Rules come from .tramp.toml in this directory and its parents, then ~/.tramp.toml.",
    )
    parser.add_argument("--setup", metavar="BINARY", help="Print a trampoline wrapper script for BINARY")
    parser.add_argument("--build-command", metavar="CMD", help="With --setup: command that builds BINARY when missing")
    parser.add_argument("--init", action="store_true", help=f"Create a template {CONFIG_FILENAME} here")
    parser.add_argument("--force", action="store_true", help=f"With --init: overwrite an existing {CONFIG_FILENAME}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    parser.add_argument("--version", action="version", version=f"tramp {__version__}")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to run through tramp")
    return parser


def cmd_setup(binary: str, build_command: str | None) -> int:
    print(generate_trampoline_script(binary, build_command), end="")
    return 0


def cmd_init(force: bool) -> int:
    config_path = Path(CONFIG_FILENAME)
    if config_path.exists() and not force:
        _stderr().print(f"[red]tramp: error:[/red] {CONFIG_FILENAME} already exists. Use --force to overwrite.")
        return 1
    config_path.write_text(generate_init_template(), encoding="utf-8")
    print(f"Created {CONFIG_FILENAME}")
    return 0


def _print_loaded(console: Console, loaded: LoadedConfig) -> None:
    cfg = loaded.config
    label = " (user)" if loaded.user_level else ""
    console.print(f"[bold]# Source: {escape(str(loaded.path))}{label}[/bold]")
    console.print(f"# root: {str(bool(cfg.root)).lower()}")
    console.print(f"# no-external-lookup: {str(bool(cfg.no_external_lookup)).lower()}")
    if cfg.root_config_lookup_disable_env_var:
        console.print(f"# root-config-lookup-disable-env-var: {escape(cfg.root_config_lookup_disable_env_var)}")
    console.print(f"# rules: {len(cfg.rules)}")
    console.print()
    for i, rule in enumerate(cfg.rules, 1):
        console.print(f"  Rule {i}:")
        for key, value in rule.model_dump(exclude_none=True).items():
            console.print(f"    {key}: {escape(str(value))}")
        console.print()


def cmd_config_show() -> int:
    console = _stdout()
    loader = ConfigLoader(Path.cwd())
    configs = loader.discover()

    if not configs:
        console.print("No configuration files found.")
    else:
        console.print("Configuration files (in cascade order):\n")
        for loaded in configs:
            _print_loaded(console, loaded)

    user_path = loader.user_config_path
    console.print(f"User config path: {escape(str(user_path))}")
    console.print("  (exists)" if user_path.exists() else "  (not found)")
    return 0


def cmd_config_validate() -> int:
    console = _stdout()
    try:
        configs = ConfigLoader(Path.cwd()).discover()
    except ConfigError as e:
        _stderr().print(f"[red]Configuration error:[/red] {escape(str(e))}")
        return 1

    if not configs:
        console.print("No configuration files found.")
        return 0

    console.print("All configuration files are valid:")
    for loaded in configs:
        console.print(f"  {escape(str(loaded.path))} ({len(loaded.config.rules)} rules)")
    return 0


def build_invocation(command: list[str], cwd: Path) -> Invocation:
    """Resolve the command to an absolute binary path.

    Unresolvable names are kept as given so rules can still intercept them;
    actually executing one fails with the spawn-failure exit code.
    """
    name, args = command[0], command[1:]
    binary = resolve_command(name, cwd)
    if binary is None:
        logger.debug("%s not found on PATH", name)
        binary = cwd / name if os.sep in name else Path(name)
    return Invocation.create(binary, args, cwd)


def cmd_run(command: list[str]) -> int:
    cwd = Path.cwd()
    invocation = build_invocation(command, cwd)
    config = ConfigLoader(cwd).load()
    outcome = ProcessProxy(config).run(invocation)
    logger.debug("Finished via %s path with exit code %d", outcome.path.value, outcome.exit_code)
    return outcome.exit_code


def run(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.force and not args.init:
        parser.error("--force requires --init")
    if args.build_command and not args.setup:
        parser.error("--build-command requires --setup")

    try:
        if args.setup:
            return cmd_setup(args.setup, args.build_command)
        if args.init:
            return cmd_init(args.force)

        command = args.command
        # a leading "--" ends tramp's own options; later ones belong to the command
        if command[:1] == ["--"]:
            command = command[1:]
        if len(command) == 2 and command[0] == "config" and command[1] in CONFIG_ACTIONS:
            return cmd_config_show() if command[1] == "show" else cmd_config_validate()

        if not command:
            parser.print_help(sys.stderr)
            return EXIT_INTERNAL_ERROR

        return cmd_run(command)
    except TrampError as e:
        _stderr().print(f"[red]tramp: error:[/red] {escape(str(e))}")
        return EXIT_INTERNAL_ERROR
    except OSError as e:
        _stderr().print(f"[red]tramp: error:[/red] {escape(str(e))}")
        return EXIT_INTERNAL_ERROR


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
