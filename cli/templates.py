"""Text written by ``tramp --init`` and printed by ``tramp --setup``."""

from __future__ import annotations

import shlex
from pathlib import Path

INIT_TEMPLATE = """\
# tramp configuration
#
# tramp reads .tramp.toml from the current directory and every parent,
# nearest first, then ~/.tramp.toml. The first matching rule wins.

# Stop looking in parent directories after this one.
root = true

# Never read ~/.tramp.toml for commands run below this directory.
# no-external-lookup = true

# Skip ~/.tramp.toml whenever this variable is truthy (e.g. on CI).
# root-config-lookup-disable-env-var = "CI"

# Each rule may set binary_pattern and/or cwd_pattern (regexes, both must
# match), at most one of arg_rewrite / command_rewrite / alternate_command /
# intercept_hook, and optionally pre_hook / post_hook.
#
# [[rules]]
# binary_pattern = ".*/cargo$"
# arg_rewrite = "s/^build$/build --release/"
# pre_hook = "./scripts/check-toolchain.sh"
#
# [[rules]]
# binary_pattern = ".*/npm$"
# alternate_command = "pnpm"
#
# [[rules]]
# binary_pattern = ".*/deploy$"
# cwd_pattern = "/prod/"
# intercept_hook = "./scripts/confirm-deploy.sh"
"""


def generate_init_template() -> str:
    return INIT_TEMPLATE


def generate_trampoline_script(
    binary: Path | str,
    build_command: str | None = None,
    tramp: str = "tramp",
) -> str:
    """POSIX sh stub that builds ``binary`` if it is missing, then runs it through tramp."""
    target = shlex.quote(str(binary))
    if build_command:
        missing = (
            f'    echo "tramp: building $TARGET" >&2\n'
            f"    sh -c {shlex.quote(build_command)} || exit $?\n"
        )
    else:
        missing = '    echo "tramp: $TARGET not found and no build command configured" >&2\n    exit 127\n'

    return (
        "#!/bin/sh\n"
        f"# tramp trampoline for {binary}\n"
        "# Generated by `tramp --setup`.\n"
        f"TARGET={target}\n"
        'if [ ! -x "$TARGET" ]; then\n'
        f"{missing}"
        "fi\n"
        f'exec {shlex.quote(tramp)} "$TARGET" "$@"\n'
    )
