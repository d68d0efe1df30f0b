"""Hook scripts around (or instead of) the proxied command."""

from core.hooks.base import HookContext, HookResult, HookType
from core.hooks.runner import HookRunner, hook_environment

__all__ = ["HookContext", "HookResult", "HookRunner", "HookType", "hook_environment"]
