from .installer import HOOK_NAME, find_hooks_dir, hook_script, install_hook
from .types import HookError

__all__ = ["install_hook", "find_hooks_dir", "hook_script", "HOOK_NAME", "HookError"]
