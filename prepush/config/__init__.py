from .defaults import DEFAULT_CONFIG_FILE, default_config
from .loader import load_config, resolve_config
from .types import ConfigError, HookConfig, TaskConfig, UnsupportedConfigFormatError

__all__ = [
    "load_config",
    "resolve_config",
    "default_config",
    "DEFAULT_CONFIG_FILE",
    "HookConfig",
    "TaskConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
