"""Configuration for ps1.

Settings come from built-in defaults, an optional user TOML file, PS1_*
environment variables and command-line overrides.
"""

from ps1.config._defaults import DEFAULT_CONFIG
from ps1.config._loader import (
    deep_merge,
    load_config,
    parse_env_vars,
    read_toml_file,
    safe_load_config,
    set_nested_key,
)
from ps1.config._models import Config, LogFormat, LoggingConfig, LogLevel

__all__ = [
    "DEFAULT_CONFIG",
    "Config",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "deep_merge",
    "load_config",
    "parse_env_vars",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
]
