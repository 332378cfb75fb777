# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration loading and merging.

Sources, lowest to highest precedence: built-in defaults, the user TOML
file, PS1_* environment variables, CLI overrides.
"""

from __future__ import annotations

import json
import os
import tomllib
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ps1.config._defaults import DEFAULT_CONFIG
from ps1.config._models import Config
from ps1.exceptions import ConfigError, ConfigLoadError
from ps1.utils import get_user_config_path

if TYPE_CHECKING:
    from pathlib import Path

ENV_PREFIX = "PS1_"


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        # TOMLDecodeError only carries lineno/colno on Python 3.14+
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Deep merge two configuration dictionaries.

    Merges ``override`` into ``base``, returning a new dictionary. Neither
    input is modified. Dictionaries merge recursively; any other value in
    ``override`` replaces the value in ``base``.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key in base.keys() | override.keys():
        if key not in override:
            result[key] = _copy_value(base[key])
        elif key not in base:
            result[key] = _copy_value(override[key])
        elif isinstance(base[key], dict) and isinstance(override[key], dict):
            result[key] = deep_merge(base[key], override[key])
        else:
            result[key] = _copy_value(override[key])

    return result


def _copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    if isinstance(value, dict):
        return {k: _copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path, creating intermediate dicts.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "logging.level", "debug")
        >>> d
        {'logging': {'level': 'debug'}}
    """
    parts = key_path.split(".")
    current = d

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value


def _parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse environment variable value with type inference.

    Order of type inference:
        1. Boolean: true/false (case-insensitive)
        2. Integer: parseable as int
        3. JSON array or object
        4. String: anything else
    """
    lower_value = value.lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    try:
        return int(value)
    except ValueError:
        pass

    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def parse_env_vars(prefix: str = ENV_PREFIX) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into a config dictionary.

    Environment variable naming:
        - Add prefix (PS1_)
        - Convert to uppercase
        - Replace dots with double underscores
        - Example: logging.level -> PS1_LOGGING__LEVEL
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        config_key = key[len(prefix) :]
        if not config_key:
            continue

        # PS1_LOGGING__LEVEL -> logging.level
        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, _parse_env_value(value))

    return result


def load_config(
    *,
    config_path: Path | None = None,
    include_env: bool = True,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> Config:
    """Load configuration from every source.

    Args:
        config_path: TOML file to read. Defaults to the user config file,
            which may be absent.
        include_env: Whether to apply PS1_* environment variables.
        cli_overrides: Highest-precedence values from the command line.

    Returns:
        The validated configuration.

    Raises:
        ConfigLoadError: If the file cannot be parsed or the merged values
            are invalid.
        FileNotFoundError: If an explicit ``config_path`` does not exist.
    """
    merged = DEFAULT_CONFIG

    if config_path is not None:
        merged = deep_merge(merged, read_toml_file(config_path))
    else:
        user_path = get_user_config_path()
        if user_path.is_file():
            merged = deep_merge(merged, read_toml_file(user_path))

    if include_env:
        merged = deep_merge(merged, parse_env_vars())

    if cli_overrides:
        merged = deep_merge(merged, cli_overrides)

    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigLoadError(msg, path=config_path) from e


def safe_load_config(
    *,
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> tuple[Config, str | None]:
    """Load configuration, falling back to defaults on any error.

    A broken config file must not break the prompt, so errors are returned
    for the caller to log instead of being raised.

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
    """
    try:
        return load_config(config_path=config_path, cli_overrides=cli_overrides), None
    except (ConfigError, OSError) as e:
        return Config(), str(e)
