"""Default configuration values.

DEFAULT_CONFIG is a plain dict so it can be merged with file and environment
sources by deep_merge, which never mutates its inputs.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "shell": "zsh",
    "logging": {
        "level": "warning",
        "format": "json",
        "file": "",
    },
}
