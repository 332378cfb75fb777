import os
from pathlib import Path

import platformdirs


def get_user_config_path() -> Path:
    """Get the path to the user config file for the current platform."""
    return platformdirs.user_config_path("ps1") / "config.toml"


def _abbreviate(component: str) -> str:
    # Hidden directories keep their dot so ".config" reads as ".c"
    if component.startswith(".") and len(component) > 1:
        return component[:2]
    return component[:1]


def shorten_path(path: Path | str, home: Path | str | None = None) -> str:
    """Shorten a path for display in the prompt.

    The home directory prefix becomes ``~`` and every component except the
    last is abbreviated to its first character.

    Args:
        path: Absolute path to shorten.
        home: Home directory, or None to skip home substitution.

    Returns:
        The shortened path, e.g. ``~/p/f/bar`` for ``/home/me/projects/foo/bar``.

    Examples:
        >>> shorten_path("/home/me/projects/foo/bar", "/home/me")
        '~/p/f/bar'
        >>> shorten_path("/usr/local/share", "/home/me")
        '/u/l/share'
    """
    path_str = str(path)
    home_str = str(home).rstrip("/") if home else ""

    if home_str and (path_str == home_str or path_str.startswith(home_str + "/")):
        anchor = "~"
        rest = path_str[len(home_str) :]
    else:
        anchor = ""
        rest = path_str

    parts = [p for p in rest.split("/") if p]
    if not parts:
        return anchor or "/"

    shortened = [_abbreviate(p) for p in parts[:-1]]
    shortened.append(parts[-1])
    return anchor + "/" + "/".join(shortened)


def is_privileged_user() -> bool:
    """Check whether the process runs with root privileges."""
    return os.geteuid() == 0
