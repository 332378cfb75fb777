"""Shell-safe rendering of styled prompt text.

Terminal escape sequences embedded in a prompt have no visible width, but the
shell's line editor counts every byte unless told otherwise. Each shell has a
convention for marking bytes as zero-width; this module wraps the ANSI
prefix/suffix of every styled segment in those markers so that line wrapping
stays correct.
"""

import re
from enum import StrEnum
from functools import lru_cache

from rich.color import ColorSystem
from rich.style import Style

_PROBE = "\x00"


class Shell(StrEnum):
    """Shells with a known zero-width marker convention."""

    ZSH = "zsh"
    BASH = "bash"

    @property
    def markers(self) -> tuple[str, str]:
        """The (open, close) pair that brackets zero-width bytes."""
        return _MARKERS[self]


# bash reads these readline markers from command substitution output; its
# \[ \] escapes are only honored when written literally into PS1.
_MARKERS: dict[Shell, tuple[str, str]] = {
    Shell.ZSH: ("%{", "%}"),
    Shell.BASH: ("\x01", "\x02"),
}


def wrap_zero_width(
    text: str, prefix: str, suffix: str, shell: Shell = Shell.ZSH
) -> str:
    """Wrap the control codes around ``text`` in zero-width markers.

    Args:
        text: The visible text.
        prefix: Control codes emitted before the text.
        suffix: Control codes emitted after the text.
        shell: Shell whose marker convention to use.

    Returns:
        ``open prefix close text open suffix close``.
    """
    open_marker, close_marker = shell.markers
    return (
        f"{open_marker}{prefix}{close_marker}"
        f"{text}"
        f"{open_marker}{suffix}{close_marker}"
    )


@lru_cache(maxsize=64)
def ansi_codes(style: Style) -> tuple[str, str]:
    """Get the ANSI (prefix, suffix) pair for a rich style.

    Codes use the standard 8-color system so that every terminal renders the
    prompt the same way. A null style has empty codes.
    """
    rendered = style.render(_PROBE, color_system=ColorSystem.STANDARD)
    prefix, _, suffix = rendered.partition(_PROBE)
    return prefix, suffix


def paint(style: Style, text: str, shell: Shell = Shell.ZSH) -> str:
    """Render ``text`` in ``style`` with shell-safe control codes.

    The result is final: concatenate painted strings, never paint them again.

    Example:
        >>> paint(Style(color="green", bold=True), "foobar")
        '%{\\x1b[1;32m%}foobar%{\\x1b[0m%}'
    """
    prefix, suffix = ansi_codes(style)
    return wrap_zero_width(text, prefix, suffix, shell)


@lru_cache(maxsize=2)
def _marker_pattern(shell: Shell) -> re.Pattern[str]:
    open_marker, close_marker = shell.markers
    return re.compile(
        f"{re.escape(open_marker)}.*?{re.escape(close_marker)}", re.DOTALL
    )


def strip_zero_width(rendered: str, shell: Shell = Shell.ZSH) -> str:
    """Remove every zero-width marker pair and its payload.

    Returns:
        The text as the shell will measure it.
    """
    return _marker_pattern(shell).sub("", rendered)
