"""A fast, git-aware shell prompt."""

from ps1._duration import format_duration, format_duration_ms
from ps1._prompt import render_git_status, render_prompt
from ps1._styled import Shell, paint, strip_zero_width, wrap_zero_width

__all__ = [
    "Shell",
    "format_duration",
    "format_duration_ms",
    "paint",
    "render_git_status",
    "render_prompt",
    "strip_zero_width",
    "wrap_zero_width",
]
