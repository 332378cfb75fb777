"""Prompt assembly.

Builds the two-line prompt from already-collected pieces::

    💥 [1]
    ⎡ host ~/s/project 1.52s main ±2 ▲1 ❖3⎤
    ⎣ ⭑

Every styled piece goes through ``paint`` exactly once; the assembled string
is a plain concatenation of painted segments.
"""

from typing import Final, assert_never

from rich.style import Style

from ps1._styled import Shell, paint
from ps1.git import Branch, Hash, Status

BRACKET_STYLE: Final = Style(color="white")
ERROR_STYLE: Final = Style(color="red", bold=True)
HOSTNAME_STYLE: Final = Style(color="green", bold=True)
CWD_STYLE: Final = Style(color="green")
DURATION_STYLE: Final = Style(color="yellow", bold=True)
BRANCH_STYLE: Final = Style(color="blue", bold=True)
HASH_STYLE: Final = Style(color="yellow", bold=True)
CLEAN_STYLE: Final = Style(color="green", bold=True)
DIRTY_STYLE: Final = Style(color="red", bold=True)
DIVERGENCE_STYLE: Final = Style(color="red")
UNTRACKED_STYLE: Final = Style(color="yellow")
ROOT_CHAR_STYLE: Final = Style(color="red", bold=True)
USER_CHAR_STYLE: Final = Style(color="red")

ERROR_ICON: Final = "💥"
OPEN_BRACKET: Final = "⎡"
CLOSE_BRACKET: Final = "⎤"
PROMPT_BRACKET: Final = "⎣"
ROOT_CHAR: Final = "#"
USER_CHAR: Final = "⭑"
CLEAN_GLYPH: Final = "✓"
DIRTY_GLYPH: Final = "±"
AHEAD_GLYPH: Final = "▲"
BEHIND_GLYPH: Final = "▼"
UNTRACKED_GLYPH: Final = "❖"
CURSOR_SPACING: Final = "\u00a0\u00a0"


def render_git_status(status: Status, shell: Shell = Shell.ZSH) -> str:
    """Render the git segment: ref name, dirty marker, divergence, untracked.

    Args:
        status: Collected repository state.
        shell: Shell whose zero-width markers to use.

    Returns:
        The painted segment, with no leading or trailing space.
    """
    match status.ref_name:
        case Branch(name=name):
            parts = [paint(BRANCH_STYLE, name, shell)]
        case Hash(commit_id=commit_id):
            parts = [paint(HASH_STYLE, commit_id, shell)]
        case _:
            assert_never(status.ref_name)

    files = status.files
    if files.uncommitted_files == 0:
        parts.append(paint(CLEAN_STYLE, f" {CLEAN_GLYPH}", shell))
    else:
        parts.append(
            paint(DIRTY_STYLE, f" {DIRTY_GLYPH}{files.uncommitted_files}", shell)
        )

    upstream = status.upstream
    if upstream is not None:
        if upstream.commits_ahead > 0:
            parts.append(
                paint(
                    DIVERGENCE_STYLE, f" {AHEAD_GLYPH}{upstream.commits_ahead}", shell
                )
            )
        if upstream.commits_behind > 0:
            parts.append(
                paint(
                    DIVERGENCE_STYLE, f" {BEHIND_GLYPH}{upstream.commits_behind}", shell
                )
            )

    if files.untracked_files > 0:
        parts.append(
            paint(UNTRACKED_STYLE, f" {UNTRACKED_GLYPH}{files.untracked_files}", shell)
        )

    return "".join(parts)


def render_prompt(  # noqa: PLR0913
    *,
    hostname: str,
    cwd: str,
    last_exit_code: str | int,
    duration: str | None = None,
    git_status: str | None = None,
    privileged: bool = False,
    shell: Shell = Shell.ZSH,
) -> str:
    """Assemble the full prompt.

    Args:
        hostname: Host name shown in bold.
        cwd: Already shortened working directory.
        last_exit_code: Exit code of the previous command; anything other
            than ``"0"`` adds the error line.
        duration: Formatted duration of the previous command, if known.
        git_status: Output of ``render_git_status``, if in a repository.
        privileged: Whether the user is root.
        shell: Shell whose zero-width markers to use.

    Returns:
        The prompt string. It ends with cursor spacing, not a newline.
    """
    parts: list[str] = []

    if str(last_exit_code) != "0":
        parts.append(f"{ERROR_ICON} ")
        parts.append(paint(ERROR_STYLE, f"[{last_exit_code}]", shell))

    parts.append("\n")
    parts.append(paint(BRACKET_STYLE, OPEN_BRACKET, shell))
    parts.append(" ")
    parts.append(paint(HOSTNAME_STYLE, hostname, shell))
    parts.append(" ")
    parts.append(paint(CWD_STYLE, cwd, shell))
    if duration is not None:
        parts.append(" ")
        parts.append(paint(DURATION_STYLE, duration, shell))
    if git_status is not None:
        parts.append(" ")
        parts.append(git_status)
    parts.append(paint(BRACKET_STYLE, CLOSE_BRACKET, shell))

    prompt_char = (
        paint(ROOT_CHAR_STYLE, ROOT_CHAR, shell)
        if privileged
        else paint(USER_CHAR_STYLE, USER_CHAR, shell)
    )
    parts.append("\n")
    parts.append(paint(BRACKET_STYLE, PROMPT_BRACKET, shell))
    parts.append(" ")
    parts.append(prompt_char)
    parts.append(CURSOR_SPACING)

    return "".join(parts)
