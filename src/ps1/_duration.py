"""Human-readable formatting of command durations."""

from datetime import timedelta

_NANOS_PER_MICRO = 1_000
_NANOS_PER_MILLI = 1_000_000
_NANOS_PER_SECOND = 1_000_000_000

_SECONDS_BUCKET_LIMIT = 2 * 60
_MINUTES_BUCKET_LIMIT = 2 * 60 * 60


def _to_nanos(duration: int | timedelta) -> int:
    if isinstance(duration, timedelta):
        whole_seconds = duration.days * 86_400 + duration.seconds
        return whole_seconds * _NANOS_PER_SECOND + duration.microseconds * 1_000
    return duration


def format_duration(duration: int | timedelta) -> str:
    """Format a duration using the coarsest unit that keeps it readable.

    Each bucket is chosen by the whole count of its own unit, so exactly
    1000ns lands in the microsecond bucket as ``1µs``.

    Args:
        duration: Either a timedelta or an integer number of nanoseconds.

    Returns:
        A string such as ``42ns``, ``230ms``, ``42.23s``, ``7:02min`` or
        ``11:43:50h``.

    Raises:
        ValueError: If the duration is negative.

    Examples:
        >>> format_duration(timedelta(milliseconds=42230))
        '42.23s'
        >>> format_duration(timedelta(seconds=4223))
        '70:23min'
    """
    nanos = _to_nanos(duration)
    if nanos < 0:
        msg = f"Duration must not be negative, got {nanos}ns"
        raise ValueError(msg)

    if nanos < 1_000:
        return f"{nanos}ns"
    if nanos // _NANOS_PER_MICRO < 1_000:
        return f"{nanos // _NANOS_PER_MICRO}µs"
    if nanos // _NANOS_PER_MILLI < 1_000:
        return f"{nanos // _NANOS_PER_MILLI}ms"

    seconds = nanos // _NANOS_PER_SECOND
    if seconds < _SECONDS_BUCKET_LIMIT:
        # Hundredths are truncated, never rounded up into the next bucket
        centis = nanos // (_NANOS_PER_SECOND // 100)
        return f"{centis // 100}.{centis % 100:02}s"
    if seconds < _MINUTES_BUCKET_LIMIT:
        return f"{seconds // 60}:{seconds % 60:02}min"

    hours = seconds // 3600
    mins = (seconds // 60) % 60
    secs = seconds % 60
    return f"{hours}:{mins:02}:{secs:02}h"


def format_duration_ms(milliseconds: int) -> str:
    """Format a duration given in whole milliseconds."""
    return format_duration(milliseconds * _NANOS_PER_MILLI)
