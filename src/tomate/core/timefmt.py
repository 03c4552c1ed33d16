"""Parsing and formatting of durations."""

import re
from datetime import timedelta

DURATION_RE = re.compile(r"^(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$")


def parse_duration(value: str) -> timedelta:
    """Parse a duration like "25m", "1h30m" or "22m30s".

    Args:
        value: Hours, minutes and seconds sections, each optional.

    Returns:
        The parsed duration.

    Raises:
        ValueError: If the string doesn't match or is zero.
    """
    match = DURATION_RE.match(value.strip())
    if not value.strip() or match is None:
        raise ValueError(
            f"Invalid duration {value!r}, format is <HOURS>h<MINUTES>m<SECONDS>s "
            "(each section is optional), example: 22m30s"
        )

    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    duration = timedelta(hours=hours, minutes=minutes, seconds=seconds)
    if duration <= timedelta(0):
        raise ValueError(f"Duration {value!r} must be longer than zero")
    return duration


def _split(delta: timedelta) -> tuple[int, int, int]:
    total = max(0, int(delta.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return hours, minutes, seconds


def format_kitchen(delta: timedelta) -> str:
    """Format as a kitchen timer: mm:ss, or hh:mm:ss past an hour."""
    hours, minutes, seconds = _split(delta)
    if hours > 0:
        return f"{hours:02}:{minutes:02}:{seconds:02}"
    return f"{minutes:02}:{seconds:02}"


def format_human(delta: timedelta) -> str:
    """Format compactly, e.g. "1h5m" or "22m30s"."""
    hours, minutes, seconds = _split(delta)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds}s")
    return "".join(parts) or "0s"
