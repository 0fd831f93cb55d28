"""Human-readable formatting of times, byte counts and bitrates."""

from datetime import datetime, timezone

_TIME_UNITS = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_time_ago(when: datetime | float, now: datetime | None = None) -> str:
    """
    Format a point in time relative to now, e.g. ``"3 minutes ago"``.

    Args:
        when: An aware datetime or a Unix timestamp in seconds.
        now: Reference time. Defaults to the current UTC time.
    """
    if not isinstance(when, datetime):
        when = datetime.fromtimestamp(when, tz=timezone.utc)
    if now is None:
        now = datetime.now(tz=timezone.utc)

    # Clock skew can put the start slightly in the future
    elapsed = max(0, int((now - when).total_seconds()))
    for unit, size in _TIME_UNITS:
        if elapsed >= size:
            return f"{_plural(elapsed // size, unit)} ago"
    return f"{_plural(elapsed, 'second')} ago"


def _scale(value: int, step: int, units: list[str]) -> str:
    scaled = float(value)
    for unit in units[:-1]:
        if unit == units[0]:
            if abs(value) < step:
                return f"{value} {unit}"
        # Promote when one decimal would round up to the next unit
        elif abs(round(scaled, 1)) < step:
            return f"{scaled:.1f} {unit}"
        scaled = scaled / step
    return f"{scaled:.1f} {units[-1]}"


def format_bytes(size: int) -> str:
    """Format a byte count with binary prefixes (``1.5 MiB``)."""
    return _scale(size, 1024, ["B", "KiB", "MiB", "GiB", "TiB", "PiB"])


def format_bitrate(bits_per_second: int) -> str:
    """Format a bitrate with decimal prefixes (``2.4 Mbit/s``)."""
    return _scale(bits_per_second, 1000, ["bit/s", "kbit/s", "Mbit/s", "Gbit/s", "Tbit/s"])
