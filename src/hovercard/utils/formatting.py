"""Date and number formatting used in popup detail rows."""

from __future__ import annotations

from datetime import datetime, timezone

_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def format_date(moment: datetime) -> str:
    """``Sat Sep 08 2001`` style, in UTC."""
    return moment.astimezone(timezone.utc).strftime("%a %b %d %Y")


def format_date_diff(moment: datetime, now: datetime | None = None) -> str:
    """Largest whole unit between ``moment`` and ``now``, e.g. ``12 years ago``."""
    reference = now or datetime.now(timezone.utc)
    seconds = int((reference - moment).total_seconds())
    future = seconds < 0
    seconds = abs(seconds)
    for name, size in _UNITS:
        amount = seconds // size
        if amount >= 1:
            label = name if amount == 1 else f"{name}s"
            return f"in {amount} {label}" if future else f"{amount} {label} ago"
    return "just now"


def format_number(value: int | float | None) -> str:
    if value is None:
        return "0"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}"


def from_timestamp(seconds: float) -> datetime:
    return datetime.fromtimestamp(float(seconds), tz=timezone.utc)
