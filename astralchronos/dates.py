"""
Date helpers shared by the hero banner, the calendar and the webhook payloads.
"""
import calendar
from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December"
]

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def month_day_key(day: date) -> str:
    """Zero padded 'MM-DD' key used to index the event fixtures."""
    return f"{day.month:02d}-{day.day:02d}"


def build_month_grid(year: int, month: int) -> List[Optional[date]]:
    """
    Cells for a Sunday-first month view.

    Leading cells before the first of the month are None; there is no
    trailing padding after the last day.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    first_weekday, days_in_month = calendar.monthrange(year, month)
    # monthrange counts Monday as 0
    leading = (first_weekday + 1) % 7

    cells: List[Optional[date]] = [None] * leading
    cells.extend(date(year, month, day) for day in range(1, days_in_month + 1))
    return cells


def shift_month(year: int, month: int, direction: str) -> Tuple[int, int]:
    """Move one month back ('prev') or forward ('next')."""
    if direction == 'prev':
        return (year - 1, 12) if month == 1 else (year, month - 1)
    if direction == 'next':
        return (year + 1, 1) if month == 12 else (year, month + 1)
    raise ValueError(f"Unknown direction: {direction}")


def epoch_millis(moment: Optional[datetime] = None) -> int:
    """Milliseconds since the epoch, like the browser's Date.now()."""
    moment = moment or datetime.now(timezone.utc)
    return int(moment.timestamp() * 1000)


def relative_age(moment: datetime, now: Optional[datetime] = None) -> str:
    """Render '2 hours ago' style ages for news headlines."""
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    seconds = max(0, int((now - moment).total_seconds()))
    if seconds < 60:
        return "just now"

    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"


def parse_iso_datetime(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp, tolerating a trailing 'Z'."""
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (AttributeError, ValueError):
        return None


def format_long_date(day: date) -> str:
    """Format a date as 'July 20, 1969'."""
    return f"{MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"
