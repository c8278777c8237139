from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Tuple, Union

from ..core.exceptions import ValidationError


def parse_clock(value: Union[str, time]) -> time:
    """Parse "HH:MM" or "HH:MM:SS" into a time of day."""
    if isinstance(value, time):
        return value
    text = str(value).strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid clock time: {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """[00:00, next day 00:00) of a local calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def month_start(now: datetime) -> datetime:
    return datetime.combine(now.date().replace(day=1), time.min)
