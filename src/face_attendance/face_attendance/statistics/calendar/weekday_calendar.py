from __future__ import annotations

from datetime import date
from typing import Iterable

from .base import WorkingCalendar


class WeekdayCalendar(WorkingCalendar):
    """Every day is a working day except the configured weekdays (Mon=0 .. Sun=6)."""

    def __init__(self, non_working_weekdays: Iterable[int] = ()):
        self._off = frozenset(int(d) for d in non_working_weekdays)

    @property
    def non_working_weekdays(self) -> frozenset:
        return self._off

    def is_working_day(self, day: date) -> bool:
        return day.weekday() not in self._off
