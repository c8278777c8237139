from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from .strategies.base import PunctualityStrategy
from .strategies.early_strategy import EarlyStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class PunctualityStrategyFactory:
    """Factory Pattern: choose the punctuality strategy for a local check-in time."""

    def for_checkin(self, *, now: datetime, workday_start: time, late_cutoff: time) -> PunctualityStrategy:
        start = datetime.combine(now.date(), workday_start)
        cutoff = datetime.combine(now.date(), late_cutoff)

        if now < start:
            return EarlyStrategy()
        if now <= cutoff:
            return OnTimeStrategy()
        return LateStrategy()
