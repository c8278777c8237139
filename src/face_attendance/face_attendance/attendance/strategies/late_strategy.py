from __future__ import annotations

from datetime import datetime, time

from ...core.enums import Punctuality
from .base import PunctualityDecision, PunctualityStrategy, minutes_between


class LateStrategy(PunctualityStrategy):
    """Check-in after the late cutoff."""

    def decide_checkin(self, *, now: datetime, workday_start: time, late_cutoff: time) -> PunctualityDecision:
        start = datetime.combine(now.date(), workday_start)
        return PunctualityDecision(
            punctuality=Punctuality.LATE,
            note=f"Late by {minutes_between(start, now)} min",
        )
