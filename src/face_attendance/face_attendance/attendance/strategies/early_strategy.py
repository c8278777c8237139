from __future__ import annotations

from datetime import datetime, time

from ...core.enums import Punctuality
from .base import PunctualityDecision, PunctualityStrategy, minutes_between


class EarlyStrategy(PunctualityStrategy):
    """Check-in before the workday starts."""

    def decide_checkin(self, *, now: datetime, workday_start: time, late_cutoff: time) -> PunctualityDecision:
        start = datetime.combine(now.date(), workday_start)
        return PunctualityDecision(
            punctuality=Punctuality.EARLY,
            note=f"Early by {minutes_between(now, start)} min",
        )
