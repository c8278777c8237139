from __future__ import annotations

from datetime import datetime, time

from ...core.enums import Punctuality
from .base import PunctualityDecision, PunctualityStrategy


class OnTimeStrategy(PunctualityStrategy):
    """Check-in between workday start and the late cutoff (both inclusive)."""

    def decide_checkin(self, *, now: datetime, workday_start: time, late_cutoff: time) -> PunctualityDecision:
        return PunctualityDecision(punctuality=Punctuality.ON_TIME)
