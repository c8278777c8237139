from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ...core.enums import Punctuality


@dataclass(frozen=True)
class PunctualityDecision:
    punctuality: Punctuality
    note: Optional[str] = None


class PunctualityStrategy(ABC):
    """Strategy Pattern: encapsulate how a check-in instant is classified."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, workday_start: time, late_cutoff: time) -> PunctualityDecision:
        raise NotImplementedError


def minutes_between(earlier: datetime, later: datetime) -> int:
    """Whole minutes from earlier to later; a started minute counts."""
    return math.ceil((later - earlier).total_seconds() / 60)
