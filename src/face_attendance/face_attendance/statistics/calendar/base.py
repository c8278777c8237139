from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date


class WorkingCalendar(ABC):
    """Calendar rule interface (Strategy Pattern for expected presence days)."""

    @abstractmethod
    def is_working_day(self, day: date) -> bool:
        raise NotImplementedError
