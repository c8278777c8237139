from datetime import datetime, time

import pytest

from src.face_attendance.face_attendance.attendance.factory import PunctualityStrategyFactory
from src.face_attendance.face_attendance.attendance.strategies.early_strategy import EarlyStrategy
from src.face_attendance.face_attendance.attendance.strategies.late_strategy import LateStrategy
from src.face_attendance.face_attendance.attendance.strategies.on_time_strategy import OnTimeStrategy
from src.face_attendance.face_attendance.core.enums import Punctuality

START = time(8, 0)
CUTOFF = time(8, 15)


@pytest.mark.parametrize(
    "clock, expected",
    [
        (time(7, 59), EarlyStrategy),
        (time(8, 0), OnTimeStrategy),
        (time(8, 10), OnTimeStrategy),
        (time(8, 15), OnTimeStrategy),
        (time(8, 15, 1), LateStrategy),
        (time(8, 16), LateStrategy),
    ],
)
def test_factory_picks_strategy_by_clock(clock, expected):
    now = datetime.combine(datetime(2025, 3, 12).date(), clock)
    strategy = PunctualityStrategyFactory().for_checkin(now=now, workday_start=START, late_cutoff=CUTOFF)
    assert isinstance(strategy, expected)


def test_late_decision_notes_minutes_after_start():
    now = datetime(2025, 3, 12, 8, 40)
    strategy = PunctualityStrategyFactory().for_checkin(now=now, workday_start=START, late_cutoff=CUTOFF)
    decision = strategy.decide_checkin(now=now, workday_start=START, late_cutoff=CUTOFF)
    assert decision.punctuality == Punctuality.LATE
    assert decision.note == "Late by 40 min"


def test_early_decision_notes_minutes_before_start():
    now = datetime(2025, 3, 12, 7, 30)
    strategy = PunctualityStrategyFactory().for_checkin(now=now, workday_start=START, late_cutoff=CUTOFF)
    decision = strategy.decide_checkin(now=now, workday_start=START, late_cutoff=CUTOFF)
    assert decision.punctuality == Punctuality.EARLY
    assert decision.note == "Early by 30 min"


def test_partial_minute_counts_in_note():
    factory = PunctualityStrategyFactory()

    early_at = datetime(2025, 3, 12, 7, 59, 30)
    early = factory.for_checkin(now=early_at, workday_start=START, late_cutoff=CUTOFF)
    assert early.decide_checkin(now=early_at, workday_start=START, late_cutoff=CUTOFF).note == "Early by 1 min"

    late_at = datetime(2025, 3, 12, 8, 15, 1)
    late = factory.for_checkin(now=late_at, workday_start=START, late_cutoff=CUTOFF)
    assert late.decide_checkin(now=late_at, workday_start=START, late_cutoff=CUTOFF).note == "Late by 16 min"
