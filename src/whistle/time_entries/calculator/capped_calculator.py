from __future__ import annotations

from datetime import datetime, timedelta

from ...core.constants import MAX_SHIFT_HOURS
from .base import ShiftCalculator


class CappedShiftCalculator(ShiftCalculator):
    """A session never lasts longer than max_shift_hours.

    A forgotten clock-out keeps its real start time and is cut at start + cap.
    """

    def __init__(self, max_shift_hours: int | float = MAX_SHIFT_HOURS):
        if max_shift_hours <= 0:
            raise ValueError("max_shift_hours must be positive")
        self.max_shift = timedelta(hours=max_shift_hours)

    def closing_time(self, *, start_time: datetime, now: datetime) -> datetime:
        if now < start_time:
            return start_time
        if now - start_time > self.max_shift:
            return start_time + self.max_shift
        return now

    def is_expired(self, *, start_time: datetime, now: datetime) -> bool:
        return now - start_time >= self.max_shift
