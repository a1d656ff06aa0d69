from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import hours_between, round_hours


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one work session.

    `end_time` is None while the session is open. Timestamps are aware UTC.
    """

    entry_id: int
    user_id: int
    start_time: datetime
    end_time: Optional[datetime]
    start_timezone: str

    def elapsed_seconds(self, now: datetime) -> int:
        return int((now - self.start_time).total_seconds())

    def duration_hours(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return round_hours(hours_between(self.start_time, self.end_time))
