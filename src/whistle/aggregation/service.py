from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import ensure_utc, format_date, now_utc, round_hours, to_iso, year_bounds
from ..time_entries.model import TimeEntry
from ..time_entries.repository import TimeEntryRepository
from ..time_entries.service import SessionService

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@dataclass(frozen=True)
class StatusView:
    is_working: bool
    current_session: Optional[dict]
    year_total_hours: float

    def to_dict(self) -> dict:
        return {
            "is_working": self.is_working,
            "current_session": self.current_session,
            "year_total_hours": self.year_total_hours,
        }


class AggregationService:
    """Read-only views over completed sessions.

    Years and days are UTC buckets keyed by start_time; an entry that crosses
    midnight counts wholly towards the day it started. Open entries never count.
    Every public read first lets the session service close an expired entry.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        sessions: SessionService,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._entries = entries
        self._sessions = sessions
        self._clock = clock

    @staticmethod
    def current_elapsed(entry: TimeEntry, now: datetime) -> int:
        return entry.elapsed_seconds(ensure_utc(now))

    def year_total(self, user_id: int, year: int, *, now: datetime | None = None) -> float:
        self._sessions.expire_stale_session(user_id, now=ensure_utc(now or self._clock()))
        start, end = year_bounds(year)
        return round_hours(self._entries.sum_hours_in_range(user_id=user_id, start=start, end=end))

    def heatmap(self, user_id: int, year: int, *, now: datetime | None = None) -> dict[str, float]:
        self._sessions.expire_stale_session(user_id, now=ensure_utc(now or self._clock()))
        start, end = year_bounds(year)
        grouped = self._entries.sum_hours_grouped_by_date(user_id=user_id, start=start, end=end)
        return {format_date(day): round_hours(hours) for day, hours in sorted(grouped.items())}

    def status(self, user_id: int, *, now: datetime | None = None) -> StatusView:
        now = ensure_utc(now or self._clock())
        entry = self._sessions.current_session(user_id, now=now)

        current = None
        if entry:
            current = {
                "id": entry.entry_id,
                "start_time": to_iso(entry.start_time),
                "timezone": entry.start_timezone,
                "elapsed_seconds": self.current_elapsed(entry, now),
            }

        return StatusView(
            is_working=entry is not None,
            current_session=current,
            year_total_hours=self.year_total(user_id, now.year, now=now),
        )

    def heatmap_view(self, user_id: int, *, now: datetime | None = None) -> dict:
        now = ensure_utc(now or self._clock())
        return {"year": now.year, "days": self.heatmap(user_id, now.year, now=now)}

    def list_entries(self, user_id: int, *, now: datetime | None = None) -> list[dict]:
        """Completed sessions, newest first, formatted in UTC."""

        now = ensure_utc(now or self._clock())
        self._sessions.expire_stale_session(user_id, now=now)
        return [self._to_row(e) for e in self._entries.list_closed_entries(user_id)]

    def _to_row(self, e: TimeEntry) -> dict:
        start = ensure_utc(e.start_time)
        end = ensure_utc(e.end_time)
        return {
            "id": e.entry_id,
            "date": format_date(start.date()),
            "day_of_week": DAY_NAMES[start.weekday()],
            "start_time": start.strftime("%H:%M"),
            "end_time": end.strftime("%H:%M"),
            "duration_hours": e.duration_hours(),
        }
