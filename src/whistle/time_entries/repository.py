from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import TimeEntry


class TimeEntryRepository(Protocol):
    def find_open_entry(self, user_id: int) -> Optional[TimeEntry]:
        """At most one result."""

        raise NotImplementedError

    def insert_entry(self, *, user_id: int, start_time: datetime, start_timezone: str) -> TimeEntry:
        """Create an open entry.

        Raises AlreadyClockedIn when another open entry already exists for the user.
        """

        raise NotImplementedError

    def close_entry(self, *, entry_id: int, end_time: datetime) -> Optional[TimeEntry]:
        """Set end_time on an entry that is still open.

        Returns None if the entry was already closed (no write happens).
        """

        raise NotImplementedError

    def sum_hours_in_range(self, *, user_id: int, start: datetime, end: datetime) -> float:
        """Hours over closed entries whose start_time is in [start, end)."""

        raise NotImplementedError

    def sum_hours_grouped_by_date(self, *, user_id: int, start: datetime, end: datetime) -> dict[date, float]:
        """Hours over closed entries in [start, end), keyed by UTC start date."""

        raise NotImplementedError

    def list_closed_entries(self, user_id: int) -> Sequence[TimeEntry]:
        """Closed entries, newest start first."""

        raise NotImplementedError
