from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from whistle.core.exceptions import AlreadyClockedIn
from whistle.time_entries.model import TimeEntry
from whistle.users.model import User


class InMemoryUsers:
    def __init__(self, on_delete=None):
        self._by_id: dict[int, User] = {}
        self._id = 0
        # stands in for ON DELETE CASCADE
        self.on_delete = on_delete

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.email == email), None)

    def get_by_session_token(self, session_token: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.session_token == session_token), None)

    def create_user(self, *, email: str, password_hash: str, session_token=None) -> int:
        self._id += 1
        self._by_id[self._id] = User(
            user_id=self._id,
            email=email,
            password_hash=password_hash,
            session_token=session_token,
        )
        return self._id

    def set_session_token(self, user_id: int, session_token) -> bool:
        user = self._by_id.get(user_id)
        if not user:
            return False
        self._by_id[user_id] = User(
            user_id=user.user_id,
            email=user.email,
            password_hash=user.password_hash,
            session_token=session_token,
            created_at=user.created_at,
        )
        return True

    def delete_by_id(self, user_id: int) -> bool:
        if self._by_id.pop(user_id, None) is None:
            return False
        if self.on_delete:
            self.on_delete(user_id)
        return True


class InMemoryTimeEntries:
    """Mirrors the MySQL contract, including the one-open-entry unique key."""

    def __init__(self):
        self.entries: dict[int, TimeEntry] = {}
        self.close_calls = 0
        self._id = 0

    def add_closed(self, user_id: int, start: datetime, end: datetime, tz: str = "UTC") -> TimeEntry:
        self._id += 1
        entry = TimeEntry(entry_id=self._id, user_id=user_id, start_time=start, end_time=end, start_timezone=tz)
        self.entries[self._id] = entry
        return entry

    def open_entries(self, user_id: int) -> list[TimeEntry]:
        return [e for e in self.entries.values() if e.user_id == user_id and e.end_time is None]

    def find_open_entry(self, user_id: int) -> Optional[TimeEntry]:
        items = self.open_entries(user_id)
        return items[0] if items else None

    def insert_entry(self, *, user_id: int, start_time: datetime, start_timezone: str) -> TimeEntry:
        if self.open_entries(user_id):
            raise AlreadyClockedIn()
        self._id += 1
        entry = TimeEntry(
            entry_id=self._id,
            user_id=user_id,
            start_time=start_time,
            end_time=None,
            start_timezone=start_timezone,
        )
        self.entries[self._id] = entry
        return entry

    def close_entry(self, *, entry_id: int, end_time: datetime) -> Optional[TimeEntry]:
        entry = self.entries.get(entry_id)
        if not entry or entry.end_time is not None:
            return None
        self.close_calls += 1
        closed = TimeEntry(
            entry_id=entry.entry_id,
            user_id=entry.user_id,
            start_time=entry.start_time,
            end_time=end_time,
            start_timezone=entry.start_timezone,
        )
        self.entries[entry_id] = closed
        return closed

    def _closed_in_range(self, user_id: int, start: datetime, end: datetime) -> list[TimeEntry]:
        return [
            e
            for e in self.entries.values()
            if e.user_id == user_id and e.end_time is not None and start <= e.start_time < end
        ]

    def sum_hours_in_range(self, *, user_id: int, start: datetime, end: datetime) -> float:
        return sum((e.end_time - e.start_time).total_seconds() / 3600 for e in self._closed_in_range(user_id, start, end))

    def sum_hours_grouped_by_date(self, *, user_id: int, start: datetime, end: datetime) -> dict[date, float]:
        out: dict[date, float] = {}
        for e in self._closed_in_range(user_id, start, end):
            day = e.start_time.astimezone(timezone.utc).date()
            out[day] = out.get(day, 0.0) + (e.end_time - e.start_time).total_seconds() / 3600
        return out

    def list_closed_entries(self, user_id: int):
        items = [e for e in self.entries.values() if e.user_id == user_id and e.end_time is not None]
        return sorted(items, key=lambda e: e.start_time, reverse=True)

    def delete_for_user(self, user_id: int) -> None:
        self.entries = {k: v for k, v in self.entries.items() if v.user_id != user_id}


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return utc(2024, 6, 3, 9, 0, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def entries_repo() -> InMemoryTimeEntries:
    return InMemoryTimeEntries()


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)
