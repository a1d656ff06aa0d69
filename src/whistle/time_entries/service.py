from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import ensure_utc, now_utc
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import MAX_TIMEZONE_LENGTH
from ..core.exceptions import AlreadyClockedIn, ClockInBlocked, ClockOutBlocked, NotClockedIn
from .calculator.base import ShiftCalculator
from .calculator.capped_calculator import CappedShiftCalculator
from .model import TimeEntry
from .repository import TimeEntryRepository
from .rules.base import ClockRule
from .rules.weekend_blackout import WeekendBlackoutRule

logger = logging.getLogger(__name__)


class SessionService:
    """Open/closed state machine of a user's work session.

    NoSession --clock_in--> Open --clock_out | auto-timeout--> NoSession

    Holds no per-user state: every call reads the store and the clock.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        *,
        rule: ClockRule | None = None,
        calculator: ShiftCalculator | None = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._entries = entries
        self._rule = rule or WeekendBlackoutRule()
        self._calculator = calculator or CappedShiftCalculator()
        self._clock = clock

    def _now(self, now: datetime | None) -> datetime:
        return ensure_utc(now or self._clock())

    def clock_in(self, user_id: int, timezone_name, *, now: datetime | None = None) -> TimeEntry:
        now = self._now(now)
        timezone_name = require_non_empty(timezone_name, "Timezone")
        require_max_length(timezone_name, "Timezone", MAX_TIMEZONE_LENGTH)

        # zone sent with this request
        decision = self._rule.evaluate(timezone_name=timezone_name, instant=now)
        if decision.restricted:
            raise ClockInBlocked(decision.reason)

        if self._entries.find_open_entry(user_id):
            raise AlreadyClockedIn()

        # insert_entry also raises AlreadyClockedIn if a concurrent clock-in won
        entry = self._entries.insert_entry(user_id=user_id, start_time=now, start_timezone=timezone_name)
        logger.info("User %s clocked in (entry %s, tz=%s)", user_id, entry.entry_id, timezone_name)
        return entry

    def clock_out(self, user_id: int, *, now: datetime | None = None, is_automatic: bool = False) -> TimeEntry:
        now = self._now(now)

        entry = self._entries.find_open_entry(user_id)
        if not entry:
            raise NotClockedIn()

        if not is_automatic:
            # zone captured at clock-in
            decision = self._rule.evaluate(timezone_name=entry.start_timezone, instant=now)
            if decision.restricted:
                raise ClockOutBlocked(decision.reason)

        closed = self._close(entry, now)
        if closed is None:
            # closed by a concurrent request between the read and the update
            raise NotClockedIn()

        logger.info(
            "User %s clocked out (entry %s, %.2fh%s)",
            user_id,
            closed.entry_id,
            closed.duration_hours(),
            ", automatic" if is_automatic else "",
        )
        return closed

    def expire_stale_session(self, user_id: int, *, now: datetime | None = None) -> Optional[TimeEntry]:
        """Close the open entry if it has reached the maximum shift.

        Runs at the top of every status/aggregation read. Returns the entry it
        closed, or None when nothing was written.
        """

        now = self._now(now)
        entry = self._entries.find_open_entry(user_id)
        if not entry or not self._calculator.is_expired(start_time=entry.start_time, now=now):
            return None

        closed = self._close(entry, now)
        if closed is not None:
            logger.info("Auto-closed entry %s of user %s at %s", closed.entry_id, user_id, closed.end_time)
        return closed

    def current_session(self, user_id: int, *, now: datetime | None = None) -> Optional[TimeEntry]:
        now = self._now(now)
        self.expire_stale_session(user_id, now=now)
        return self._entries.find_open_entry(user_id)

    def _close(self, entry: TimeEntry, now: datetime) -> Optional[TimeEntry]:
        end_time = self._calculator.closing_time(start_time=entry.start_time, now=now)
        return self._entries.close_entry(entry_id=entry.entry_id, end_time=end_time)
