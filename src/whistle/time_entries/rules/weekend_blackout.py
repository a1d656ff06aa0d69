from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...common.datetime_utils import ensure_utc
from ...core.constants import BLACKOUT_SATURDAY_FROM_HOUR
from .base import ALLOWED, ClockRule, RuleDecision

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


def resolve_zone(timezone_name: str) -> Optional[ZoneInfo]:
    """IANA name -> ZoneInfo, or None when the name is not a known zone."""
    if not timezone_name:
        return None
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
        return None


class WeekendBlackoutRule(ClockRule):
    """Blocks all of Sunday and Saturday from 18:00, in the given zone's local time.

    An unknown zone fails open: the user is not blocked.
    """

    def __init__(self, *, saturday_from_hour: int = BLACKOUT_SATURDAY_FROM_HOUR):
        self._saturday_from_hour = int(saturday_from_hour)

    def evaluate(self, *, timezone_name: str, instant: datetime) -> RuleDecision:
        zone = resolve_zone(timezone_name)
        if zone is None:
            logger.warning("Unknown timezone %r, blackout rule not applied", timezone_name)
            return ALLOWED

        local = ensure_utc(instant).astimezone(zone)
        weekday = local.weekday()

        if weekday == SUNDAY:
            return RuleDecision(restricted=True, reason="Time tracking is closed on Sundays.")
        if weekday == SATURDAY and local.hour >= self._saturday_from_hour:
            return RuleDecision(
                restricted=True,
                reason=f"Time tracking is closed on Saturdays from {self._saturday_from_hour}:00.",
            )
        return ALLOWED


def is_restricted(timezone_name: str, instant: datetime) -> tuple[bool, Optional[str]]:
    decision = WeekendBlackoutRule().evaluate(timezone_name=timezone_name, instant=instant)
    return decision.restricted, decision.reason
