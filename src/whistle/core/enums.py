from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Semantic error codes returned to API clients."""

    UNAUTHENTICATED = "Unauthenticated"
    INVALID_INPUT = "InvalidInput"
    ALREADY_CLOCKED_IN = "AlreadyClockedIn"
    NOT_CLOCKED_IN = "NotClockedIn"
    CLOCK_IN_BLOCKED = "ClockInBlocked"
    CLOCK_OUT_BLOCKED = "ClockOutBlocked"

