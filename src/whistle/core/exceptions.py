from __future__ import annotations

from .enums import ErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""

    code: ErrorCode = ErrorCode.INVALID_INPUT
    default_message = "Invalid request."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when no user can be resolved or credentials are invalid."""

    code = ErrorCode.UNAUTHENTICATED
    default_message = "You must be logged in."


class AlreadyClockedIn(DomainError):
    code = ErrorCode.ALREADY_CLOCKED_IN
    default_message = "You are already clocked in."


class NotClockedIn(DomainError):
    code = ErrorCode.NOT_CLOCKED_IN
    default_message = "You are not currently clocked in."


class ClockInBlocked(DomainError):
    """Raised when the blackout rule forbids starting a session."""

    code = ErrorCode.CLOCK_IN_BLOCKED
    default_message = "Clocking in is not allowed right now."


class ClockOutBlocked(DomainError):
    """Raised when the blackout rule forbids a manual clock-out."""

    code = ErrorCode.CLOCK_OUT_BLOCKED
    default_message = "Clocking out is not allowed right now."
