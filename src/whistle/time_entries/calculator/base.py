from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class ShiftCalculator(ABC):
    """Calculator interface: where a session ends when it is closed."""

    @abstractmethod
    def closing_time(self, *, start_time: datetime, now: datetime) -> datetime:
        raise NotImplementedError

    @abstractmethod
    def is_expired(self, *, start_time: datetime, now: datetime) -> bool:
        raise NotImplementedError
