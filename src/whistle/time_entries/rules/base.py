from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RuleDecision:
    restricted: bool
    reason: Optional[str] = None


ALLOWED = RuleDecision(restricted=False)


class ClockRule(ABC):
    """Strategy Pattern: decide whether clocking is allowed at an instant."""

    @abstractmethod
    def evaluate(self, *, timezone_name: str, instant: datetime) -> RuleDecision:
        raise NotImplementedError
