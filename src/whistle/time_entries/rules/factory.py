from __future__ import annotations

from dataclasses import dataclass

from .base import ClockRule
from .unrestricted import UnrestrictedRule
from .weekend_blackout import WeekendBlackoutRule


@dataclass
class ClockRuleFactory:
    """Factory Pattern: choose the clock rule from settings."""

    blackout_enabled: bool = True

    def create(self) -> ClockRule:
        if self.blackout_enabled:
            return WeekendBlackoutRule()
        return UnrestrictedRule()
