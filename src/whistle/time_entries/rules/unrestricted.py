from __future__ import annotations

from datetime import datetime

from .base import ALLOWED, ClockRule, RuleDecision


class UnrestrictedRule(ClockRule):
    """Never blocks. Installed when BLACKOUT_ENABLED is off."""

    def evaluate(self, *, timezone_name: str, instant: datetime) -> RuleDecision:
        return ALLOWED
