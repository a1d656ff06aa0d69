from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Domain entity: an account.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    email: str
    password_hash: str
    session_token: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_public(self) -> dict:
        return {"id": self.user_id, "email": self.email}
