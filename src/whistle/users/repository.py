from __future__ import annotations

from typing import Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_session_token(self, session_token: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, email: str, password_hash: str, session_token: Optional[str] = None) -> int:
        raise NotImplementedError

    def set_session_token(self, user_id: int, session_token: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        """Owned time entries go with the user (cascade)."""

        raise NotImplementedError
