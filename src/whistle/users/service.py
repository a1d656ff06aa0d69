from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import normalize_email, require_min_length
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


@dataclass(frozen=True)
class LoginResult:
    """What the controller stores into the Flask session after login."""

    user: User
    session_token: str


class AuthService:
    """Use cases: register, login, logout, resolve current user, delete account.

    A user holds a single session token. Logging in again overwrites it, which
    invalidates any session opened earlier on another device.
    """

    def __init__(self, users: UserRepository, *, token_factory: Callable[[], str] = new_session_token):
        self._users = users
        self._token_factory = token_factory

    def register(self, email, password) -> LoginResult:
        email = normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists.")

        token = self._token_factory()
        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            session_token=token,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise RuntimeError(f"User {user_id} vanished right after registration")

        logger.info("Registered user %s", user_id)
        return LoginResult(user=user, session_token=token)

    def authenticate(self, email, password) -> LoginResult:
        if not isinstance(email, str) or not email.strip() or not isinstance(password, str) or not password:
            raise ValidationError("Email and password are required.")

        user = self._users.get_by_email(email.strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password.")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # unknown hash method stored in the row
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password.")

        token = self._token_factory()
        self._users.set_session_token(user.user_id, token)
        return LoginResult(user=user, session_token=token)

    def current_user(self, session_token: Optional[str]) -> Optional[User]:
        if not session_token:
            return None
        return self._users.get_by_session_token(session_token)

    def logout(self, session_token: Optional[str]) -> None:
        user = self.current_user(session_token)
        if user:
            self._users.set_session_token(user.user_id, None)

    def delete_account(self, user: User) -> None:
        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Account could not be deleted.")
        logger.info("Deleted user %s and their time entries", user.user_id)
