from __future__ import annotations

from typing import Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, from_mysql_datetime
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, email, password_hash, session_token, created_at"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        session_token=row.get("session_token"),
        created_at=from_mysql_datetime(row.get("created_at")),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_session_token(self, session_token: str) -> Optional[User]:
        return self._get_one("session_token", session_token)

    def create_user(self, *, email: str, password_hash: str, session_token: Optional[str] = None) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(email, password_hash, session_token)
                    VALUES(%s,%s,%s)
                    """,
                    (email, password_hash, session_token),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise ValidationError("An account with this email already exists.") from exc
            raise

    def set_session_token(self, user_id: int, session_token: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET session_token=%s WHERE user_id=%s",
                (session_token, int(user_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
