from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import ensure_utc
from ..core.exceptions import AlreadyClockedIn
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    from_mysql_datetime,
    normalize_mysql_date,
    to_mysql_datetime,
)
from .model import TimeEntry
from .repository import TimeEntryRepository

_ENTRY_COLUMNS = "entry_id, user_id, start_time, end_time, start_timezone"


def _row_to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        start_time=from_mysql_datetime(r["start_time"]),
        end_time=from_mysql_datetime(r.get("end_time")),
        start_timezone=r["start_timezone"],
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_open_entry(self, user_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM time_entries
                WHERE user_id=%s AND end_time IS NULL
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def insert_entry(self, *, user_id: int, start_time: datetime, start_timezone: str) -> TimeEntry:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_entries(user_id, start_time, start_timezone)
                    VALUES(%s,%s,%s)
                    """,
                    (int(user_id), to_mysql_datetime(start_time), start_timezone),
                )
                entry_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            # uq_time_entries_one_open: a concurrent clock-in won the race
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise AlreadyClockedIn() from exc
            raise

        return TimeEntry(
            entry_id=entry_id,
            user_id=int(user_id),
            start_time=ensure_utc(start_time),
            end_time=None,
            start_timezone=start_timezone,
        )

    def close_entry(self, *, entry_id: int, end_time: datetime) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET end_time=%s
                WHERE entry_id=%s AND end_time IS NULL
                """,
                (to_mysql_datetime(end_time), int(entry_id)),
            )
            if cur.rowcount == 0:
                return None

            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM time_entries WHERE entry_id=%s",
                (int(entry_id),),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def sum_hours_in_range(self, *, user_id: int, start: datetime, end: datetime) -> float:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(TIMESTAMPDIFF(MICROSECOND, start_time, end_time)), 0) / 3600000000 AS total_hours
                FROM time_entries
                WHERE user_id=%s
                  AND end_time IS NOT NULL
                  AND start_time >= %s
                  AND start_time < %s
                """,
                (int(user_id), to_mysql_datetime(start), to_mysql_datetime(end)),
            )
            r = fetchone(cur)
            return float(r["total_hours"]) if r and r["total_hours"] is not None else 0.0

    def sum_hours_grouped_by_date(self, *, user_id: int, start: datetime, end: datetime) -> dict[date, float]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DATE(start_time) AS work_date,
                       SUM(TIMESTAMPDIFF(MICROSECOND, start_time, end_time)) / 3600000000 AS total_hours
                FROM time_entries
                WHERE user_id=%s
                  AND end_time IS NOT NULL
                  AND start_time >= %s
                  AND start_time < %s
                GROUP BY DATE(start_time)
                ORDER BY work_date
                """,
                (int(user_id), to_mysql_datetime(start), to_mysql_datetime(end)),
            )
            return {normalize_mysql_date(r["work_date"]): float(r["total_hours"]) for r in fetchall(cur)}

    def list_closed_entries(self, user_id: int) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM time_entries
                WHERE user_id=%s AND end_time IS NOT NULL
                ORDER BY start_time DESC
                """,
                (int(user_id),),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]
