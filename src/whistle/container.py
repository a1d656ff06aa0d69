from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .aggregation.service import AggregationService
from .common.datetime_utils import now_utc
from .core.constants import MAX_SHIFT_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .time_entries.calculator.capped_calculator import CappedShiftCalculator
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.rules.factory import ClockRuleFactory
from .time_entries.service import SessionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    session_service: SessionService
    aggregation_service: AggregationService


def wire_services(
    *,
    users_repo: UserRepository,
    entries_repo: TimeEntryRepository,
    clock: Callable[[], datetime] = now_utc,
    max_shift_hours: int | float = MAX_SHIFT_HOURS,
    blackout_enabled: bool = True,
) -> Container:
    session_service = SessionService(
        entries_repo,
        rule=ClockRuleFactory(blackout_enabled=blackout_enabled).create(),
        calculator=CappedShiftCalculator(max_shift_hours),
        clock=clock,
    )
    aggregation_service = AggregationService(entries_repo, session_service, clock=clock)

    return Container(
        auth_service=AuthService(users_repo),
        session_service=session_service,
        aggregation_service=aggregation_service,
    )


def build_container(
    *,
    db_config: dict,
    max_shift_hours: int | float = MAX_SHIFT_HOURS,
    blackout_enabled: bool = True,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        entries_repo=MySQLTimeEntryRepository(conn),
        max_shift_hours=max_shift_hours,
        blackout_enabled=blackout_enabled,
    )
