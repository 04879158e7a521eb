from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .checkins.locks import EmployeeLocks
from .checkins.mysql_checkin_repository import MySQLCheckInRepository
from .checkins.repository import CheckInRepository
from .checkins.service import CheckInService
from .clients.mysql_client_repository import MySQLClientRepository
from .clients.repository import ClientRepository
from .core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_WARNING_THRESHOLD_METERS
from .dashboard.service import DashboardService
from .database.connection import DatabaseConnection, DBConfig
from .reports.service import DailySummaryService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    clients_repo: ClientRepository
    checkins_repo: CheckInRepository

    auth_service: AuthService
    checkin_service: CheckInService
    dashboard_service: DashboardService
    daily_summary_service: DailySummaryService


def build_services(
    *,
    users_repo: UserRepository,
    clients_repo: ClientRepository,
    checkins_repo: CheckInRepository,
    conn: Optional[DatabaseConnection] = None,
    warning_threshold_m: float = DEFAULT_WARNING_THRESHOLD_METERS,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Container:
    return Container(
        conn=conn,
        users_repo=users_repo,
        clients_repo=clients_repo,
        checkins_repo=checkins_repo,
        auth_service=AuthService(users_repo),
        checkin_service=CheckInService(
            checkins_repo,
            clients_repo,
            warning_threshold_m=warning_threshold_m,
            history_limit=history_limit,
            locks=EmployeeLocks(),
        ),
        dashboard_service=DashboardService(users_repo, checkins_repo, clients_repo),
        daily_summary_service=DailySummaryService(users_repo, checkins_repo),
    )


def build_container(
    *,
    db_config: dict,
    warning_threshold_m: float = DEFAULT_WARNING_THRESHOLD_METERS,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        clients_repo=MySQLClientRepository(conn),
        checkins_repo=MySQLCheckInRepository(conn),
        conn=conn,
        warning_threshold_m=warning_threshold_m,
        history_limit=history_limit,
    )
