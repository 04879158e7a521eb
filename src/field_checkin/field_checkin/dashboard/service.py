from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..checkins.model import CheckInView
from ..checkins.repository import CheckInRepository
from ..clients.model import Client
from ..clients.repository import ClientRepository
from ..common.datetime_utils import now_local, session_hours
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import CheckInStatus
from ..core.exceptions import AuthorizationError
from ..users.model import User
from ..users.repository import UserRepository


@dataclass(frozen=True)
class TeamStats:
    total_employees: int
    active_checkins: int
    today_checkins: int

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "active_checkins": self.active_checkins,
            "today_checkins": self.today_checkins,
        }


@dataclass(frozen=True)
class EmployeeDetails:
    employee: User
    checkins: list[CheckInView]
    total_hours: float
    clients: list[Client]

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.public_dict(),
            "checkins": [c.to_dict() for c in self.checkins],
            "total_hours": self.total_hours,
            "clients": [c.to_dict() for c in self.clients],
        }


def require_manager(users: UserRepository, manager_id: int) -> User:
    manager = users.get_by_id(manager_id)
    if not manager or not manager.is_manager:
        raise AuthorizationError("Manager access required")
    return manager


class DashboardService:
    """Use case: manager overview of the team's field activity."""

    def __init__(self, users: UserRepository, checkins: CheckInRepository, clients: ClientRepository):
        self._users = users
        self._checkins = checkins
        self._clients = clients

    def get_stats(self, manager_id: int, *, today: Optional[date] = None) -> TeamStats:
        require_manager(self._users, manager_id)
        today = today or now_local().date()

        team = self._users.list_team(manager_id)
        active = self._checkins.list_for_team(manager_id, status=CheckInStatus.ACTIVE)
        todays = self._checkins.list_for_team(manager_id, start_date=today, end_date=today)

        return TeamStats(total_employees=len(team), active_checkins=len(active), today_checkins=len(todays))

    def get_employee_details(self, manager_id: int, employee_id, *, limit: int = DEFAULT_HISTORY_LIMIT) -> EmployeeDetails:
        require_manager(self._users, manager_id)
        employee_id = require_positive_int(employee_id, "Employee ID")

        employee = self._users.get_by_id(employee_id)
        if not employee or employee.manager_id != manager_id:
            raise AuthorizationError("You can only view your team members")

        recent = list(self._checkins.list_for_employee(employee_id, limit=limit))
        everything = self._checkins.list_for_employee(employee_id, limit=None)
        hours = sum(
            session_hours(v.record.check_in_time, v.record.check_out_time)
            for v in everything
            if v.record.check_out_time is not None
        )

        return EmployeeDetails(
            employee=employee,
            checkins=recent,
            total_hours=round(hours, 2),
            clients=list(self._clients.list_assigned(employee_id)),
        )
