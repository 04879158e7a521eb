from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.field_checkin.field_checkin.checkins.model import CheckInRecord
from src.field_checkin.field_checkin.core.enums import CheckInStatus
from src.field_checkin.field_checkin.core.exceptions import AuthorizationError, ValidationError
from src.field_checkin.field_checkin.dashboard.service import DashboardService

MANAGER = 1
EMPLOYEE = 2
OTHER_EMPLOYEE = 3
OUTSIDER = 5
TODAY = date(2026, 2, 1)


def _record(checkin_id, employee_id, start, *, minutes=None, client_id=2, distance=0.2):
    return CheckInRecord(
        checkin_id=checkin_id,
        employee_id=employee_id,
        client_id=client_id,
        check_in_time=start,
        check_out_time=start + timedelta(minutes=minutes) if minutes is not None else None,
        latitude=28.4595,
        longitude=77.0266,
        distance_from_client=distance,
        status=CheckInStatus.CLOSED if minutes is not None else CheckInStatus.ACTIVE,
    )


@pytest.fixture
def svc(users, checkins, clients):
    checkins.add(_record(1, EMPLOYEE, datetime(2026, 1, 31, 9), minutes=120))
    checkins.add(_record(2, EMPLOYEE, datetime(2026, 2, 1, 9), minutes=90))
    checkins.add(_record(3, EMPLOYEE, datetime(2026, 2, 1, 14)))
    checkins.add(_record(4, OTHER_EMPLOYEE, datetime(2026, 2, 1, 10)))
    checkins.add(_record(5, OUTSIDER, datetime(2026, 2, 1, 10), client_id=1))
    return DashboardService(users, checkins, clients)


def test_stats_count_team_members_and_activity(svc):
    stats = svc.get_stats(MANAGER, today=TODAY)

    assert stats.total_employees == 3
    assert stats.active_checkins == 2
    assert stats.today_checkins == 3
    assert stats.to_dict() == {"total_employees": 3, "active_checkins": 2, "today_checkins": 3}


def test_stats_require_manager(svc):
    with pytest.raises(AuthorizationError):
        svc.get_stats(EMPLOYEE, today=TODAY)


def test_employee_details_for_team_member(svc):
    details = svc.get_employee_details(MANAGER, EMPLOYEE)

    assert details.employee.user_id == EMPLOYEE
    assert [v.record.checkin_id for v in details.checkins] == [3, 2, 1]
    assert details.total_hours == 3.5
    assert [c.name for c in details.clients] == ["ABC Corp", "XYZ Ltd"]

    data = details.to_dict()
    assert data["employee"]["email"] == "rahul@test.com"
    assert [c["duration_minutes"] for c in data["checkins"]] == [None, 90, 120]


def test_employee_details_accepts_query_string_id(svc):
    assert svc.get_employee_details(MANAGER, str(EMPLOYEE)).employee.user_id == EMPLOYEE


def test_employee_details_limit_does_not_change_total_hours(svc):
    details = svc.get_employee_details(MANAGER, EMPLOYEE, limit=1)
    assert len(details.checkins) == 1
    assert details.total_hours == 3.5


def test_employee_details_rejects_non_team_member(svc):
    with pytest.raises(AuthorizationError, match="team members"):
        svc.get_employee_details(MANAGER, OUTSIDER)


def test_employee_details_rejects_unknown_employee(svc):
    with pytest.raises(AuthorizationError):
        svc.get_employee_details(MANAGER, 999)


def test_employee_details_requires_employee_id(svc):
    with pytest.raises(ValidationError, match="Employee ID is required"):
        svc.get_employee_details(MANAGER, None)


def test_employee_details_require_manager(svc):
    with pytest.raises(AuthorizationError):
        svc.get_employee_details(OTHER_EMPLOYEE, EMPLOYEE)
