from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.field_checkin.field_checkin.checkins.model import CheckInRecord
from src.field_checkin.field_checkin.core.enums import CheckInStatus
from src.field_checkin.field_checkin.core.exceptions import AuthorizationError, ValidationError
from src.field_checkin.field_checkin.reports.service import DailySummaryService

MANAGER = 1
EMPLOYEE = 2
OTHER_EMPLOYEE = 3
OUTSIDER = 5
TODAY = date(2026, 2, 1)
YESTERDAY = TODAY - timedelta(days=1)


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
def svc(users, checkins):
    checkins.add(_record(1, EMPLOYEE, datetime(2026, 2, 1, 9), minutes=120, client_id=1, distance=0.1))
    checkins.add(_record(2, EMPLOYEE, datetime(2026, 2, 1, 12), minutes=60, client_id=2, distance=0.3))
    checkins.add(_record(3, OTHER_EMPLOYEE, datetime(2026, 2, 1, 10), client_id=2, distance=0.8))
    checkins.add(_record(4, EMPLOYEE, datetime(2026, 1, 31, 9), minutes=480))
    checkins.add(_record(5, OUTSIDER, datetime(2026, 2, 1, 9), minutes=60, client_id=1))
    return DailySummaryService(users, checkins)


def test_team_summary_for_today(svc):
    summary = svc.build_daily_summary(MANAGER, today=TODAY)

    assert summary.report_date == TODAY
    assert summary.team_summary == {
        "employees_active": 2,
        "total_checkins": 3,
        "unique_clients": 2,
        "total_hours_worked": 3.0,
        "avg_distance": 0.4,
    }


def test_breakdown_includes_idle_team_members_in_order(svc):
    summary = svc.build_daily_summary(MANAGER, today=TODAY)
    rows = summary.employee_breakdown

    assert [r["employee_name"] for r in rows] == ["Rahul Kumar", "Priya Singh", "Vikram Patel"]

    rahul = rows[0]
    assert rahul["checkins_count"] == 2
    assert rahul["clients_visited"] == 2
    assert rahul["hours_worked"] == 3.0
    assert rahul["first_checkin"] == "2026-02-01 09:00:00"
    assert rahul["last_activity"] == "2026-02-01 13:00:00"
    assert rahul["avg_distance"] == 0.2

    priya = rows[1]
    assert priya["hours_worked"] == 0
    assert priya["last_activity"] == "2026-02-01 10:00:00"

    idle = rows[2]
    assert idle["checkins_count"] == 0
    assert idle["first_checkin"] is None
    assert idle["avg_distance"] == 0


def test_specific_past_date_as_string(svc):
    summary = svc.build_daily_summary(MANAGER, report_date=YESTERDAY.strftime("%Y-%m-%d"), today=TODAY)

    assert summary.to_dict()["date"] == "2026-01-31"
    assert summary.team_summary["total_checkins"] == 1
    assert summary.team_summary["total_hours_worked"] == 8.0


def test_date_with_no_data(svc):
    summary = svc.build_daily_summary(MANAGER, report_date=date(2025, 6, 1), today=TODAY)

    assert summary.team_summary["total_checkins"] == 0
    assert summary.team_summary["avg_distance"] == 0
    assert len(summary.employee_breakdown) == 3


@pytest.mark.parametrize("value", ["01-02-2026", "2026/02/01", "2026-13-01", "yesterday"])
def test_invalid_date_format(svc, value):
    with pytest.raises(ValidationError, match="Invalid date format"):
        svc.build_daily_summary(MANAGER, report_date=value, today=TODAY)


def test_future_date_is_rejected(svc):
    with pytest.raises(ValidationError, match="future"):
        svc.build_daily_summary(MANAGER, report_date="2026-02-02", today=TODAY)


def test_requires_manager(svc):
    with pytest.raises(AuthorizationError):
        svc.build_daily_summary(EMPLOYEE, today=TODAY)
