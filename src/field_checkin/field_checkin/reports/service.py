from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..checkins.repository import CheckInRepository
from ..common.datetime_utils import now_local, parse_iso_date, session_hours
from ..core.exceptions import ValidationError
from ..dashboard.service import require_manager
from ..users.repository import UserRepository

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _fmt(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else None


@dataclass(frozen=True)
class DailySummary:
    report_date: date
    team_summary: dict
    employee_breakdown: list[dict]

    def to_dict(self) -> dict:
        return {
            "date": self.report_date.strftime("%Y-%m-%d"),
            "team_summary": self.team_summary,
            "employee_breakdown": self.employee_breakdown,
        }


class DailySummaryService:
    """Use case: one day of team activity for a manager."""

    def __init__(self, users: UserRepository, checkins: CheckInRepository):
        self._users = users
        self._checkins = checkins

    def _resolve_date(self, report_date: Union[date, str, None], today: date) -> date:
        if report_date is None or report_date == "":
            return today
        if isinstance(report_date, str):
            if not _ISO_DATE.match(report_date):
                raise ValidationError("Invalid date format. Use YYYY-MM-DD")
            try:
                report_date = parse_iso_date(report_date)
            except ValueError:
                raise ValidationError("Invalid date format. Use YYYY-MM-DD") from None
        if report_date > today:
            raise ValidationError("Cannot generate reports for future dates")
        return report_date

    def build_daily_summary(
        self,
        manager_id: int,
        *,
        report_date: Union[date, str, None] = None,
        today: Optional[date] = None,
    ) -> DailySummary:
        require_manager(self._users, manager_id)
        day = self._resolve_date(report_date, today or now_local().date())

        team = self._users.list_team(manager_id)
        records = self._checkins.list_for_team(manager_id, start_date=day, end_date=day)

        breakdown_map: dict[int, dict] = {}
        for member in team:
            breakdown_map[member.user_id] = {
                "employee_id": member.user_id,
                "employee_name": member.name,
                "employee_email": member.email,
                "checkins_count": 0,
                "clients": set(),
                "hours": 0.0,
                "first_checkin": None,
                "last_activity": None,
                "distances": [],
            }

        total_hours = 0.0
        for r in records:
            hours = session_hours(r.check_in_time, r.check_out_time) if r.check_out_time else 0.0
            total_hours += hours

            b = breakdown_map.get(r.employee_id)
            if b is None:
                # Manager-owned records of non-employee roles stay in the team totals only.
                continue
            b["checkins_count"] += 1
            b["clients"].add(r.client_id)
            b["hours"] += hours
            b["distances"].append(r.distance_from_client)
            if b["first_checkin"] is None or r.check_in_time < b["first_checkin"]:
                b["first_checkin"] = r.check_in_time
            last = r.check_out_time or r.check_in_time
            if b["last_activity"] is None or last > b["last_activity"]:
                b["last_activity"] = last

        distances = [r.distance_from_client for r in records]
        team_summary = {
            "employees_active": len({r.employee_id for r in records}),
            "total_checkins": len(records),
            "unique_clients": len({r.client_id for r in records}),
            "total_hours_worked": round(total_hours, 2),
            "avg_distance": round(sum(distances) / len(distances), 2) if distances else 0,
        }

        breakdown = []
        for b in breakdown_map.values():
            breakdown.append(
                {
                    "employee_id": b["employee_id"],
                    "employee_name": b["employee_name"],
                    "employee_email": b["employee_email"],
                    "checkins_count": b["checkins_count"],
                    "clients_visited": len(b["clients"]),
                    "hours_worked": round(b["hours"], 2),
                    "first_checkin": _fmt(b["first_checkin"]),
                    "last_activity": _fmt(b["last_activity"]),
                    "avg_distance": round(sum(b["distances"]) / len(b["distances"]), 2) if b["distances"] else 0,
                }
            )

        breakdown.sort(key=lambda x: (-x["checkins_count"], x["employee_name"]))
        return DailySummary(report_date=day, team_summary=team_summary, employee_breakdown=breakdown)
