from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CheckInStatus
from .model import CheckInRecord, CheckInView


class CheckInRepository(Protocol):
    def get_active_for_employee(self, employee_id: int) -> Optional[CheckInRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        client_id: int,
        check_in_time: datetime,
        latitude: float,
        longitude: float,
        distance_from_client: float,
        note: Optional[str] = None,
    ) -> int:
        """Insert an ACTIVE record.

        Must raise ConflictError if the employee already has an ACTIVE record.
        """

        raise NotImplementedError

    def close_checkin(self, *, checkin_id: int, check_out_time: datetime) -> bool:
        """Close an ACTIVE record. Returns False if it was not ACTIVE."""

        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = 50,
    ) -> Sequence[CheckInView]:
        """Newest first. ``limit=None`` returns every matching record."""

        raise NotImplementedError

    def list_for_team(
        self,
        manager_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[CheckInStatus] = None,
    ) -> Sequence[CheckInRecord]:
        raise NotImplementedError
