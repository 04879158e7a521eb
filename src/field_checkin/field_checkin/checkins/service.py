from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..clients.model import Client
from ..clients.repository import ClientRepository
from ..common.datetime_utils import now_local, session_minutes
from ..common.validators import optional_note, require_coordinate_part, require_positive_int
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_WARNING_THRESHOLD_METERS
from ..core.enums import CheckInStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..geo.distance import Coordinate, calculate_distance
from ..geo.proximity import check_distance_warning
from .locks import EmployeeLocks
from .model import CheckInRecord, CheckInResult, CheckInView, CheckOutResult
from .repository import CheckInRepository

logger = logging.getLogger(__name__)


class CheckInService:
    """Check-in/check-out lifecycle for field employees.

    Per employee: no active session -> check in -> active session -> check out
    -> no active session. At most one ACTIVE record exists per employee.
    """

    def __init__(
        self,
        checkins: CheckInRepository,
        clients: ClientRepository,
        *,
        warning_threshold_m: float = DEFAULT_WARNING_THRESHOLD_METERS,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        locks: EmployeeLocks | None = None,
    ):
        self._checkins = checkins
        self._clients = clients
        self._threshold_m = float(warning_threshold_m)
        self._history_limit = int(history_limit)
        self._locks = locks or EmployeeLocks()

    def list_assigned_clients(self, employee_id: int) -> list[Client]:
        return list(self._clients.list_assigned(employee_id))

    def create_check_in(
        self,
        employee_id: int,
        *,
        client_id,
        latitude,
        longitude,
        note: Optional[str] = None,
        now: datetime | None = None,
    ) -> CheckInResult:
        client_id = require_positive_int(client_id, "client_id")
        position = Coordinate(
            require_coordinate_part(latitude, "latitude", limit=90),
            require_coordinate_part(longitude, "longitude", limit=180),
        )
        note = optional_note(note)

        if not self._clients.is_assigned(employee_id, client_id):
            logger.info("Employee %s rejected at unassigned client %s", employee_id, client_id)
            raise AuthorizationError("Client not assigned to you")

        client = self._clients.get_by_id(client_id)
        if not client:
            raise NotFoundError("Client not found")

        with self._locks.for_employee(employee_id):
            if self._checkins.get_active_for_employee(employee_id):
                logger.info("Employee %s already has an active check-in", employee_id)
                raise ConflictError("You already have an active check-in. Please checkout first.")

            distance = calculate_distance(position, client.coordinate)
            warning = check_distance_warning(distance, self._threshold_m)
            now = now or now_local()

            checkin_id = self._checkins.create_checkin(
                employee_id=employee_id,
                client_id=client_id,
                check_in_time=now,
                latitude=position.latitude,
                longitude=position.longitude,
                distance_from_client=distance,
                note=note,
            )

        record = CheckInRecord(
            checkin_id=checkin_id,
            employee_id=employee_id,
            client_id=client_id,
            check_in_time=now,
            latitude=position.latitude,
            longitude=position.longitude,
            distance_from_client=distance,
            status=CheckInStatus.ACTIVE,
            note=note,
        )

        if warning.should_warn:
            logger.warning(
                "Employee %s checked in %.2f km from client %s (threshold %.0f m)",
                employee_id,
                distance,
                client_id,
                self._threshold_m,
            )
        else:
            logger.info("Employee %s checked in at client %s (%.2f km)", employee_id, client_id, distance)

        return CheckInResult(record=record, warning=warning.message if warning.should_warn else None)

    def check_out(self, employee_id: int, *, now: datetime | None = None) -> CheckOutResult:
        with self._locks.for_employee(employee_id):
            record = self._checkins.get_active_for_employee(employee_id)
            if not record:
                raise NotFoundError("No active check-in found")

            closed = record.close(now or now_local())
            if not self._checkins.close_checkin(checkin_id=closed.checkin_id, check_out_time=closed.check_out_time):
                # Closed by another writer between our read and update.
                raise NotFoundError("No active check-in found")

        duration = session_minutes(closed.check_in_time, closed.check_out_time)
        logger.info("Employee %s checked out of check-in %s after %s min", employee_id, closed.checkin_id, duration)
        return CheckOutResult(record=closed, duration_minutes=duration)

    def get_active(self, employee_id: int) -> Optional[CheckInView]:
        record = self._checkins.get_active_for_employee(employee_id)
        if not record:
            return None
        client = self._clients.get_by_id(record.client_id)
        return CheckInView(
            record=record,
            client_name=client.name if client else "",
            client_address=client.address if client else None,
        )

    def get_history(
        self,
        employee_id: int,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int | None = None,
    ) -> list[CheckInView]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        return list(
            self._checkins.list_for_employee(
                employee_id,
                start_date=start_date,
                end_date=end_date,
                limit=limit or self._history_limit,
            )
        )
