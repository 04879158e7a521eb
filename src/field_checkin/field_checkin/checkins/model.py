from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import session_minutes
from ..core.enums import CheckInStatus
from ..core.exceptions import ConflictError
from ..geo.distance import Coordinate

_TS_FORMAT = "%Y-%m-%d %H:%M:%S"


def _fmt(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(_TS_FORMAT) if value else None


@dataclass(frozen=True)
class CheckInRecord:
    """Domain entity: one attendance session at a client site.

    Created ACTIVE, closed exactly once on checkout, never deleted.
    ``distance_from_client`` is fixed at creation (km, 2 decimals).
    """

    checkin_id: int
    employee_id: int
    client_id: int
    check_in_time: datetime
    latitude: float
    longitude: float
    distance_from_client: float
    status: CheckInStatus = CheckInStatus.ACTIVE
    check_out_time: Optional[datetime] = None
    note: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == CheckInStatus.ACTIVE

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.check_out_time is None:
            return None
        return session_minutes(self.check_in_time, self.check_out_time)

    def close(self, check_out_time: datetime) -> "CheckInRecord":
        if not self.is_active:
            raise ConflictError("Check-in is already closed")
        # Checkout never precedes check-in, even with a skewed clock.
        check_out_time = max(check_out_time, self.check_in_time)
        return replace(self, status=CheckInStatus.CLOSED, check_out_time=check_out_time)

    def to_dict(self) -> dict:
        return {
            "id": self.checkin_id,
            "employee_id": self.employee_id,
            "client_id": self.client_id,
            "checkin_time": _fmt(self.check_in_time),
            "checkout_time": _fmt(self.check_out_time),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "distance_from_client": self.distance_from_client,
            "notes": self.note,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class CheckInView:
    """Read-model: a check-in joined with its client's name and address."""

    record: CheckInRecord
    client_name: str
    client_address: Optional[str]

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["client_name"] = self.client_name
        data["client_address"] = self.client_address
        data["duration_minutes"] = self.record.duration_minutes
        return data


@dataclass(frozen=True)
class CheckInResult:
    record: CheckInRecord
    warning: Optional[str] = None

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        # Consumers rely on the key being absent, not null, when there is no warning.
        if self.warning:
            data["warning"] = self.warning
        return data


@dataclass(frozen=True)
class CheckOutResult:
    record: CheckInRecord
    duration_minutes: int

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["duration"] = self.duration_minutes
        return data
