from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import CheckInStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CheckInRecord, CheckInView
from .repository import CheckInRepository

_CHECKIN_COLUMNS = """
    ch.checkin_id, ch.employee_id, ch.client_id, ch.checkin_time, ch.checkout_time,
    ch.latitude, ch.longitude, ch.distance_from_client, ch.notes, ch.status
"""


def _to_record(r: dict) -> CheckInRecord:
    return CheckInRecord(
        checkin_id=int(r["checkin_id"]),
        employee_id=int(r["employee_id"]),
        client_id=int(r["client_id"]),
        check_in_time=r["checkin_time"],
        check_out_time=r.get("checkout_time"),
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        distance_from_client=float(r["distance_from_client"]),
        note=r.get("notes"),
        status=CheckInStatus(r["status"]),
    )


def _date_clauses(start_date: Optional[date], end_date: Optional[date]) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if start_date is not None:
        clauses.append("DATE(ch.checkin_time) >= %s")
        params.append(start_date)
    if end_date is not None:
        clauses.append("DATE(ch.checkin_time) <= %s")
        params.append(end_date)
    return clauses, params


class MySQLCheckInRepository(CheckInRepository):
    """Check-in storage.

    The schema keeps a unique key on ``active_employee_id`` (NULL once closed),
    so the database itself rejects a second ACTIVE record for one employee.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_for_employee(self, employee_id: int) -> Optional[CheckInRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CHECKIN_COLUMNS}
                FROM checkins ch
                WHERE ch.employee_id=%s AND ch.status=%s
                """,
                (int(employee_id), CheckInStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO checkins(
                        employee_id, client_id, checkin_time, latitude, longitude,
                        distance_from_client, notes, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        int(client_id),
                        check_in_time,
                        latitude,
                        longitude,
                        distance_from_client,
                        note,
                        CheckInStatus.ACTIVE.value,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError("You already have an active check-in. Please checkout first.") from e
            raise

    def close_checkin(self, *, checkin_id: int, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE checkins
                SET checkout_time=%s, status=%s
                WHERE checkin_id=%s AND status=%s
                """,
                (check_out_time, CheckInStatus.CLOSED.value, int(checkin_id), CheckInStatus.ACTIVE.value),
            )
            return cur.rowcount > 0

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = 50,
    ) -> Sequence[CheckInView]:
        clauses, params = _date_clauses(start_date, end_date)
        clauses.insert(0, "ch.employee_id=%s")
        params.insert(0, int(employee_id))
        where = " AND ".join(clauses)
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CHECKIN_COLUMNS}, c.name AS client_name, c.address AS client_address
                FROM checkins ch
                JOIN clients c ON c.client_id = ch.client_id
                WHERE {where}
                ORDER BY ch.checkin_time DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [
                CheckInView(record=_to_record(r), client_name=r["client_name"], client_address=r.get("client_address"))
                for r in fetchall(cur)
            ]

    def list_for_team(
        self,
        manager_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[CheckInStatus] = None,
    ) -> Sequence[CheckInRecord]:
        clauses, params = _date_clauses(start_date, end_date)
        clauses.insert(0, "u.manager_id=%s")
        params.insert(0, int(manager_id))
        if status is not None:
            clauses.append("ch.status=%s")
            params.append(status.value)
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CHECKIN_COLUMNS}
                FROM checkins ch
                JOIN users u ON u.user_id = ch.employee_id
                WHERE {where}
                ORDER BY ch.checkin_time DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
