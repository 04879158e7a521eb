from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Client
from .repository import ClientRepository


def _to_client(row: dict) -> Client:
    return Client(
        client_id=int(row["client_id"]),
        name=row["name"],
        address=row.get("address"),
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
    )


class MySQLClientRepository(ClientRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, client_id: int) -> Optional[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT client_id, name, address, latitude, longitude
                FROM clients
                WHERE client_id=%s
                """,
                (int(client_id),),
            )
            row = fetchone(cur)
            return _to_client(row) if row else None

    def is_assigned(self, employee_id: int, client_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS assigned
                FROM employee_clients
                WHERE employee_id=%s AND client_id=%s
                LIMIT 1
                """,
                (int(employee_id), int(client_id)),
            )
            return fetchone(cur) is not None

    def list_assigned(self, employee_id: int) -> Sequence[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.client_id, c.name, c.address, c.latitude, c.longitude
                FROM clients c
                JOIN employee_clients ec ON ec.client_id = c.client_id
                WHERE ec.employee_id=%s
                ORDER BY c.name ASC
                """,
                (int(employee_id),),
            )
            return [_to_client(r) for r in fetchall(cur)]
