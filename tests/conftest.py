from __future__ import annotations

import threading
import time
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.field_checkin.field_checkin.checkins.model import CheckInRecord, CheckInView
from src.field_checkin.field_checkin.clients.model import Client
from src.field_checkin.field_checkin.container import build_services
from src.field_checkin.field_checkin.core.enums import CheckInStatus, Role
from src.field_checkin.field_checkin.core.exceptions import ConflictError
from src.field_checkin.field_checkin.users.model import User

MANAGER_ID = 1
EMPLOYEE_ID = 2
OTHER_EMPLOYEE_ID = 3
UNASSIGNED_EMPLOYEE_ID = 4
OUTSIDER_ID = 5

ABC_CORP = 1
XYZ_LTD = 2


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self._by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.email == email), None)

    def list_team(self, manager_id: int):
        team = [u for u in self._by_id.values() if u.manager_id == manager_id and u.role == Role.EMPLOYEE]
        return sorted(team, key=lambda u: u.name)


class InMemoryClients:
    def __init__(self, clients: list[Client], assignments: set[tuple[int, int]]):
        self._by_id = {c.client_id: c for c in clients}
        self._assignments = set(assignments)

    def get_by_id(self, client_id: int) -> Optional[Client]:
        return self._by_id.get(client_id)

    def is_assigned(self, employee_id: int, client_id: int) -> bool:
        return (employee_id, client_id) in self._assignments

    def list_assigned(self, employee_id: int):
        clients = [self._by_id[c] for (e, c) in self._assignments if e == employee_id]
        return sorted(clients, key=lambda c: c.name)


class InMemoryCheckIns:
    """Mirrors the unique active key of the real schema.

    ``read_delay`` widens the gap between the active-record read and the insert
    so concurrency tests can provoke races.
    """

    def __init__(self, users: InMemoryUsers, clients: InMemoryClients, *, read_delay: float = 0.0):
        self._users = users
        self._clients = clients
        self._records: dict[int, CheckInRecord] = {}
        self._id = 0
        self._mutex = threading.Lock()
        self.read_delay = read_delay

    def add(self, record: CheckInRecord) -> CheckInRecord:
        with self._mutex:
            self._id = max(self._id, record.checkin_id)
            self._records[record.checkin_id] = record
        return record

    def get_by_id(self, checkin_id: int) -> Optional[CheckInRecord]:
        return self._records.get(checkin_id)

    def get_active_for_employee(self, employee_id: int) -> Optional[CheckInRecord]:
        found = next(
            (r for r in self._records.values() if r.employee_id == employee_id and r.status == CheckInStatus.ACTIVE),
            None,
        )
        if self.read_delay:
            time.sleep(self.read_delay)
        return found

    def create_checkin(
        self,
        *,
        employee_id,
        client_id,
        check_in_time,
        latitude,
        longitude,
        distance_from_client,
        note=None,
    ) -> int:
        with self._mutex:
            if any(r.employee_id == employee_id and r.is_active for r in self._records.values()):
                raise ConflictError("You already have an active check-in. Please checkout first.")
            self._id += 1
            self._records[self._id] = CheckInRecord(
                checkin_id=self._id,
                employee_id=employee_id,
                client_id=client_id,
                check_in_time=check_in_time,
                latitude=latitude,
                longitude=longitude,
                distance_from_client=distance_from_client,
                note=note,
            )
            return self._id

    def close_checkin(self, *, checkin_id: int, check_out_time: datetime) -> bool:
        with self._mutex:
            rec = self._records.get(checkin_id)
            if not rec or not rec.is_active:
                return False
            self._records[checkin_id] = replace(rec, status=CheckInStatus.CLOSED, check_out_time=check_out_time)
            return True

    def _in_range(self, r: CheckInRecord, start_date: Optional[date], end_date: Optional[date]) -> bool:
        day = r.check_in_time.date()
        if start_date and day < start_date:
            return False
        if end_date and day > end_date:
            return False
        return True

    def list_for_employee(self, employee_id, *, start_date=None, end_date=None, limit=50):
        rows = [
            r for r in self._records.values() if r.employee_id == employee_id and self._in_range(r, start_date, end_date)
        ]
        rows.sort(key=lambda r: r.check_in_time, reverse=True)
        if limit is not None:
            rows = rows[:limit]
        out = []
        for r in rows:
            client = self._clients.get_by_id(r.client_id)
            out.append(CheckInView(record=r, client_name=client.name, client_address=client.address))
        return out

    def list_for_team(self, manager_id, *, start_date=None, end_date=None, status=None):
        rows = []
        for r in self._records.values():
            user = self._users.get_by_id(r.employee_id)
            if not user or user.manager_id != manager_id:
                continue
            if status is not None and r.status != status:
                continue
            if self._in_range(r, start_date, end_date):
                rows.append(r)
        rows.sort(key=lambda r: r.check_in_time, reverse=True)
        return rows


def make_users() -> InMemoryUsers:
    pw = generate_password_hash("password123")
    return InMemoryUsers(
        [
            User(MANAGER_ID, "Amit Sharma", "manager@test.com", pw, Role.MANAGER),
            User(EMPLOYEE_ID, "Rahul Kumar", "rahul@test.com", pw, Role.EMPLOYEE, manager_id=MANAGER_ID),
            User(OTHER_EMPLOYEE_ID, "Priya Singh", "priya@test.com", pw, Role.EMPLOYEE, manager_id=MANAGER_ID),
            User(UNASSIGNED_EMPLOYEE_ID, "Vikram Patel", "vikram@test.com", pw, Role.EMPLOYEE, manager_id=MANAGER_ID),
            User(OUTSIDER_ID, "Someone Else", "else@test.com", pw, Role.EMPLOYEE, manager_id=None),
        ]
    )


def make_clients() -> InMemoryClients:
    return InMemoryClients(
        [
            Client(ABC_CORP, "ABC Corp", "Cyber City, Gurugram", 28.4946, 77.0887),
            Client(XYZ_LTD, "XYZ Ltd", "Sector 44, Gurugram", 28.4595, 77.0266),
        ],
        {
            (EMPLOYEE_ID, ABC_CORP),
            (EMPLOYEE_ID, XYZ_LTD),
            (OTHER_EMPLOYEE_ID, XYZ_LTD),
            (OUTSIDER_ID, ABC_CORP),
        },
    )


@pytest.fixture
def users():
    return make_users()


@pytest.fixture
def clients():
    return make_clients()


@pytest.fixture
def checkins(users, clients):
    return InMemoryCheckIns(users, clients)


@pytest.fixture
def container(users, clients, checkins):
    return build_services(users_repo=users, clients_repo=clients, checkins_repo=checkins)


@pytest.fixture
def app(monkeypatch, container):
    from src.field_checkin.field_checkin.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client, users):
    """Put a user into the test client's session without going through /login."""

    def _login(user_id: int):
        user = users.get_by_id(user_id)
        with client.session_transaction() as sess:
            sess["user_id"] = user.user_id
            sess["name"] = user.name
            sess["role"] = user.role.value
        return client

    return _login
