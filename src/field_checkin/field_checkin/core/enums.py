from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class CheckInStatus(str, Enum):
    """Lifecycle state of a check-in record as stored in the database."""

    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
