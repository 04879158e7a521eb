from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Client


class ClientRepository(Protocol):
    """Read-only access to clients and employee/client assignments."""

    def get_by_id(self, client_id: int) -> Optional[Client]:
        raise NotImplementedError

    def is_assigned(self, employee_id: int, client_id: int) -> bool:
        raise NotImplementedError

    def list_assigned(self, employee_id: int) -> Sequence[Client]:
        raise NotImplementedError
