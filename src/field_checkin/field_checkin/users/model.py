from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code here).
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    manager_id: Optional[int] = None

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    def public_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "email": self.email, "role": self.role.value}
