from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..geo.distance import Coordinate


@dataclass(frozen=True)
class Client:
    """Domain entity: client site an employee can be assigned to."""

    client_id: int
    name: str
    address: Optional[str]
    latitude: float
    longitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)

    def to_dict(self) -> dict:
        return {
            "id": self.client_id,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
