"""Great-circle distance between GPS coordinates.

Check-ins store how far the employee stood from the client site, using the
Haversine formula on a spherical Earth (mean radius 6371 km).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import DISTANCE_DECIMALS, EARTH_RADIUS_KM


@dataclass(frozen=True)
class Coordinate:
    """Latitude/longitude pair in decimal degrees.

    Range checks belong to the caller (see ``common.validators``).
    """

    latitude: float
    longitude: float


def calculate_distance(a: Coordinate, b: Coordinate) -> float:
    """Distance between ``a`` and ``b`` in kilometers, rounded to 2 decimals.

    Symmetric in its arguments and exactly 0.0 for identical coordinates.

    Example:
        >>> calculate_distance(Coordinate(28.4946, 77.0887), Coordinate(28.4595, 77.0266))
        7.22
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Float noise can push h a hair outside [0, 1] for antipodal points.
    h = min(max(h, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return round(EARTH_RADIUS_KM * c, DISTANCE_DECIMALS)
