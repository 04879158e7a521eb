from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_WARNING_THRESHOLD_METERS, FAR_FROM_CLIENT_MESSAGE


@dataclass(frozen=True)
class DistanceWarning:
    should_warn: bool
    message: Optional[str] = None


def check_distance_warning(distance_km: float, threshold_m: float = DEFAULT_WARNING_THRESHOLD_METERS) -> DistanceWarning:
    """Warn when the employee is strictly farther than ``threshold_m`` meters away.

    A distance exactly on the threshold does not warn.
    """
    distance_m = distance_km * 1000
    if distance_m > threshold_m:
        return DistanceWarning(should_warn=True, message=FAR_FROM_CLIENT_MESSAGE)
    return DistanceWarning(should_warn=False)
