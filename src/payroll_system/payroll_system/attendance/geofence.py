"""GPS geofence check for attendance logs.

A location is valid when its great-circle distance to the reference
coordinate lies inside the closed band ``[radius_min, radius_max]`` metres.
Distances are rounded to the millimetre before comparison so a point placed
exactly on a boundary is not rejected by floating point noise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_OFFICE_LATITUDE,
    DEFAULT_OFFICE_LONGITUDE,
    DEFAULT_RADIUS_MAX_METERS,
    DEFAULT_RADIUS_MIN_METERS,
    EARTH_RADIUS_METERS,
)
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90.0 <= float(self.latitude) <= 90.0:
            raise ValidationError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= float(self.longitude) <= 180.0:
            raise ValidationError(f"Longitude out of range: {self.longitude}")


OFFICE = Coordinate(DEFAULT_OFFICE_LATITUDE, DEFAULT_OFFICE_LONGITUDE)


@dataclass(frozen=True)
class GeofenceResult:
    valid: bool
    distance: float


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in metres."""
    lat1, lat2 = math.radians(float(a.latitude)), math.radians(float(b.latitude))
    d_lat = lat2 - lat1
    d_lon = math.radians(float(b.longitude) - float(a.longitude))

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def validate_geofence(
    observed: Coordinate,
    reference: Optional[Coordinate] = None,
    radius_min: Optional[float] = None,
    radius_max: Optional[float] = None,
) -> GeofenceResult:
    reference = reference or OFFICE
    lo = DEFAULT_RADIUS_MIN_METERS if radius_min is None else radius_min
    hi = DEFAULT_RADIUS_MAX_METERS if radius_max is None else radius_max
    if lo < 0 or hi < lo:
        raise ValidationError(f"Invalid radius bounds [{lo}, {hi}]")

    distance = round(haversine_distance(reference, observed), 3)
    return GeofenceResult(valid=lo <= distance <= hi, distance=distance)


@dataclass(frozen=True)
class GeofenceValidator:
    """``validate_geofence`` bound to the configured office defaults."""

    reference: Coordinate = OFFICE
    radius_min: int = DEFAULT_RADIUS_MIN_METERS
    radius_max: int = DEFAULT_RADIUS_MAX_METERS

    def check(
        self,
        observed: Coordinate,
        reference: Optional[Coordinate] = None,
        radius_min: Optional[int] = None,
        radius_max: Optional[int] = None,
    ) -> GeofenceResult:
        return validate_geofence(
            observed,
            reference or self.reference,
            self.radius_min if radius_min is None else radius_min,
            self.radius_max if radius_max is None else radius_max,
        )
