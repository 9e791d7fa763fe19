"""Great-circle geometry for the AisHub query box.

Computes the bounding box sent to AisHub from the observer position and
the configured box size.
"""

import logging
import math
from numbers import Real
from typing import Any, Mapping, Optional, Union

from aishub_ws.ais.models import BoundingBox, Position

logger = logging.getLogger(__name__)

DEFAULT_BOX_SIZE_KM = 10.0

# Metres per nautical mile and nautical miles per radian of arc
METERS_PER_NM = 1852.0
NM_PER_RADIAN = 180.0 * 60.0 / math.pi

# Bearings (radians) projected to find each extreme of the box.
# These do not match the obvious compass points; keep the assignment as is.
LONMIN_BEARING = 4.5
LONMAX_BEARING = 1.5
LATMAX_BEARING = 0.0
LATMIN_BEARING = 3.0

PositionLike = Union[Position, Mapping[str, Any]]


class InvalidPositionError(ValueError):
    """Raised when the observer position is missing or unusable."""

    pass


def _floored_mod(x: float, y: float) -> float:
    return x - y * math.floor(x / y)


def _coordinate(position: Any, name: str, limit: float) -> float:
    if isinstance(position, Mapping):
        value = position.get(name)
    else:
        value = getattr(position, name, None)

    if value is None:
        raise InvalidPositionError(f"Missing {name}")
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidPositionError(f"Invalid {name}: {value!r}")

    value = float(value)
    if not math.isfinite(value) or abs(value) > limit:
        raise InvalidPositionError(f"Invalid {name}: {value}")
    return value


def validate_position(position: Optional[PositionLike]) -> Position:
    """Validate an observer position.

    Args:
        position: Mapping or object with ``latitude`` and ``longitude`` (degrees)

    Returns:
        Validated Position

    Raises:
        InvalidPositionError: If a coordinate is missing, non-numeric,
            non-finite or outside the valid degree range
    """
    if position is None:
        raise InvalidPositionError("No position available")

    return Position(
        latitude=_coordinate(position, "latitude", 90.0),
        longitude=_coordinate(position, "longitude", 180.0),
    )


def destination_point(position: Position, bearing: float, distance_m: float) -> Position:
    """Project a point along a great circle.

    Args:
        position: Start position
        bearing: Bearing in radians (mirrored, counted counter-clockwise)
        distance_m: Distance in metres

    Returns:
        Destination position, longitude normalized into [-180, 180)
    """
    dist = (distance_m / METERS_PER_NM) / NM_PER_RADIAN
    heading = 2 * math.pi - bearing

    lat1 = math.radians(position.latitude)
    lon1 = math.radians(position.longitude)

    lat = math.asin(
        math.sin(lat1) * math.cos(dist)
        + math.cos(lat1) * math.sin(dist) * math.cos(heading)
    )
    dlon = math.atan2(
        math.sin(heading) * math.sin(dist) * math.cos(lat1),
        math.cos(dist) - math.sin(lat1) * math.sin(lat),
    )
    lon = _floored_mod(lon1 - dlon + math.pi, 2 * math.pi) - math.pi

    return Position(latitude=math.degrees(lat), longitude=math.degrees(lon))


def box_size_or_default(diameter_km: Optional[float]) -> float:
    """Return ``diameter_km``, or 10 km when it is unset, non-finite or not positive."""
    if diameter_km is None or not math.isfinite(diameter_km) or diameter_km <= 0:
        return DEFAULT_BOX_SIZE_KM
    return float(diameter_km)


def compute_bounding_box(
    position: Optional[PositionLike],
    diameter_km: Optional[float] = DEFAULT_BOX_SIZE_KM,
) -> BoundingBox:
    """Compute the query box around the observer.

    Args:
        position: Observer position
        diameter_km: Box size in kilometres; unset, non-finite or not positive means 10

    Returns:
        BoundingBox spanning ``diameter_km`` around the observer

    Raises:
        InvalidPositionError: If the observer position is unusable
    """
    origin = validate_position(position)

    diameter_km = box_size_or_default(diameter_km)

    radius_m = diameter_km * 1000 / 2

    min_lon = destination_point(origin, LONMIN_BEARING, radius_m)
    max_lon = destination_point(origin, LONMAX_BEARING, radius_m)
    max_lat = destination_point(origin, LATMAX_BEARING, radius_m)
    min_lat = destination_point(origin, LATMIN_BEARING, radius_m)

    bbox = BoundingBox(
        latmin=min_lat.latitude,
        latmax=max_lat.latitude,
        lonmin=min_lon.longitude,
        lonmax=max_lon.longitude,
    )
    logger.debug(f"Bounding box for {origin.to_tuple()} ({diameter_km} km): {bbox}")
    return bbox
