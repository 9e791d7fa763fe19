"""AisHub field to Signal K path mapping rules.

Each rule reads one AisHub field code and writes one Signal K path.
Conversions receive the whole record (for fields derived from several
codes) and the raw value, and return None to omit the path.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Optional

from aishub_ws.ais.models import RawVesselRecord
from aishub_ws.ais.ship_types import get_ship_type_name

Conversion = Callable[[RawVesselRecord, Any], Optional[Any]]

KNOTS_TO_MS = 0.514444

# "Not available" values defined by the AIS position report
COURSE_NOT_AVAILABLE = 360
HEADING_NOT_AVAILABLE = 511
SPEED_NOT_AVAILABLE = 102.4

# Signal K navigation.state values by AIS navigational status code
NAVIGATION_STATES: dict[int, Optional[str]] = {
    0: "motoring",
    1: "anchored",
    2: "not under command",
    3: "restricted manouverability",
    4: "constrained by draft",
    5: "moored",
    6: "aground",
    7: "fishing",
    8: "sailing",
    9: "hazardous material high speed",
    10: "hazardous material wing in ground",
    14: "ais-sart",
    15: None,
}


@dataclass(frozen=True)
class MappingRule:
    """How one Signal K path is derived from an AisHub record.

    Attributes:
        path: Signal K path, or the key of the root-level object when ``root``
        key: AisHub field code read from the record
        root: Emit ``{path: value}`` at the root instead of under ``path``
        conversion: Optional ``(record, value) -> value | None``
    """

    path: str
    key: str
    root: bool = False
    conversion: Optional[Conversion] = None


def degrees_to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180.0)


def convert_time(record: RawVesselRecord, value: str) -> str:
    """Join an AisHub ``"<date> <time>"`` string into ``"<date>T<time>Z"``.

    Anything after the time part (AisHub appends " GMT") is dropped. The
    result is not validated further.
    """
    parts = value.split(" ")
    time = parts[1] if len(parts) > 1 else ""
    return f"{parts[0]}T{time}Z"


def number_to_string(record: RawVesselRecord, value: Any) -> str:
    return str(value)


def convert_course(record: RawVesselRecord, value: float) -> Optional[float]:
    if value == COURSE_NOT_AVAILABLE:
        return None
    return degrees_to_radians(value)


def convert_heading(record: RawVesselRecord, value: float) -> Optional[float]:
    if value == HEADING_NOT_AVAILABLE:
        return None
    return degrees_to_radians(value)


def _offsets(value: Any, partner: Any) -> Optional[tuple[float, float]]:
    # Dimensions derive from two offsets; without both the attribute is omitted
    for offset in (value, partner):
        if isinstance(offset, bool) or not isinstance(offset, Real):
            return None
    return value, partner


def convert_from_bow(record: RawVesselRecord, to_bow: float) -> Optional[float]:
    offsets = _offsets(to_bow, record.get("B"))
    if offsets is None or sum(offsets) == 0:
        return None
    return to_bow


def convert_from_center(record: RawVesselRecord, to_port: float) -> Optional[float]:
    """Offset of the GPS antenna from the centreline (positive to starboard)."""
    offsets = _offsets(to_port, record.get("D"))
    if offsets is None:
        return None

    to_starboard = offsets[1]
    width = to_port + to_starboard

    if width == 0:
        return None

    if to_starboard > width / 2:
        return (to_starboard - width / 2) * -1
    return width / 2 - to_starboard


def convert_length(record: RawVesselRecord, to_bow: float) -> Optional[dict[str, float]]:
    offsets = _offsets(to_bow, record.get("B"))
    if offsets is None or sum(offsets) == 0:
        return None
    return {"overall": sum(offsets)}


def convert_beam(record: RawVesselRecord, to_port: float) -> Optional[float]:
    offsets = _offsets(to_port, record.get("D"))
    if offsets is None or sum(offsets) == 0:
        return None
    return sum(offsets)


def convert_draft(record: RawVesselRecord, value: float) -> Optional[dict[str, float]]:
    if value == 0:
        return None
    return {"maximum": value}


def convert_position(record: RawVesselRecord, latitude: float) -> dict[str, Any]:
    return {"latitude": latitude, "longitude": record.get("LONGITUDE")}


def convert_speed(record: RawVesselRecord, value: float) -> Optional[float]:
    if value == SPEED_NOT_AVAILABLE:
        return None
    return value * KNOTS_TO_MS


def convert_navigation_state(record: RawVesselRecord, value: int) -> Optional[str]:
    return NAVIGATION_STATES.get(value)


def ship_type_conversion(
    ship_type_name: Callable[[Any], Optional[str]],
) -> Conversion:
    """Build the ``design.aisShipType`` conversion around a classification lookup."""

    def convert_ship_type(record: RawVesselRecord, value: Any) -> Optional[dict[str, Any]]:
        name = ship_type_name(value)
        if not name:
            return None
        return {"id": value, "name": name}

    return convert_ship_type


def build_mappings(
    ship_type_name: Callable[[Any], Optional[str]] = get_ship_type_name,
) -> tuple[MappingRule, ...]:
    """Build the ordered rule table.

    Args:
        ship_type_name: Lookup from AIS ship type code to name

    Returns:
        Tuple of MappingRule, one per Signal K path
    """
    return (
        MappingRule("mmsi", "MMSI", root=True, conversion=number_to_string),
        MappingRule("name", "NAME", root=True),
        MappingRule("callsign", "CALLSIGN", root=True),
        MappingRule("imo", "IMO", root=True, conversion=number_to_string),
        MappingRule("navigation.courseOverGroundTrue", "COG", conversion=convert_course),
        MappingRule("navigation.headingTrue", "HEADING", conversion=convert_heading),
        MappingRule("navigation.destination.commonName", "DEST"),
        MappingRule("sensors.ais.fromBow", "A", conversion=convert_from_bow),
        MappingRule("sensors.ais.fromCenter", "C", conversion=convert_from_center),
        MappingRule("design.length", "A", conversion=convert_length),
        MappingRule("design.beam", "C", conversion=convert_beam),
        MappingRule("design.draft", "DRAUGHT", conversion=convert_draft),
        MappingRule("navigation.position", "LATITUDE", conversion=convert_position),
        MappingRule("navigation.speedOverGround", "SOG", conversion=convert_speed),
        MappingRule(
            "design.aisShipType",
            "TYPE",
            conversion=ship_type_conversion(ship_type_name),
        ),
        MappingRule("navigation.state", "NAVSTAT", conversion=convert_navigation_state),
        MappingRule(
            "navigation.courseGreatCircle.activeRoute.estimatedTimeOfArrival",
            "ETA",
            conversion=convert_time,
        ),
    )


MAPPINGS = build_mappings()
