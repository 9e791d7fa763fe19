"""Internal AIS data representation models.

Bounding boxes, positions and Signal K delta structures produced from
AisHub vessel records.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

# AisHub returns one JSON object per vessel keyed by short field codes
RawVesselRecord = Mapping[str, Any]

DEFAULT_SOURCE_LABEL = "aishub"
BOUNDING_BOX_PATH = "sensors.ais.boundingBox"


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box used to query AisHub.

    No ordering or range checks are applied: boxes computed close to the
    poles or the antimeridian are passed through as calculated.
    """

    latmin: float
    latmax: float
    lonmin: float
    lonmax: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is within the bounding box."""
        return (
            self.latmin <= latitude <= self.latmax
            and self.lonmin <= longitude <= self.lonmax
        )

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary (AisHub query parameter names)."""
        return {
            "latmin": self.latmin,
            "latmax": self.latmax,
            "lonmin": self.lonmin,
            "lonmax": self.lonmax,
        }


@dataclass(frozen=True)
class Position:
    """Geographic position (latitude, longitude) in degrees."""

    latitude: float
    longitude: float

    def to_tuple(self) -> tuple[float, float]:
        """Return as (lat, lon) tuple."""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class PathValue:
    """A single Signal K path/value pair.

    An empty path carries a root-level object (e.g. ``{"mmsi": "..."}``).
    """

    path: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "value": self.value}


@dataclass(frozen=True)
class Update:
    """One update block of a delta: source, optional timestamp and values."""

    source_label: str
    values: tuple[PathValue, ...] = ()
    timestamp: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        data["source"] = {"label": self.source_label}
        data["values"] = [value.to_dict() for value in self.values]
        return data


@dataclass(frozen=True)
class Delta:
    """Normalized vessel-state event in Signal K delta form.

    Built once per AisHub record, emitted once and never mutated.
    """

    context: str
    updates: tuple[Update, ...] = field(default_factory=tuple)

    @property
    def values(self) -> tuple[PathValue, ...]:
        """All path/value pairs across updates, in order."""
        return tuple(value for update in self.updates for value in update.values)

    def get_value(self, path: str) -> Optional[Any]:
        """Get the value written at ``path``, or None if absent.

        Root-level objects are looked up by their key, e.g. ``get_value("mmsi")``.
        """
        for entry in self.values:
            if entry.path == path:
                return entry.value
            if entry.path == "" and isinstance(entry.value, dict) and path in entry.value:
                return entry.value[path]
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-serializable delta message."""
        return {
            "context": self.context,
            "updates": [update.to_dict() for update in self.updates],
        }


def bounding_box_delta(
    self_context: str,
    bbox: BoundingBox,
    source_label: str = DEFAULT_SOURCE_LABEL,
) -> Delta:
    """Build the tracking delta that publishes the query box on the self vessel."""
    return Delta(
        context=self_context,
        updates=(
            Update(
                source_label=source_label,
                values=(PathValue(BOUNDING_BOX_PATH, bbox.to_dict()),),
            ),
        ),
    )
