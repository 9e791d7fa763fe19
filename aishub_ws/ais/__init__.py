"""AisHub to Signal K translation module.

This module provides:
- Great-circle bounding box calculation around the observer
- AisHub field to Signal K path mapping rules
- Record translation into Signal K deltas
- Source adapters (AisHub web service, captured responses)
- The periodic polling cycle
"""

from aishub_ws.ais.models import (
    BoundingBox,
    Delta,
    PathValue,
    Position,
    Update,
)
from aishub_ws.ais.geo import (
    InvalidPositionError,
    compute_bounding_box,
    destination_point,
)
from aishub_ws.ais.adapters.base import (
    AISDataAdapter,
    AISDataFetchError,
    SourceInfo,
)
from aishub_ws.ais.mappings import MAPPINGS, MappingRule, build_mappings
from aishub_ws.ais.translator import (
    MalformedRecordError,
    RecordTranslator,
    UpstreamError,
    parse_response,
)
from aishub_ws.ais.config import (
    AISConfigError,
    create_adapter,
    create_adapter_from_config,
    load_config,
)
from aishub_ws.ais.poller import (
    AISHubPoller,
    get_poller,
    set_poller,
)

__all__ = [
    # Models
    "BoundingBox",
    "Delta",
    "PathValue",
    "Position",
    "Update",
    # Geo
    "InvalidPositionError",
    "compute_bounding_box",
    "destination_point",
    # Adapters
    "AISDataAdapter",
    "AISDataFetchError",
    "SourceInfo",
    # Translation
    "MAPPINGS",
    "MappingRule",
    "build_mappings",
    "MalformedRecordError",
    "RecordTranslator",
    "UpstreamError",
    "parse_response",
    # Config
    "AISConfigError",
    "create_adapter",
    "create_adapter_from_config",
    "load_config",
    # Poller
    "AISHubPoller",
    "get_poller",
    "set_poller",
]
