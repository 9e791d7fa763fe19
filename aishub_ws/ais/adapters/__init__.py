"""Sources of raw AisHub vessel records."""

from aishub_ws.ais.adapters.base import (
    AISDataAdapter,
    AISDataFetchError,
    FetchStats,
    SourceInfo,
)

__all__ = [
    "AISDataAdapter",
    "AISDataFetchError",
    "FetchStats",
    "SourceInfo",
]
