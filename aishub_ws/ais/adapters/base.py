"""Base class for sources of raw AisHub vessel records.

An adapter answers one question: which vessels are inside a bounding box.
It returns the records untranslated; translation happens in the poller.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from aishub_ws.ais.models import BoundingBox, RawVesselRecord

logger = logging.getLogger(__name__)

LATENCY_SAMPLES = 100


class AISDataFetchError(Exception):
    """Raised when a source cannot deliver records for a cycle."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(f"[{source}] {message}" if source else message)


@dataclass
class FetchStats:
    """Running fetch counters of one adapter."""

    consecutive_errors: int = 0
    total_records: int = 0
    last_success: Optional[datetime] = None
    latencies: deque = field(default_factory=lambda: deque(maxlen=LATENCY_SAMPLES))

    def record_success(self, record_count: int, latency_seconds: float = 0.0) -> None:
        self.last_success = datetime.utcnow()
        self.consecutive_errors = 0
        self.total_records += record_count
        self.latencies.append(latency_seconds)

    def record_error(self) -> None:
        self.consecutive_errors += 1

    @property
    def average_latency(self) -> float:
        if not self.latencies:
            return 0.0
        return sum(self.latencies) / len(self.latencies)


@dataclass
class SourceInfo:
    """Snapshot of an adapter for the status endpoints."""

    name: str
    source_type: str
    is_active: bool
    last_successful_fetch: Optional[datetime] = None
    error_count: int = 0
    total_records_received: int = 0
    average_latency_seconds: float = 0.0
    extra_info: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "type": self.source_type,
            "is_active": self.is_active,
            "last_successful_fetch": (
                self.last_successful_fetch.isoformat()
                if self.last_successful_fetch
                else None
            ),
            "error_count": self.error_count,
            "total_records_received": self.total_records_received,
            "average_latency_seconds": self.average_latency_seconds,
            "extra_info": self.extra_info,
        }


class AISDataAdapter(ABC):
    """Source of raw vessel records.

    Subclasses implement ``fetch_records`` and ``health_check`` and may
    override ``start``/``stop`` to manage connections.
    """

    source_type = "unknown"

    def __init__(self, config: dict[str, Any]):
        """Initialize adapter with configuration.

        Args:
            config: Adapter-specific configuration dictionary
        """
        self.config = config
        self.name = config.get("name", "unknown")
        self.is_enabled = config.get("enabled", True)
        self.stats = FetchStats()
        self._is_started = False

    @abstractmethod
    async def fetch_records(self, bbox: BoundingBox) -> list[RawVesselRecord]:
        """Fetch the raw vessel records inside ``bbox``.

        Raises:
            AISDataFetchError: If the source cannot deliver records
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True if the source can currently be queried."""

    def get_source_info(self) -> SourceInfo:
        return SourceInfo(
            name=self.name,
            source_type=self.source_type,
            is_active=self._is_started,
            last_successful_fetch=self.stats.last_success,
            error_count=self.stats.consecutive_errors,
            total_records_received=self.stats.total_records,
            average_latency_seconds=self.stats.average_latency,
            extra_info=self._extra_info(),
        )

    def _extra_info(self) -> dict[str, Any]:
        return {}

    async def start(self) -> None:
        self._is_started = True
        logger.info(f"Adapter '{self.name}' started")

    async def stop(self) -> None:
        self._is_started = False
        logger.info(f"Adapter '{self.name}' stopped")

    @property
    def is_started(self) -> bool:
        return self._is_started

    @property
    def error_count(self) -> int:
        """Consecutive failed fetches."""
        return self.stats.consecutive_errors

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name}, type={self.source_type})>"
