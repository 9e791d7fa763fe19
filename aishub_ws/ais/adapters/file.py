"""Captured-response adapter for development and testing.

Replays an AisHub JSON response saved to disk instead of querying the
web service.
"""

import logging
from datetime import datetime
from numbers import Real
from pathlib import Path
from typing import Any

from aishub_ws.ais.adapters.base import AISDataAdapter, AISDataFetchError
from aishub_ws.ais.models import BoundingBox, RawVesselRecord
from aishub_ws.ais.translator import parse_response

logger = logging.getLogger(__name__)


class FileAdapter(AISDataAdapter):
    """Serves records from a captured AisHub response file.

    The file is re-read on every fetch so it can be replaced while running.
    """

    source_type = "file"

    def __init__(self, config: dict[str, Any]):
        """Initialize file adapter.

        Config options:
            name: Adapter name
            response_file: Path to the captured AisHub JSON response
            filter_by_bbox: Only return records inside the query box (default: True)
        """
        super().__init__(config)

        response_file = config.get("response_file")
        if not response_file:
            raise AISDataFetchError("No response_file configured", source=self.name)

        self.response_file = Path(response_file)
        self.filter_by_bbox: bool = config.get("filter_by_bbox", True)

    async def fetch_records(self, bbox: BoundingBox) -> list[RawVesselRecord]:
        """Read the captured response and return its records.

        Raises:
            AISDataFetchError: If the file cannot be read
            UpstreamError: If the captured response is an error response
        """
        start_time = datetime.utcnow()

        try:
            payload = self.response_file.read_text(encoding="utf-8")
        except OSError as e:
            self.stats.record_error()
            raise AISDataFetchError(
                f"Cannot read {self.response_file}: {e}",
                source=self.name,
            )

        try:
            records = parse_response(payload, source=self.name)
        except AISDataFetchError:
            self.stats.record_error()
            raise

        if self.filter_by_bbox:
            records = [r for r in records if _inside(r, bbox)]

        latency = (datetime.utcnow() - start_time).total_seconds()
        self.stats.record_success(len(records), latency)
        return records

    async def health_check(self) -> bool:
        return self.response_file.is_file()

    def _extra_info(self) -> dict[str, Any]:
        return {
            "response_file": str(self.response_file),
            "filter_by_bbox": self.filter_by_bbox,
        }


def _inside(record: Any, bbox: BoundingBox) -> bool:
    # Records without a usable position are left for the translator to judge
    if not hasattr(record, "get"):
        return True
    latitude = record.get("LATITUDE")
    longitude = record.get("LONGITUDE")
    if not isinstance(latitude, Real) or not isinstance(longitude, Real):
        return True
    return bbox.contains(latitude, longitude)
