"""AisHub web service adapter.

Queries the AisHub JSON web service for vessels inside a bounding box.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from aishub_ws.ais.adapters.base import AISDataAdapter, AISDataFetchError
from aishub_ws.ais.models import BoundingBox, RawVesselRecord
from aishub_ws.ais.translator import parse_response

logger = logging.getLogger(__name__)

DEFAULT_AISHUB_URL = "http://data.aishub.net/ws.php"
DEFAULT_TIMEOUT_SECONDS = 30.0


class AISHubAdapter(AISDataAdapter):
    """AisHub web service adapter.

    Requests human readable (format 1), uncompressed JSON output.
    """

    source_type = "aishub"

    def __init__(
        self,
        config: dict[str, Any],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize AisHub adapter.

        Config options:
            name: Adapter name
            apikey: AisHub username (API key)
            url: Web service URL (default: http://data.aishub.net/ws.php)
            timeout_seconds: HTTP timeout (default: 30)

        Args:
            config: Adapter configuration
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(config)

        self.api_key: str = config.get("apikey") or ""
        self.url: str = config.get("url") or DEFAULT_AISHUB_URL
        self.timeout: float = float(config.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        if not self.api_key:
            logger.warning(f"AisHub adapter '{self.name}' has no API key configured")

    async def start(self) -> None:
        """Open the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        await super().start()

    async def stop(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        await super().stop()

    def build_params(self, bbox: BoundingBox) -> dict[str, Any]:
        """Build the AisHub query parameters for a bounding box."""
        return {
            "username": self.api_key,
            "format": 1,
            "output": "json",
            "compress": 0,
            **bbox.to_dict(),
        }

    async def fetch_records(self, bbox: BoundingBox) -> list[RawVesselRecord]:
        """Query AisHub for vessels inside ``bbox``.

        Args:
            bbox: Bounding box to query

        Returns:
            List of raw vessel records

        Raises:
            AISDataFetchError: On transport failures or HTTP errors
            UpstreamError: If AisHub flags the response as an error
        """
        if self._client is None:
            raise AISDataFetchError("Adapter is not started", source=self.name)

        params = self.build_params(bbox)
        start_time = datetime.utcnow()

        try:
            response = await self._client.get(self.url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.stats.record_error()
            raise AISDataFetchError(
                f"HTTP {e.response.status_code} from AisHub",
                source=self.name,
            )
        except httpx.HTTPError as e:
            self.stats.record_error()
            raise AISDataFetchError(f"Request failed: {e}", source=self.name)

        try:
            records = parse_response(response.text, source=self.name)
        except AISDataFetchError:
            self.stats.record_error()
            raise

        latency = (datetime.utcnow() - start_time).total_seconds()
        self.stats.record_success(len(records), latency)

        logger.debug(f"Fetched {len(records)} records from {self.name} in {latency:.2f}s")
        return records

    async def health_check(self) -> bool:
        """AisHub is considered healthy while the client is open and an API key is set."""
        return self._client is not None and bool(self.api_key)

    def _extra_info(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "timeout_seconds": self.timeout,
        }
