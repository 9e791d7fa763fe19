"""AisHub polling cycle.

Each cycle reads the observer position, publishes the query box, fetches
the vessels inside it and emits one delta per vessel.
"""

import asyncio
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from aishub_ws.ais.adapters.base import AISDataAdapter, AISDataFetchError
from aishub_ws.ais.config import normalize_box_size, normalize_update_rate
from aishub_ws.ais.geo import InvalidPositionError, compute_bounding_box
from aishub_ws.ais.models import BoundingBox, bounding_box_delta
from aishub_ws.ais.translator import RecordTranslator

logger = logging.getLogger(__name__)

PositionProvider = Callable[[], Awaitable[Optional[Any]]]
DeltaEmitter = Callable[[dict[str, Any]], Awaitable[None]]


def _unwrap_position(position: Any) -> Any:
    # Signal K paths may be stored as {"value": {...}, "timestamp": ...}
    if isinstance(position, Mapping) and position.get("value"):
        return position["value"]
    return position


def _has_coordinates(position: Any) -> bool:
    if position is None:
        return False
    if isinstance(position, Mapping):
        return (
            position.get("latitude") is not None
            and position.get("longitude") is not None
        )
    return (
        getattr(position, "latitude", None) is not None
        and getattr(position, "longitude", None) is not None
    )


class AISHubPoller:
    """Runs the AisHub fetch/translate cycle on a fixed interval.

    The interval task is owned by the instance and only exists between
    ``start()`` and ``stop()``.
    """

    def __init__(
        self,
        adapter: AISDataAdapter,
        translator: RecordTranslator,
        get_observer_position: PositionProvider,
        emit_delta: DeltaEmitter,
        emit_tracking_delta: DeltaEmitter,
        self_context: str,
        box_size_km: Optional[float] = None,
        update_rate: Optional[float] = None,
    ):
        """Initialize poller.

        Args:
            adapter: Source of raw vessel records
            translator: Record translator
            get_observer_position: Returns the own vessel position, or None
            emit_delta: Publishes one vessel delta
            emit_tracking_delta: Publishes the bounding box delta
            self_context: Signal K context of the own vessel
            box_size_km: Box size (default: 10 km)
            update_rate: Seconds between cycles (minimum 61)
        """
        self.adapter = adapter
        self.translator = translator
        self.get_observer_position = get_observer_position
        self.emit_delta = emit_delta
        self.emit_tracking_delta = emit_tracking_delta
        self.self_context = self_context
        self.box_size_km = normalize_box_size(box_size_km)
        self.update_rate = normalize_update_rate(update_rate)

        self._task: Optional[asyncio.Task] = None
        self._is_running = False
        self._start_time: Optional[datetime] = None
        self._cycle_count = 0
        self._failed_cycles = 0
        self._deltas_emitted = 0
        self._last_bbox: Optional[BoundingBox] = None
        self._last_cycle_time: Optional[datetime] = None
        self._last_error: Optional[str] = None

    @property
    def is_running(self) -> bool:
        """Check if the polling loop is running."""
        return self._is_running

    @property
    def last_bbox(self) -> Optional[BoundingBox]:
        return self._last_bbox

    async def run_cycle(self) -> dict[str, Any]:
        """Run one fetch/translate cycle.

        Returns:
            Dictionary with cycle results

        Raises:
            InvalidPositionError: If the observer position is unusable
            AISDataFetchError: If fetching fails or AisHub reports an error
        """
        self._cycle_count += 1
        self._last_cycle_time = datetime.utcnow()

        position = _unwrap_position(await self.get_observer_position())
        logger.debug(f"Observer position: {position}")

        if not _has_coordinates(position):
            logger.debug("No position available")
            return {"status": "no_position", "records": 0, "deltas_emitted": 0}

        bbox = compute_bounding_box(position, self.box_size_km)
        self._last_bbox = bbox

        await self.emit_tracking_delta(
            bounding_box_delta(
                self.self_context, bbox, self.translator.source_label
            ).to_dict()
        )

        records = await self.adapter.fetch_records(bbox)
        deltas = self.translator.translate_batch(records)

        for delta in deltas:
            await self.emit_delta(delta.to_dict())

        self._deltas_emitted += len(deltas)
        self._last_error = None

        logger.info(
            f"Emitted {len(deltas)} deltas from {len(records)} records "
            f"({self.adapter.name})"
        )

        return {
            "status": "success",
            "records": len(records),
            "deltas_emitted": len(deltas),
            "skipped": len(records) - len(deltas),
            "bbox": bbox.to_dict(),
            "source": self.adapter.name,
        }

    async def start(self) -> None:
        """Start polling: one cycle now, then every ``update_rate`` seconds."""
        if self._is_running:
            logger.warning("AisHub poller already running")
            return

        logger.info(
            f"Starting AisHub poller (update rate: {self.update_rate}s, "
            f"box size: {self.box_size_km} km)"
        )

        self._is_running = True
        self._start_time = datetime.utcnow()
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """Stop polling."""
        if not self._is_running:
            return

        logger.info("Stopping AisHub poller")

        self._is_running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(f"AisHub poller stopped after {self._cycle_count} cycles")

    async def _poll_loop(self) -> None:
        """Main polling loop."""
        logger.debug("AisHub poll loop started")

        while self._is_running:
            try:
                await self.run_cycle()
            except asyncio.CancelledError:
                break
            except (InvalidPositionError, AISDataFetchError) as e:
                self._failed_cycles += 1
                self._last_error = str(e)
                logger.error(f"AisHub cycle aborted: {e}")
            except Exception as e:
                self._failed_cycles += 1
                self._last_error = str(e)
                logger.exception(f"Unexpected error in AisHub cycle: {e}")

            try:
                await asyncio.sleep(self.update_rate)
            except asyncio.CancelledError:
                break

        logger.debug("AisHub poll loop ended")

    def get_statistics(self) -> dict[str, Any]:
        """Get poller statistics.

        Returns:
            Dictionary with poller statistics
        """
        uptime = 0.0
        if self._start_time and self._is_running:
            uptime = (datetime.utcnow() - self._start_time).total_seconds()

        return {
            "is_running": self._is_running,
            "source": self.adapter.name,
            "update_rate": self.update_rate,
            "box_size_km": self.box_size_km,
            "cycles": self._cycle_count,
            "failed_cycles": self._failed_cycles,
            "deltas_emitted": self._deltas_emitted,
            "last_bbox": self._last_bbox.to_dict() if self._last_bbox else None,
            "last_cycle_time": (
                self._last_cycle_time.isoformat() if self._last_cycle_time else None
            ),
            "last_error": self._last_error,
            "uptime_seconds": uptime,
        }

    def __repr__(self) -> str:
        return (
            f"<AISHubPoller(source={self.adapter.name}, "
            f"update_rate={self.update_rate}, running={self._is_running})>"
        )


# Global poller instance (initialized on startup)
_poller: Optional[AISHubPoller] = None


def get_poller() -> Optional[AISHubPoller]:
    """Get the global AisHub poller instance.

    Returns:
        AISHubPoller if initialized, None otherwise
    """
    return _poller


def set_poller(poller: Optional[AISHubPoller]) -> None:
    """Set the global AisHub poller instance.

    Args:
        poller: AISHubPoller instance to use globally, or None to clear it
    """
    global _poller
    _poller = poller
    logger.info(f"Global AisHub poller set: {poller}")
