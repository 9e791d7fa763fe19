"""API routes for the AisHub poller.

Provides endpoints for:
- Poller and source status
- Bounding box calculation
- Manually triggered fetch cycles
- Own vessel position updates
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from aishub_ws.ais import (
    AISDataFetchError,
    InvalidPositionError,
    compute_bounding_box,
    get_poller,
)
from aishub_ws.ais.geo import validate_position
from aishub_ws.cache import set_self_position
from aishub_ws.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/aishub", tags=["AisHub"])


class PollerStatusResponse(BaseModel):
    """Response model for poller status."""

    source: dict[str, Any]
    poller_stats: dict[str, Any]


class BoundingBoxResponse(BaseModel):
    """Response model for a computed bounding box."""

    latmin: float
    latmax: float
    lonmin: float
    lonmax: float


class CycleResponse(BaseModel):
    """Response model for a manually triggered cycle."""

    result: dict[str, Any]


class PositionRequest(BaseModel):
    latitude: float
    longitude: float


class PositionResponse(BaseModel):
    latitude: float
    longitude: float
    stored: bool


def _require_poller():
    poller = get_poller()

    if poller is None:
        raise HTTPException(
            status_code=503,
            detail="AisHub poller not initialized",
        )
    return poller


@router.get("/status", response_model=PollerStatusResponse)
async def get_poller_status() -> PollerStatusResponse:
    """Get status of the AisHub poller and its source.

    Returns:
        Source information and poller statistics
    """
    poller = _require_poller()

    return PollerStatusResponse(
        source=poller.adapter.get_source_info().to_dict(),
        poller_stats=poller.get_statistics(),
    )


@router.get("/health")
async def check_source_health() -> dict[str, bool]:
    """Check health of the configured AIS source.

    Returns:
        Dictionary mapping the source name to its health status
    """
    poller = _require_poller()

    try:
        healthy = await poller.adapter.health_check()
    except Exception as e:
        logger.warning(f"Health check failed for {poller.adapter.name}: {e}")
        healthy = False

    return {poller.adapter.name: healthy}


@router.get("/bounding-box", response_model=BoundingBoxResponse)
async def get_bounding_box(
    latitude: float = Query(..., description="Observer latitude (degrees)"),
    longitude: float = Query(..., description="Observer longitude (degrees)"),
    diameter_km: Optional[float] = Query(
        None, description="Box size in km (default: configured box size)"
    ),
) -> BoundingBoxResponse:
    """Compute the AisHub query box around a position.

    Args:
        latitude: Observer latitude
        longitude: Observer longitude
        diameter_km: Box size in kilometres

    Returns:
        Bounding box
    """
    if diameter_km is None:
        diameter_km = get_settings().aishub_box_size

    try:
        bbox = compute_bounding_box(
            {"latitude": latitude, "longitude": longitude}, diameter_km
        )
    except InvalidPositionError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return BoundingBoxResponse(**bbox.to_dict())


@router.post("/fetch", response_model=CycleResponse)
async def trigger_fetch() -> CycleResponse:
    """Run one fetch/translate cycle immediately.

    Returns:
        Cycle results
    """
    poller = _require_poller()

    try:
        result = await poller.run_cycle()
    except InvalidPositionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AISDataFetchError as e:
        logger.error(f"Manual AisHub fetch failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return CycleResponse(result=result)


@router.put("/position", response_model=PositionResponse)
async def update_self_position(request: PositionRequest) -> PositionResponse:
    """Store the own vessel position used to centre the AisHub query.

    Args:
        request: Position in degrees

    Returns:
        Stored position
    """
    try:
        fix = validate_position(request.model_dump())
    except InvalidPositionError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not await set_self_position(fix.latitude, fix.longitude):
        raise HTTPException(status_code=503, detail="Position store unavailable")

    return PositionResponse(latitude=fix.latitude, longitude=fix.longitude, stored=True)
