"""Socket.IO server configuration and event handlers.

Provides:
- AsyncServer publishing Signal K deltas to connected clients
- ``position`` event through which a feeder reports the own vessel position
- Connection/disconnection event handlers
"""

import logging
from typing import Any

import socketio

from aishub_ws.ais.geo import InvalidPositionError, validate_position
from aishub_ws.cache import set_self_position

logger = logging.getLogger(__name__)

DELTA_EVENT = "delta"

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",
    logger=False,
    engineio_logger=False,
)


async def init_socketio_server() -> socketio.AsyncServer:
    """Initialize Socket.IO server (called during app lifespan).

    Returns:
        The Socket.IO server instance
    """
    logger.info("Socket.IO server initialized")
    return sio


# Register event handlers
@sio.event
async def connect(sid: str, environ: dict) -> None:
    """Handle client connection."""
    logger.info(f"Socket.IO client connected: {sid}")


@sio.event
async def disconnect(sid: str) -> None:
    """Handle client disconnection."""
    logger.info(f"Socket.IO client disconnected: {sid}")


@sio.event
async def position(sid: str, data: Any) -> dict[str, Any]:
    """Store the own vessel position reported by a feeder.

    Accepts ``{"latitude": .., "longitude": ..}`` or the Signal K
    ``{"value": {...}}`` wrapper. The return value is the client's ack.
    """
    if isinstance(data, dict) and isinstance(data.get("value"), dict):
        data = data["value"]

    try:
        fix = validate_position(data)
    except InvalidPositionError as e:
        logger.warning(f"Rejected position from {sid}: {e}")
        return {"stored": False, "error": str(e)}

    stored = await set_self_position(fix.latitude, fix.longitude)
    return {"stored": stored}


async def emit_delta(delta: dict[str, Any]) -> None:
    """Emit a vessel delta to all connected clients.

    Args:
        delta: Signal K delta dictionary
    """
    try:
        await sio.emit(DELTA_EVENT, delta)
        logger.debug(f"Emitted delta for {delta.get('context')}")
    except Exception as e:
        logger.warning(f"Failed to emit delta: {e}")


async def emit_tracking_delta(delta: dict[str, Any]) -> None:
    """Emit the own vessel bounding box delta to all connected clients.

    Args:
        delta: Signal K delta dictionary for the self context
    """
    try:
        await sio.emit(DELTA_EVENT, delta)
        logger.debug("Emitted bounding box delta")
    except Exception as e:
        logger.warning(f"Failed to emit bounding box delta: {e}")
