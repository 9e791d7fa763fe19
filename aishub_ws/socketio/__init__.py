"""Socket.IO module for publishing Signal K deltas."""

from aishub_ws.socketio.server import (
    sio,
    init_socketio_server,
    emit_delta,
    emit_tracking_delta,
)

__all__ = [
    "sio",
    "init_socketio_server",
    "emit_delta",
    "emit_tracking_delta",
]
