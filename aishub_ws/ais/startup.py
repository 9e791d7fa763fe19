"""AisHub poller initialization for application startup.

Provides:
- Source adapter creation from configuration
- Wiring of the poller to the position store and the delta bus
- Poller lifecycle management
"""

import logging
from typing import Optional

from aishub_ws.ais.adapters.base import AISDataFetchError
from aishub_ws.ais.config import (
    AISConfigError,
    create_adapter_from_config,
    get_config_file_path,
    load_config,
)
from aishub_ws.ais.poller import (
    AISHubPoller,
    DeltaEmitter,
    PositionProvider,
    get_poller,
    set_poller,
)
from aishub_ws.ais.translator import RecordTranslator
from aishub_ws.cache import get_self_position
from aishub_ws.config import get_settings
from aishub_ws.socketio import emit_delta, emit_tracking_delta

logger = logging.getLogger(__name__)
settings = get_settings()


async def initialize_poller(
    config_path: Optional[str] = None,
    get_observer_position: PositionProvider = get_self_position,
    delta_emitter: DeltaEmitter = emit_delta,
    tracking_emitter: DeltaEmitter = emit_tracking_delta,
) -> Optional[AISHubPoller]:
    """Create, start and register the AisHub poller.

    Args:
        config_path: Optional path to config file
        get_observer_position: Own vessel position provider
        delta_emitter: Publishes vessel deltas
        tracking_emitter: Publishes the bounding box delta

    Returns:
        Running AISHubPoller or None if no source could be created
    """
    logger.info(f"Initializing AisHub poller for environment: {settings.environment}")

    config_path = config_path or settings.ais_config_file or str(get_config_file_path())

    try:
        config = load_config(config_path, settings=settings)
        adapter = create_adapter_from_config(config.get("source"))
    except (AISConfigError, AISDataFetchError) as e:
        logger.error(f"Cannot configure AIS source: {e}")
        return None

    translator = RecordTranslator(self_context=settings.self_context)

    poller = AISHubPoller(
        adapter=adapter,
        translator=translator,
        get_observer_position=get_observer_position,
        emit_delta=delta_emitter,
        emit_tracking_delta=tracking_emitter,
        self_context=settings.self_context,
        box_size_km=config.get("box_size"),
        update_rate=config.get("update_rate"),
    )

    await adapter.start()
    await poller.start()

    set_poller(poller)

    logger.info(f"AisHub poller initialized (source: {adapter.name})")
    return poller


async def shutdown_poller() -> None:
    """Stop the poller and close its source."""
    poller = get_poller()

    if poller:
        logger.info("Shutting down AisHub poller...")
        await poller.stop()
        await poller.adapter.stop()
        set_poller(None)
        logger.info("AisHub poller shutdown complete")
