"""API routes for the AisHub bridge.

Main API router that combines all route modules.
"""

from fastapi import APIRouter

from aishub_ws.api.ais_routes import router as ais_router

router = APIRouter()

# Include AisHub poller routes
router.include_router(ais_router)
