"""Versioned API route modules."""

from fastapi import APIRouter

from deeptime.api.routes.config import router as config_router
from deeptime.api.routes.events import router as events_router
from deeptime.api.routes.ground import router as ground_router
from deeptime.api.routes.placement import router as placement_router
from deeptime.api.routes.transition import router as transition_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(transition_router, tags=["Transition"])
api_router.include_router(placement_router, tags=["Placement"])
api_router.include_router(ground_router, tags=["Ground"])
api_router.include_router(config_router, tags=["Config"])
api_router.include_router(events_router, tags=["Events"])

__all__ = ["api_router"]
