"""API route modules."""

from batchtrace.api.routes.actions import router as actions_router
from batchtrace.api.routes.guided import router as guided_router
from batchtrace.api.routes.health import router as health_router
from batchtrace.api.routes.state import router as state_router
from batchtrace.api.routes.traceability import router as traceability_router

__all__ = [
    "actions_router",
    "guided_router",
    "health_router",
    "state_router",
    "traceability_router",
]
