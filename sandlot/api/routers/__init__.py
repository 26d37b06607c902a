"""API routers for different resource types."""

from sandlot.api.routers.playbook import router as playbook_router
from sandlot.api.routers.simulation import router as simulation_router

__all__ = [
    "playbook_router",
    "simulation_router",
]
