"""API route modules."""

from routes.admin_compilations_routes import router as admin_compilations_router
from routes.compilations_routes import router as compilations_router
from routes.health_routes import router as health_router

__all__ = [
    "admin_compilations_router",
    "compilations_router",
    "health_router",
]
