"""API routes module."""
from app.api.routes.authorized_users import router as authorized_users_router
from app.api.routes.health import router as health_router
from app.api.routes.reservations import router as reservations_router

__all__ = [
    "authorized_users_router",
    "health_router",
    "reservations_router",
]
