"""Repositories package."""
from app.repositories.base import Repository
from app.repositories.authorized_user_repository import AuthorizedUserRepository
from app.repositories.reservation_repository import ReservationRepository

__all__ = [
    "Repository",
    "AuthorizedUserRepository",
    "ReservationRepository",
]
