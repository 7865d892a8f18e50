"""SQLAlchemy models."""
from app.models.authorized_user import AUTHORIZED_USER_FIELDS, AuthorizedUser
from app.models.reservation import RESERVATION_FIELDS, Reservation

__all__ = [
    "AUTHORIZED_USER_FIELDS",
    "AuthorizedUser",
    "RESERVATION_FIELDS",
    "Reservation",
]
