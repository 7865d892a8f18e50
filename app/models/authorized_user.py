"""Authorized user model: a person allowed to use a reservation."""
import uuid

from sqlalchemy import Boolean, Column, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.core.filtering import EntityFields
from app.db.database import Base
from app.schemas.filtering import CoercionRule


AUTHORIZED_USER_FIELDS = EntityFields(
    types={
        "authorized_user_id": CoercionRule.ID,
        "user_id": CoercionRule.ID,
        "name": CoercionRule.TEXT,
        "reservation_id": CoercionRule.ID,
        "deleted": CoercionRule.BOOLEAN,
    },
    protected=frozenset({"authorized_user_id", "reservation_id", "deleted"}),
)


class AuthorizedUser(Base):
    __tablename__ = "authorized_user"

    authorized_user_id = Column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    reservation_id = Column(
        Uuid(as_uuid=False),
        ForeignKey("reservation.reservation_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    deleted = Column(Boolean, nullable=False, default=False)

    reservation = relationship("Reservation", back_populates="authorized_users")

    def __repr__(self) -> str:
        return (
            f"<AuthorizedUser(authorized_user_id={self.authorized_user_id}, "
            f"user_id={self.user_id}, name='{self.name}', deleted={self.deleted})>"
        )
