"""Reservation model."""
import uuid

from sqlalchemy import Boolean, Column, Date, String, Uuid
from sqlalchemy.orm import relationship

from app.core.filtering import EntityFields
from app.db.database import Base
from app.schemas.filtering import CoercionRule


RESERVATION_FIELDS = EntityFields(
    types={
        "reservation_id": CoercionRule.ID,
        "initial_date": CoercionRule.DATE,
        "end_date": CoercionRule.DATE,
        "details": CoercionRule.TEXT,
        "resource_id": CoercionRule.ID,
        "lesson_id": CoercionRule.ID,
        "deleted": CoercionRule.BOOLEAN,
    },
    protected=frozenset({"reservation_id", "deleted"}),
)


class Reservation(Base):
    __tablename__ = "reservation"

    reservation_id = Column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    initial_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    details = Column(String(1000), nullable=True)
    resource_id = Column(Uuid(as_uuid=False), nullable=True, index=True)
    lesson_id = Column(Uuid(as_uuid=False), nullable=True, index=True)
    deleted = Column(Boolean, nullable=False, default=False, index=True)

    authorized_users = relationship(
        "AuthorizedUser",
        back_populates="reservation",
        cascade="all, delete-orphan",
    )

    @property
    def active_authorized_users(self) -> list:
        """Authorized users that have not been soft-deleted."""
        return [au for au in self.authorized_users if not au.deleted]

    def __repr__(self) -> str:
        return (
            f"<Reservation(reservation_id={self.reservation_id}, "
            f"initial_date={self.initial_date}, end_date={self.end_date}, deleted={self.deleted})>"
        )
