"""Reservation use cases."""
from typing import Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.filtering import FilterResolver
from app.core.logging import get_logger
from app.models.authorized_user import AuthorizedUser
from app.models.reservation import RESERVATION_FIELDS, Reservation
from app.repositories.reservation_repository import ReservationRepository
from app.schemas.reservation import (
    ReservationCreate,
    ReservationPatch,
    ReservationUpdate,
)
from app.services.base import BaseService, merge_fields

logger = get_logger(__name__)

reservation_filter_resolver = FilterResolver(RESERVATION_FIELDS.types)


class ReservationService(BaseService):
    def __init__(
        self,
        session: AsyncSession,
        resolver: FilterResolver = reservation_filter_resolver,
    ):
        super().__init__(session)
        self._reservations = ReservationRepository(session)
        self._resolver = resolver

    async def _get_live_or_404(self, reservation_id: str) -> Reservation:
        reservation = await self._reservations.get_live(reservation_id)
        return self._found_or_404(
            reservation,
            "reservation",
            f"Reservation {reservation_id} not found",
            reservation_id=reservation_id,
        )

    async def create(self, data: ReservationCreate) -> Reservation:
        reservation = Reservation(
            deleted=False,
            authorized_users=[
                AuthorizedUser(user_id=str(au.user_id), name=au.name, deleted=False)
                for au in data.authorized_users or []
            ],
        )
        merge_fields(reservation, data.model_dump(exclude={"authorized_users"}), RESERVATION_FIELDS)
        await self._reservations.add(reservation)
        logger.info(
            "reservation_created",
            reservation_id=reservation.reservation_id,
            authorized_users=len(reservation.authorized_users),
        )
        return reservation

    async def find_all(self, query: Mapping[str, str | None]) -> list[Reservation]:
        where = self._resolver.resolve(query)
        logger.debug(
            "reservation_filters_resolved",
            filters={name: p.operator.value for name, p in where.items()},
        )
        return await self._reservations.find(where, relations=("authorized_users",))

    async def find_one(self, reservation_id: str) -> Reservation:
        return await self._get_live_or_404(reservation_id)

    async def update(self, reservation_id: str, data: ReservationUpdate) -> Reservation:
        """Replace every writable field, clearing optional ones left out."""
        reservation = await self._get_live_or_404(reservation_id)
        merge_fields(reservation, data.model_dump(exclude={"authorized_users"}), RESERVATION_FIELDS)
        await self._reservations.save(reservation)
        logger.info("reservation_updated", reservation_id=reservation_id)
        return reservation

    async def patch(self, reservation_id: str, data: ReservationPatch) -> Reservation:
        reservation = await self._get_live_or_404(reservation_id)
        written = merge_fields(reservation, data.model_dump(exclude_unset=True), RESERVATION_FIELDS)
        await self._reservations.save(reservation)
        logger.info("reservation_patched", reservation_id=reservation_id, fields=written)
        return reservation

    async def remove(self, reservation_id: str) -> dict[str, str]:
        reservation = await self._get_live_or_404(reservation_id)
        reservation.deleted = True
        await self._reservations.save(reservation)
        logger.info("reservation_removed", reservation_id=reservation_id)
        return {"message": "Reservation removed"}
