"""Authorized users nested under a reservation."""
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.authorized_user import AUTHORIZED_USER_FIELDS, AuthorizedUser
from app.repositories.authorized_user_repository import AuthorizedUserRepository
from app.repositories.reservation_repository import ReservationRepository
from app.schemas.reservation import (
    AuthorizedUserCreate,
    AuthorizedUserPatch,
    AuthorizedUserUpdate,
)
from app.services.base import BaseService, merge_fields

logger = get_logger(__name__)


class AuthorizedUserService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._users = AuthorizedUserRepository(session)
        self._reservations = ReservationRepository(session)

    async def _require_live_reservation(self, reservation_id: str) -> None:
        reservation = await self._reservations.get_live(reservation_id, with_users=False)
        self._found_or_404(
            reservation,
            "reservation",
            f"Reservation {reservation_id} not found",
            reservation_id=reservation_id,
        )

    async def add_to_reservation(self, reservation_id: str, data: AuthorizedUserCreate) -> AuthorizedUser:
        await self._require_live_reservation(reservation_id)

        authorized_user = AuthorizedUser(reservation_id=reservation_id, deleted=False)
        merge_fields(authorized_user, data.model_dump(), AUTHORIZED_USER_FIELDS)
        await self._users.add(authorized_user)
        logger.info(
            "authorized_user_added",
            reservation_id=reservation_id,
            authorized_user_id=authorized_user.authorized_user_id,
        )
        return authorized_user

    async def find_by_reservation(self, reservation_id: str) -> list[AuthorizedUser]:
        await self._require_live_reservation(reservation_id)
        return await self._users.list_live_for_reservation(reservation_id)

    async def find_one(self, reservation_id: str, authorized_user_id: str) -> AuthorizedUser:
        authorized_user = await self._users.get_live(reservation_id, authorized_user_id)
        return self._found_or_404(
            authorized_user,
            "authorized_user",
            f"Authorized user {authorized_user_id} not found in reservation {reservation_id}",
            reservation_id=reservation_id,
            authorized_user_id=authorized_user_id,
        )

    async def update(
        self, reservation_id: str, authorized_user_id: str, data: AuthorizedUserUpdate
    ) -> AuthorizedUser:
        authorized_user = await self.find_one(reservation_id, authorized_user_id)
        merge_fields(authorized_user, data.model_dump(), AUTHORIZED_USER_FIELDS)
        await self._users.save(authorized_user)
        return authorized_user

    async def patch(
        self, reservation_id: str, authorized_user_id: str, data: AuthorizedUserPatch
    ) -> AuthorizedUser:
        authorized_user = await self.find_one(reservation_id, authorized_user_id)
        merge_fields(authorized_user, data.model_dump(exclude_unset=True), AUTHORIZED_USER_FIELDS)
        await self._users.save(authorized_user)
        return authorized_user

    async def remove(self, reservation_id: str, authorized_user_id: str) -> dict[str, str]:
        authorized_user = await self.find_one(reservation_id, authorized_user_id)
        authorized_user.deleted = True
        await self._users.save(authorized_user)
        logger.info(
            "authorized_user_removed",
            reservation_id=reservation_id,
            authorized_user_id=authorized_user_id,
        )
        return {"message": "Authorized user removed"}
