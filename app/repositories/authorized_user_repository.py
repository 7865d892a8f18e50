from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.authorized_user import AuthorizedUser
from app.models.reservation import Reservation
from app.repositories.base import Repository
from app.schemas.filtering import FilterOperator, Predicate


class AuthorizedUserRepository(Repository[AuthorizedUser, str]):
    model = AuthorizedUser

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def list_live_for_reservation(self, reservation_id: str) -> list[AuthorizedUser]:
        return await self.find({
            "reservation_id": Predicate(field="reservation_id", operator=FilterOperator.EQ, value=reservation_id),
            "deleted": Predicate(field="deleted", operator=FilterOperator.EQ, value=False),
        })

    async def get_live(self, reservation_id: str, authorized_user_id: str) -> AuthorizedUser | None:
        """Live authorized user that belongs to a live reservation."""
        result = await self._session.execute(
            select(AuthorizedUser)
            .join(Reservation, AuthorizedUser.reservation_id == Reservation.reservation_id)
            .where(
                and_(
                    AuthorizedUser.authorized_user_id == authorized_user_id,
                    AuthorizedUser.reservation_id == reservation_id,
                    AuthorizedUser.deleted.is_(False),
                    Reservation.deleted.is_(False),
                )
            )
        )
        return result.scalar_one_or_none()
