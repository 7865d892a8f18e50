from sqlalchemy.ext.asyncio import AsyncSession

from app.models.reservation import Reservation
from app.repositories.base import Repository
from app.schemas.filtering import FilterOperator, Predicate, PredicateSet


def live_by_id(field: str, value: str) -> PredicateSet:
    """Predicate set matching one non-deleted row by identifier."""
    return {
        field: Predicate(field=field, operator=FilterOperator.EQ, value=value),
        "deleted": Predicate(field="deleted", operator=FilterOperator.EQ, value=False),
    }


class ReservationRepository(Repository[Reservation, str]):
    model = Reservation

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_live(self, reservation_id: str, with_users: bool = True) -> Reservation | None:
        relations = ("authorized_users",) if with_users else ()
        return await self.find_one(live_by_id("reservation_id", reservation_id), relations)
