from __future__ import annotations

from typing import Any, Callable, Generic, Sequence, TypeVar

from sqlalchemy import ColumnElement, String, and_, cast, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ValidationError
from app.db.database import Base
from app.schemas.filtering import FilterOperator, PredicateSet

ModelT = TypeVar("ModelT", bound=Base)
IdT = TypeVar("IdT")


def as_text(column):
    """Column as text, so LIKE also works on UUID and boolean columns."""
    if isinstance(column.type, String):
        return column
    return cast(column, String)


OPERATOR_CLAUSES: dict[FilterOperator, Callable[[Any, Any], ColumnElement[bool]]] = {
    FilterOperator.EQ: lambda column, value: column == value,
    FilterOperator.NEQ: lambda column, value: column != value,
    FilterOperator.GT: lambda column, value: column > value,
    FilterOperator.GTEQ: lambda column, value: column >= value,
    FilterOperator.LT: lambda column, value: column < value,
    FilterOperator.LTEQ: lambda column, value: column <= value,
    FilterOperator.LIKE: lambda column, value: as_text(column).ilike(value),
}


class Repository(Generic[ModelT, IdT]):
    """Generic persistence operations driven by a predicate set."""

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self._session = session

    def build_where(self, where: PredicateSet) -> list[ColumnElement[bool]]:
        columns = inspect(self.model).columns
        clauses = []
        for name, predicate in where.items():
            column = columns.get(predicate.field)
            if column is None:
                raise ValidationError(
                    name,
                    f"unknown filter field for {self.model.__tablename__}",
                    {"field": name},
                )
            clauses.append(OPERATOR_CLAUSES[predicate.operator](column, predicate.value))
        return clauses

    def _select(self, where: PredicateSet, relations: Sequence[str] = ()):
        query = select(self.model)
        for relation in relations:
            query = query.options(selectinload(getattr(self.model, relation)))
        clauses = self.build_where(where)
        if clauses:
            query = query.where(and_(*clauses))
        return query

    async def find(self, where: PredicateSet, relations: Sequence[str] = ()) -> list[ModelT]:
        result = await self._session.execute(self._select(where, relations))
        return list(result.scalars().unique().all())

    async def find_one(self, where: PredicateSet, relations: Sequence[str] = ()) -> ModelT | None:
        result = await self._session.execute(self._select(where, relations).limit(1))
        return result.scalars().first()

    async def add(self, entity: ModelT) -> ModelT:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def save(self, entity: ModelT) -> ModelT:
        await self._session.flush()
        return entity
