from typing import Any, Mapping, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.filtering import EntityFields
from app.core.exceptions import NotFoundError

T = TypeVar("T")


def merge_fields(target: Any, updates: Mapping[str, Any], fields: EntityFields) -> list[str]:
    """Copy the writable entries of ``updates`` onto ``target``.

    Keys outside the entity's writable set (identifiers, the soft-delete flag,
    anything unknown) are ignored. Returns the names that were written.
    """
    written = []
    for name in sorted(fields.writable):
        if name not in updates:
            continue
        value = updates[name]
        if isinstance(value, UUID):
            value = str(value)
        setattr(target, name, value)
        written.append(name)
    return written


class BaseService:
    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _found_or_404(entity: T | None, entity_name: str, error_msg: str, **ids: str) -> T:
        if entity is None:
            raise NotFoundError(entity_name, error_msg, ids)
        return entity
