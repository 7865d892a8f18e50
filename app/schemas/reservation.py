"""Request and response schemas for reservations and authorized users."""
from datetime import date
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.core.filtering import OPERATOR_MARKER


# ---------------------------------------------------------------------------
# Authorized users
# ---------------------------------------------------------------------------

class AuthorizedUserCreate(BaseModel):
    user_id: UUID = Field(..., description="Identifier of the authorized user")
    name: str = Field(..., max_length=100, description="Name of the authorized user")


class AuthorizedUserUpdate(AuthorizedUserCreate):
    pass


class AuthorizedUserPatch(BaseModel):
    user_id: UUID | None = Field(None, description="Identifier of the authorized user")
    name: str | None = Field(None, max_length=100, description="Name of the authorized user")

    @field_validator("user_id", "name")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class AuthorizedUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    authorized_user_id: str
    user_id: str
    name: str
    reservation_id: str | None = None
    deleted: bool = False


# ---------------------------------------------------------------------------
# Reservations
# ---------------------------------------------------------------------------

class ReservationCreate(BaseModel):
    initial_date: date = Field(..., description="Start date of the reservation (YYYY-MM-DD)")
    end_date: date = Field(..., description="End date of the reservation (YYYY-MM-DD)")
    details: str | None = Field(None, max_length=1000, description="Additional details")
    authorized_users: list[AuthorizedUserCreate] | None = Field(
        None,
        validation_alias=AliasChoices("authorizedUsers", "authorized_users"),
        description="Users authorized to access the reservation",
    )
    resource_id: UUID | None = Field(None, description="Resource being reserved")
    lesson_id: UUID | None = Field(None, description="Lesson the reservation belongs to")


class ReservationUpdate(ReservationCreate):
    pass


class ReservationPatch(BaseModel):
    initial_date: date | None = None
    end_date: date | None = None
    details: str | None = Field(None, max_length=1000)
    resource_id: UUID | None = None
    lesson_id: UUID | None = None

    @field_validator("initial_date", "end_date")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reservation_id: str
    initial_date: date
    end_date: date
    details: str | None = None
    resource_id: str | None = None
    lesson_id: str | None = None
    deleted: bool = False
    authorized_users: list[AuthorizedUserResponse] = Field(
        default_factory=list,
        validation_alias=AliasChoices("active_authorized_users", "authorizedUsers", "authorized_users"),
        serialization_alias="authorizedUsers",
    )


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Query filters
# ---------------------------------------------------------------------------

def _operand(value: str) -> tuple[str | None, str]:
    match = OPERATOR_MARKER.fullmatch(value)
    if match is None:
        return None, value
    return match.group(1), match.group(2)


class ReservationQuery(BaseModel):
    """Filter parameters accepted by the reservation listing.

    Each value may carry an operator marker: ``{neq}``, ``{gt}``, ``{gteq}``,
    ``{lt}``, ``{lteq}`` or ``{like}``. Without a marker the filter is an
    equality match.
    """
    reservation_id: str | None = Field(
        None, description="Reservation ID (ex: reservation_id=uuid or reservation_id={neq}uuid)"
    )
    initial_date: str | None = Field(
        None, description="Initial date (ex: initial_date={gteq}2025-10-19)"
    )
    end_date: str | None = Field(None, description="End date (ex: end_date={lt}2025-10-30)")
    details: str | None = Field(None, description="Details (ex: details={like}%meeting%)")
    resource_id: str | None = Field(None, description="Resource ID (ex: resource_id=uuid)")
    lesson_id: str | None = Field(None, description="Lesson ID (ex: lesson_id=uuid)")
    deleted: str | None = Field(
        None,
        description="Logical deletion flag: deleted=true or deleted={neq}true (default is deleted=false)",
    )

    @field_validator("initial_date", "end_date")
    @classmethod
    def _check_date_operand(cls, value: str | None) -> str | None:
        if not value:
            return value
        marker, operand = _operand(value)
        if marker == "like":
            raise ValueError("{like} cannot be applied to a date")
        try:
            date.fromisoformat(operand)
        except ValueError:
            raise ValueError(f"Invalid date format: {operand}")
        return value

    @field_validator("reservation_id", "resource_id", "lesson_id")
    @classmethod
    def _check_id_operand(cls, value: str | None) -> str | None:
        if not value:
            return value
        marker, operand = _operand(value)
        if marker == "like":
            return value
        try:
            UUID(operand)
        except ValueError:
            raise ValueError(f"Invalid identifier format: {operand}")
        return value

    @field_validator("deleted")
    @classmethod
    def _check_flag_operand(cls, value: str | None) -> str | None:
        if value and _operand(value)[0] == "like":
            raise ValueError("{like} cannot be applied to a flag")
        return value

    def to_filter_map(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)
