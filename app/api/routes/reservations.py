"""API routes for reservations."""
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.routes.dependencies import get_current_user, get_reservation_service
from app.schemas.reservation import (
    MessageResponse,
    ReservationCreate,
    ReservationPatch,
    ReservationQuery,
    ReservationResponse,
    ReservationUpdate,
)
from app.services.reservation import ReservationService

AUTH_RESPONSES = {
    401: {"description": "Missing, invalid or expired authentication token"},
    403: {"description": "Access denied"},
}
NOT_FOUND = {404: {"description": "Reservation not found"}}

router = APIRouter(dependencies=[Depends(get_current_user)], responses=AUTH_RESPONSES)


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    data: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service),
):
    """Create a reservation, optionally with its authorized users."""
    return await service.create(data)


@router.get("", response_model=list[ReservationResponse])
async def list_reservations(
    query: Annotated[ReservationQuery, Query()],
    service: ReservationService = Depends(get_reservation_service),
):
    """List reservations matching the query-string filters.

    Soft-deleted reservations are excluded unless ``deleted`` is filtered
    explicitly.
    """
    return await service.find_all(query.to_filter_map())


@router.get("/{reservation_id}", response_model=ReservationResponse, responses=NOT_FOUND)
async def get_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
):
    return await service.find_one(str(reservation_id))


@router.put("/{reservation_id}", response_model=ReservationResponse, responses=NOT_FOUND)
async def update_reservation(
    reservation_id: UUID,
    data: ReservationUpdate,
    service: ReservationService = Depends(get_reservation_service),
):
    """Fully update a reservation."""
    return await service.update(str(reservation_id), data)


@router.patch("/{reservation_id}", response_model=ReservationResponse, responses=NOT_FOUND)
async def patch_reservation(
    reservation_id: UUID,
    data: ReservationPatch,
    service: ReservationService = Depends(get_reservation_service),
):
    """Partially update a reservation."""
    return await service.patch(str(reservation_id), data)


@router.delete("/{reservation_id}", response_model=MessageResponse, responses=NOT_FOUND)
async def delete_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
):
    """Soft-delete a reservation."""
    return await service.remove(str(reservation_id))
