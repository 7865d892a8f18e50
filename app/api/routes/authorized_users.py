"""API routes for the authorized users of a reservation."""
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.routes.dependencies import get_authorized_user_service, get_current_user
from app.schemas.reservation import (
    AuthorizedUserCreate,
    AuthorizedUserPatch,
    AuthorizedUserResponse,
    AuthorizedUserUpdate,
    MessageResponse,
)
from app.services.authorized_user import AuthorizedUserService

router = APIRouter(
    dependencies=[Depends(get_current_user)],
    responses={
        401: {"description": "Missing, invalid or expired authentication token"},
        404: {"description": "Authorized user or reservation not found"},
    },
)


@router.post("", response_model=AuthorizedUserResponse, status_code=status.HTTP_201_CREATED)
async def add_authorized_user(
    reservation_id: UUID,
    data: AuthorizedUserCreate,
    service: AuthorizedUserService = Depends(get_authorized_user_service),
):
    return await service.add_to_reservation(str(reservation_id), data)


@router.get("", response_model=list[AuthorizedUserResponse])
async def list_authorized_users(
    reservation_id: UUID,
    service: AuthorizedUserService = Depends(get_authorized_user_service),
):
    return await service.find_by_reservation(str(reservation_id))


@router.get("/{authorized_user_id}", response_model=AuthorizedUserResponse)
async def get_authorized_user(
    reservation_id: UUID,
    authorized_user_id: UUID,
    service: AuthorizedUserService = Depends(get_authorized_user_service),
):
    return await service.find_one(str(reservation_id), str(authorized_user_id))


@router.put("/{authorized_user_id}", response_model=AuthorizedUserResponse)
async def update_authorized_user(
    reservation_id: UUID,
    authorized_user_id: UUID,
    data: AuthorizedUserUpdate,
    service: AuthorizedUserService = Depends(get_authorized_user_service),
):
    return await service.update(str(reservation_id), str(authorized_user_id), data)


@router.patch("/{authorized_user_id}", response_model=AuthorizedUserResponse)
async def patch_authorized_user(
    reservation_id: UUID,
    authorized_user_id: UUID,
    data: AuthorizedUserPatch,
    service: AuthorizedUserService = Depends(get_authorized_user_service),
):
    return await service.patch(str(reservation_id), str(authorized_user_id), data)


@router.delete("/{authorized_user_id}", response_model=MessageResponse)
async def remove_authorized_user(
    reservation_id: UUID,
    authorized_user_id: UUID,
    service: AuthorizedUserService = Depends(get_authorized_user_service),
):
    """Soft-delete an authorized user."""
    return await service.remove(str(reservation_id), str(authorized_user_id))
