"""Shared dependencies for API routes."""
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError
from app.core.logging import bind_user_context
from app.db.database import get_db
from app.security import AuthenticatedUser, IdentityProviderClient
from app.services.authorized_user import AuthorizedUserService
from app.services.reservation import ReservationService


def get_identity_provider(request: Request) -> IdentityProviderClient:
    """Identity provider client created and closed by the application lifespan."""
    client = getattr(request.app.state, "identity_provider", None)
    if client is None:
        raise RuntimeError("Identity provider client is not initialized; the application lifespan has not run")
    return client


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token of a ``Bearer <token>`` header value.

    Raises:
        AuthenticationError: header missing, another scheme, or empty token
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError(
            "Missing or invalid Authorization header",
            code="AUTH_HEADER_INVALID",
        )

    token = authorization[len("Bearer "):]
    if not token.strip():
        raise AuthenticationError("Token not provided", code="AUTH_TOKEN_MISSING")
    return token


async def get_current_user(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
    identity_provider: IdentityProviderClient = Depends(get_identity_provider),
) -> AuthenticatedUser:
    """Bearer guard: validate the token against the identity provider.

    The resolved user is also stored on ``request.state.user``.
    """
    token = extract_bearer_token(authorization)
    user = await identity_provider.fetch_user(token)

    request.state.user = user
    bind_user_context(str(user.id) if user.id is not None else None)
    return user


def get_reservation_service(db: AsyncSession = Depends(get_db)) -> ReservationService:
    return ReservationService(db)


def get_authorized_user_service(db: AsyncSession = Depends(get_db)) -> AuthorizedUserService:
    return AuthorizedUserService(db)
