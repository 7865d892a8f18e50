"""Shared fixtures: in-memory database, identity provider stub and API client."""
from datetime import date
from typing import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.routes.dependencies import get_identity_provider
from app.config.settings import Settings
from app.db.database import Base, get_db
from app.main import create_app
from app.models import AuthorizedUser, Reservation
from app.security import IdentityProviderClient

VALID_TOKEN = "valid-token"
EMPTY_PROFILE_TOKEN = "empty-profile-token"

IDP_SETTINGS = Settings(
    keycloak_gateway_url="http://idp.test",
    keycloak_me_endpoint="/auth/me",
)


def identity_provider_handler(request: httpx.Request) -> httpx.Response:
    """Stand-in for the identity provider's "me" endpoint."""
    authorization = request.headers.get("Authorization")
    if authorization == f"Bearer {VALID_TOKEN}":
        return httpx.Response(200, json={"id": "user-1", "username": "alice", "email": "alice@example.com"})
    if authorization == f"Bearer {EMPTY_PROFILE_TOKEN}":
        return httpx.Response(200, content=b"")
    return httpx.Response(401, json={"error": "invalid_token"})


@pytest.fixture
def identity_provider() -> IdentityProviderClient:
    return IdentityProviderClient(
        settings=IDP_SETTINGS,
        transport=httpx.MockTransport(identity_provider_handler),
    )


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncIterator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker, identity_provider) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app()

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await identity_provider.close()


@pytest_asyncio.fixture
async def seeded_reservations(session_maker) -> dict[str, Reservation]:
    """Three reservations: two live, one soft-deleted."""
    async with session_maker() as session:
        meeting = Reservation(
            initial_date=date(2025, 11, 1),
            end_date=date(2025, 11, 2),
            details="Team meeting room",
            resource_id="123e4567-e89b-12d3-a456-426614174000",
            deleted=False,
            authorized_users=[
                AuthorizedUser(user_id="123e4567-e89b-12d3-a456-426614174010", name="John Doe", deleted=False),
                AuthorizedUser(user_id="123e4567-e89b-12d3-a456-426614174011", name="Jane Smith", deleted=True),
            ],
        )
        lesson = Reservation(
            initial_date=date(2025, 12, 10),
            end_date=date(2025, 12, 15),
            details="Chemistry lesson",
            lesson_id="123e4567-e89b-12d3-a456-426614174001",
            deleted=False,
            authorized_users=[],
        )
        archived = Reservation(
            initial_date=date(2025, 10, 1),
            end_date=date(2025, 10, 3),
            details="Old meeting",
            deleted=True,
            authorized_users=[],
        )
        session.add_all([meeting, lesson, archived])
        await session.commit()
        return {"meeting": meeting, "lesson": lesson, "archived": archived}
