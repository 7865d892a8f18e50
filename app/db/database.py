"""Database connection and session management."""
import logging
from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def create_primary_engine(url: str | None = None) -> AsyncEngine:
    """Create the database engine used for reads and writes.

    Queue pool sizing is skipped for SQLite, whose in-memory databases use a
    static pool that rejects it.
    """
    url = make_url(url or settings.sqlalchemy_database_url)
    pool_options = {"pool_recycle": 300, "pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        pool_options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=30,
        )
    return create_async_engine(url, echo=settings.debug, **pool_options)


engine = create_primary_engine()

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency that provides a database session.

    The session is committed when the request handler returns and rolled
    back if it raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db(bind: AsyncEngine | None = None):
    """Create tables that do not exist yet."""
    # Registers the mappers on Base.metadata.
    import app.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")


async def close_db(bind: AsyncEngine | None = None):
    """Dispose of the engine's connection pool."""
    await (bind or engine).dispose()
    logger.info("Database engine disposed")
