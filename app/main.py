"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.config.settings import get_settings
from app.core.error_handlers import domain_error_handler, request_validation_error_handler
from app.core.exceptions import DomainError
from app.core.logging import configure_logging, get_logger
from app.db.database import close_db, engine, init_db
from app.middleware.request_id import RequestIDMiddleware
from app.security import IdentityProviderClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    await init_db()
    app.state.identity_provider = IdentityProviderClient()
    logger.info("application_started")

    yield

    await app.state.identity_provider.close()
    await close_db()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="API for managing reservations and their authorized users",
        version=settings.api_version,
        lifespan=lifespan,
        swagger_ui_parameters={"persistAuthorization": True},
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    from app.api.routes import (
        authorized_users_router,
        health_router,
        reservations_router,
    )

    # Health stays outside the versioned prefix.
    app.include_router(health_router)
    app.include_router(
        reservations_router,
        prefix=f"{settings.api_prefix}/reservation",
        tags=["Reservation"],
    )
    app.include_router(
        authorized_users_router,
        prefix=f"{settings.api_prefix}/reservations/{{reservation_id}}/authorized-users",
        tags=["Authorized Users"],
    )

    from app.core.tracing import instrument_app
    instrument_app(app, engine, settings)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port, reload=get_settings().debug)
