"""Health check endpoints for monitoring system status."""
import time
from datetime import datetime

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import text

from app.config.settings import get_settings
from app.core.logging import get_logger
from app.db import database

router = APIRouter(prefix="/health", tags=["health"])
logger = get_logger(__name__)


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="healthy or unhealthy")
    app: str
    version: str
    timestamp: str = Field(..., description="ISO 8601 timestamp of check")
    database: dict = Field(..., description="Database status and response time")


async def check_database_health() -> tuple[bool, float]:
    """Run ``SELECT 1`` and report success and response time in ms."""
    try:
        start_time = time.time()
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True, (time.time() - start_time) * 1000
    except Exception as e:
        logger.warning("database_health_check_failed", error=str(e))
        return False, 0


@router.get("", response_model=HealthCheckResponse)
async def health_check():
    """
    Public health check endpoint.

    Reports database reachability without requiring authentication.
    """
    settings = get_settings()
    healthy, response_time = await check_database_health()
    return HealthCheckResponse(
        status="healthy" if healthy else "unhealthy",
        app=settings.app_name,
        version=settings.api_version,
        timestamp=datetime.utcnow().isoformat(),
        database={
            "status": "healthy" if healthy else "unhealthy",
            "response_time_ms": round(response_time, 2),
        },
    )


@router.get("/readiness")
async def readiness_check():
    """Returns 503 until the database accepts connections."""
    healthy, _ = await check_database_health()
    if not healthy:
        raise HTTPException(status_code=503, detail="Database not ready")
    return {"status": "ready"}


@router.get("/liveness")
async def liveness_check():
    return {"status": "alive"}
