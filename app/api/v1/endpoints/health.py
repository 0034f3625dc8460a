"""Health check endpoints for liveness and readiness probes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import get_db
from app.schemas.health import HealthResponse, ReadinessResponse
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessResponse}},
)
async def readiness_check(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReadinessResponse | JSONResponse:
    """Return 200 if the database answers a trivial query; 503 otherwise."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(status="not_ready", database="unavailable").model_dump(),
        )
    return ReadinessResponse()
