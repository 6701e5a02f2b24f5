"""Health check routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from risk_monitor.core.config import get_settings
from risk_monitor.core.database import Database
from risk_monitor.core.dependencies import get_database
from risk_monitor.core.errors import PersistenceError

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ReadyResponse(BaseModel):
    """Readiness check response."""

    status: str
    database: str


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is running.",
)
async def health_check() -> HealthResponse:
    """Return service health status."""
    return HealthResponse(
        status="healthy",
        version=get_settings().app.version,
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness check",
    description="Ping the database; 503 when it cannot be reached.",
    responses={503: {"description": "Database unreachable"}},
)
async def readiness_check(database: Database = Depends(get_database)) -> ReadyResponse | JSONResponse:
    """Return service readiness status."""
    try:
        await database.ping()
    except PersistenceError as exc:
        return JSONResponse(
            status_code=503,
            content={"success": False, "error": exc.message, "details": exc.details},
        )
    return ReadyResponse(
        status="ready",
        database="connected",
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Kubernetes liveness probe endpoint.",
)
async def liveness_check() -> dict:
    """Return liveness status."""
    return {"status": "alive"}
