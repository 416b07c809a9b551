"""Liveness and health check endpoints."""

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

from safetrack.database import check_database_connection
from safetrack.dependencies import AppSettings

router = APIRouter()


class LivenessResponse(BaseModel):
    """Liveness response model."""

    message: str
    status: str


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    environment: str
    database: str


@router.get(
    "/",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Liveness probe",
)
async def root(request: Request) -> LivenessResponse:
    """Report that the service process is up."""
    return LivenessResponse(
        message=f"{request.app.state.service_title} Service is running!",
        status="OK",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Health check with database status",
)
async def health_check(request: Request, settings: AppSettings) -> HealthResponse:
    """
    Health check including database reachability.

    Returns:
        Health status, degraded when the database is unreachable
    """
    db_healthy = await check_database_connection(request.app.state.engine)

    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        service=request.app.state.service.value,
        version=settings.app_version,
        environment=settings.environment,
        database="healthy" if db_healthy else "unhealthy",
    )
