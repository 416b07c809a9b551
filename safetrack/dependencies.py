"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from safetrack.config import Settings
from safetrack.core.security import TokenClaims
from safetrack.database import get_db
from safetrack.services.auth_service import AuthService
from safetrack.services.location_service import LocationService

# Missing tokens are reported by AuthService, not by the scheme
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    """Auth service owned by the running app."""
    return request.app.state.auth_service


def get_location_service(request: Request) -> LocationService:
    """Location service owned by the running app."""
    return request.app.state.location_service


async def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenClaims:
    """
    Extract and verify the bearer token of the request.

    Args:
        credentials: Bearer token credentials, if any
        auth_service: Service holding the signing configuration

    Returns:
        Verified token claims

    Raises:
        UnauthenticatedException: If no bearer token was sent
        ForbiddenException: If the token fails verification
    """
    token = credentials.credentials if credentials else None
    return auth_service.authenticate(token)


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
LocationServiceDep = Annotated[LocationService, Depends(get_location_service)]
CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]
