"""API router configuration per service."""

from fastapi import APIRouter

from safetrack.api.endpoints import auth, health, locations, notifications

SERVICE_ROUTERS: dict[str, list[APIRouter]] = {
    "auth": [auth.router],
    "location": [locations.router],
    "notification": [notifications.router],
}


def build_api_router(service: str) -> APIRouter:
    """Combine the health routes with the routes of one service."""
    api_router = APIRouter()
    api_router.include_router(health.router)
    for router in SERVICE_ROUTERS[service]:
        api_router.include_router(router)
    return api_router
