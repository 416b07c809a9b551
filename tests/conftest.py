"""Shared pytest fixtures.

Every service runs against one in-memory SQLite database per test, shared
across sessions through a StaticPool, so no PostgreSQL server is needed.
"""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from safetrack.config import Settings
from safetrack.database import init_schema
from safetrack.main import create_auth_app, create_location_app, create_notification_app
from safetrack.models.locations import metadata as locations_metadata
from safetrack.models.notifications import metadata as notifications_metadata
from safetrack.models.users import metadata as users_metadata
from safetrack.services.alert_service import AlertSender, GeofenceAlert
from safetrack.services.geofence_service import GeoJSONGeofenceRepository

TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Degree-aligned square around central Bengaluru
SAFE_ZONE_FEATURE = {
    "type": "Feature",
    "properties": {"name": "Bengaluru Central"},
    "geometry": {
        "type": "Polygon",
        "coordinates": [
            [
                [77.0, 12.0],
                [78.0, 12.0],
                [78.0, 13.0],
                [77.0, 13.0],
                [77.0, 12.0],
            ]
        ],
    },
}


class RecordingAlertSender(AlertSender):
    """Alert sender that keeps every alert it receives."""

    def __init__(self) -> None:
        self.alerts: list[GeofenceAlert] = []
        self.closed = False

    async def send(self, alert: GeofenceAlert) -> None:
        self.alerts.append(alert)

    async def aclose(self) -> None:
        self.closed = True


@asynccontextmanager
async def client_for(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to an app; server errors come back as 500 responses."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: fast hashing, no metrics, no startup waits."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        jwt_secret_key="test-secret-key",
        bcrypt_rounds=4,
        metrics_enabled=False,
        log_format="console",
        db_connect_attempts=2,
        db_connect_delay_seconds=0,
        notification_service_url=None,
        geofences_geojson_path=None,
    )


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory database with every service's tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    for metadata in (users_metadata, locations_metadata, notifications_metadata):
        await init_schema(engine, metadata)

    yield engine

    await engine.dispose()


@pytest.fixture
def auth_app(settings: Settings, engine: AsyncEngine) -> FastAPI:
    """Auth service app."""
    return create_auth_app(settings, engine=engine)


@pytest_asyncio.fixture
async def auth_client(auth_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the auth service."""
    async with client_for(auth_app) as client:
        yield client


@pytest.fixture
def alert_sender() -> RecordingAlertSender:
    """Alert sender recording out-of-zone alerts."""
    return RecordingAlertSender()


@pytest.fixture
def geofences() -> GeoJSONGeofenceRepository:
    """One safe zone around central Bengaluru."""
    return GeoJSONGeofenceRepository([SAFE_ZONE_FEATURE])


@pytest.fixture
def location_app(
    settings: Settings,
    engine: AsyncEngine,
    geofences: GeoJSONGeofenceRepository,
    alert_sender: RecordingAlertSender,
) -> FastAPI:
    """Location service app with in-memory geofences."""
    return create_location_app(
        settings,
        engine=engine,
        geofences=geofences,
        alert_sender=alert_sender,
    )


@pytest_asyncio.fixture
async def location_client(location_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the location service."""
    async with client_for(location_app) as client:
        yield client


@pytest.fixture
def notification_app(settings: Settings, engine: AsyncEngine) -> FastAPI:
    """Notification service app."""
    return create_notification_app(settings, engine=engine)


@pytest_asyncio.fixture
async def notification_client(notification_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the notification service."""
    async with client_for(notification_app) as client:
        yield client
