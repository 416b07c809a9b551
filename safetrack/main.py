"""FastAPI application factories and service entry point."""

import argparse
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from enum import StrEnum

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from pydantic import ValidationError
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException as StarletteHTTPException

from safetrack.api.router import build_api_router
from safetrack.config import Settings, get_settings
from safetrack.core.exceptions import AppException, ConfigurationError, DatabaseUnavailableError
from safetrack.database import (
    create_engine_from_settings,
    create_session_factory,
    init_schema,
    wait_for_database,
)
from safetrack.middleware.error_handler import (
    app_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from safetrack.middleware.logging import LoggingMiddleware, configure_logging
from safetrack.models.locations import metadata as locations_metadata
from safetrack.models.notifications import metadata as notifications_metadata
from safetrack.models.users import metadata as users_metadata
from safetrack.services.alert_service import AlertDispatcher, AlertSender, build_alert_sender
from safetrack.services.auth_service import AuthService
from safetrack.services.geofence_service import (
    GeofenceRepository,
    GeoJSONGeofenceRepository,
    PostGISGeofenceRepository,
)
from safetrack.services.location_service import LocationService

logger = structlog.get_logger()


class ServiceName(StrEnum):
    """Independently deployable services."""

    AUTH = "auth"
    LOCATION = "location"
    NOTIFICATION = "notification"


SERVICE_TITLES = {
    ServiceName.AUTH: "Auth",
    ServiceName.LOCATION: "Location",
    ServiceName.NOTIFICATION: "Notification",
}

DEFAULT_PORTS = {
    ServiceName.AUTH: 8080,
    ServiceName.LOCATION: 8081,
    ServiceName.NOTIFICATION: 8080,
}

SERVICE_METADATA: dict[ServiceName, MetaData] = {
    ServiceName.AUTH: users_metadata,
    ServiceName.LOCATION: locations_metadata,
    ServiceName.NOTIFICATION: notifications_metadata,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup waits for the database within the configured retry budget and
    creates the service's tables. Shutdown releases the alert channel and
    the connection pool.
    """
    settings: Settings = app.state.settings
    service: ServiceName = app.state.service
    engine: AsyncEngine = app.state.engine

    logger.info("application_startup", service=service.value, environment=settings.environment)

    connected = await wait_for_database(
        engine,
        attempts=settings.db_connect_attempts,
        delay=settings.db_connect_delay_seconds,
        backoff=settings.db_connect_backoff,
    )
    if not connected:
        logger.critical("database_unavailable", attempts=settings.db_connect_attempts)
        raise DatabaseUnavailableError(
            f"{SERVICE_TITLES[service]} service could not connect to the database "
            f"after {settings.db_connect_attempts} attempts"
        )

    await init_schema(engine, SERVICE_METADATA[service])

    yield

    logger.info("application_shutdown", service=service.value)

    dispatcher: AlertDispatcher | None = getattr(app.state, "alert_dispatcher", None)
    if dispatcher is not None:
        await dispatcher.aclose()

    await engine.dispose()
    logger.info("database_connections_closed")


def build_geofence_repository(settings: Settings) -> GeofenceRepository:
    """Pick the geofence source: a GeoJSON file when configured, PostGIS otherwise."""
    if settings.geofences_geojson_path:
        return GeoJSONGeofenceRepository.from_file(settings.geofences_geojson_path)
    return PostGISGeofenceRepository()


def create_app(
    service: ServiceName | str,
    settings: Settings | None = None,
    *,
    engine: AsyncEngine | None = None,
    geofences: GeofenceRepository | None = None,
    alert_sender: AlertSender | None = None,
) -> FastAPI:
    """
    Build the FastAPI application for one service.

    Args:
        service: Which service to build
        settings: Settings to use; loaded from the environment when omitted
        engine: Database engine; created from settings when omitted
        geofences: Geofence source for the location service
        alert_sender: Alert channel for the location service

    Returns:
        Configured application

    Raises:
        ConfigurationError: If the service's required configuration is missing
    """
    service = ServiceName(service)
    settings = settings or get_settings()
    title = SERVICE_TITLES[service]

    configure_logging(settings, service=service.value)

    # Fail before touching the database when the auth service cannot sign tokens
    auth_service = AuthService(settings) if service is ServiceName.AUTH else None

    engine = engine or create_engine_from_settings(settings)

    app = FastAPI(
        title=f"{settings.app_name} {title} Service",
        version=settings.app_version,
        description=f"{title} service of the SafeTrack tourist safety backend",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.service = service
    app.state.service_title = title
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if auth_service is not None:
        app.state.auth_service = auth_service

    if service is ServiceName.LOCATION:
        dispatcher = AlertDispatcher(
            alert_sender
            or build_alert_sender(
                settings.notification_service_url,
                timeout=settings.alert_timeout_seconds,
            )
        )
        app.state.alert_dispatcher = dispatcher
        app.state.location_service = LocationService(
            geofences or build_geofence_repository(settings),
            dispatcher,
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)  # type: ignore[arg-type]

    app.include_router(build_api_router(service.value))

    if settings.metrics_enabled:
        Instrumentator(
            should_group_status_codes=True,
            should_ignore_untemplated=False,
            should_instrument_requests_inprogress=True,
            excluded_handlers=["/docs", "/redoc", "/openapi.json", "/metrics"],
            inprogress_name="http_requests_inprogress",
            inprogress_labels=True,
        ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    return app


def create_auth_app(
    settings: Settings | None = None,
    *,
    engine: AsyncEngine | None = None,
) -> FastAPI:
    """Build the auth service."""
    return create_app(ServiceName.AUTH, settings, engine=engine)


def create_location_app(
    settings: Settings | None = None,
    *,
    engine: AsyncEngine | None = None,
    geofences: GeofenceRepository | None = None,
    alert_sender: AlertSender | None = None,
) -> FastAPI:
    """Build the location service."""
    return create_app(
        ServiceName.LOCATION,
        settings,
        engine=engine,
        geofences=geofences,
        alert_sender=alert_sender,
    )


def create_notification_app(
    settings: Settings | None = None,
    *,
    engine: AsyncEngine | None = None,
) -> FastAPI:
    """Build the notification service."""
    return create_app(ServiceName.NOTIFICATION, settings, engine=engine)


def main(argv: list[str] | None = None) -> int:
    """Run one service with uvicorn."""
    parser = argparse.ArgumentParser(description="Run a SafeTrack service.")
    parser.add_argument("service", choices=[name.value for name in ServiceName])
    parser.add_argument("--host", default=None, help="Bind address (defaults to HOST)")
    parser.add_argument("--port", type=int, default=None, help="Listen port (defaults to PORT)")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
        app = create_app(args.service, settings)
    except (ConfigurationError, ValidationError) as e:
        logger.critical("configuration_error", service=args.service, error=str(e))
        return 1

    import uvicorn

    service = ServiceName(args.service)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port or DEFAULT_PORTS[service],
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
