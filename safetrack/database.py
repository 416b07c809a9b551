"""Database configuration and connection management."""

import asyncio
import ssl
from collections.abc import AsyncGenerator
from typing import Any

import structlog
from fastapi import Request
from sqlalchemy import MetaData, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from safetrack.config import Settings

logger = structlog.get_logger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create an async engine with connection pooling for the configured database."""
    url = settings.async_database_url

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.debug)

    connect_args: dict[str, Any] = {}
    if url.startswith("postgresql+asyncpg://"):
        connect_args["server_settings"] = {"application_name": settings.app_name}

    if settings.database_ssl:
        # Managed Postgres providers often present certificates we cannot verify
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = context

    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=3600,
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency yielding a request-scoped session from the app's pool."""
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def wait_for_database(
    engine: AsyncEngine,
    attempts: int = 5,
    delay: float = 5.0,
    backoff: float = 1.0,
) -> bool:
    """
    Try to reach the database a bounded number of times.

    Args:
        engine: Engine to test
        attempts: Maximum number of connection attempts
        delay: Seconds to wait after a failed attempt
        backoff: Multiplier applied to the delay after each failure

    Returns:
        True once a connection succeeds, False when all attempts failed
    """
    wait = delay
    for attempt in range(1, attempts + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(
                "database_connect_retry",
                attempt=attempt,
                attempts=attempts,
                error=str(e),
            )
            if attempt < attempts:
                await asyncio.sleep(wait)
                wait *= backoff
            continue

        logger.info("database_connected", attempt=attempt)
        return True

    return False


async def init_schema(engine: AsyncEngine, metadata: MetaData) -> None:
    """Create the given tables if they do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all, checkfirst=True)

    logger.info("schema_initialized", tables=sorted(metadata.tables))


async def check_database_connection(engine: AsyncEngine) -> bool:
    """Check if database connection is healthy."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError):
        return False
