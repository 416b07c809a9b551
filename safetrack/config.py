"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="SafeTrack", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    # Falls back to the per-service default port when unset
    port: int | None = Field(default=None, alias="PORT")

    # Database
    database_url: str = Field(..., alias="DATABASE_URL")
    database_ssl: bool = Field(default=False, alias="DATABASE_SSL")
    db_pool_size: int = Field(default=10, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, alias="DB_MAX_OVERFLOW")

    # Startup connection retry
    db_connect_attempts: int = Field(default=5, ge=1, alias="DB_CONNECT_ATTEMPTS")
    db_connect_delay_seconds: float = Field(default=5.0, ge=0, alias="DB_CONNECT_DELAY_SECONDS")
    db_connect_backoff: float = Field(default=1.0, ge=1.0, alias="DB_CONNECT_BACKOFF")

    # JWT (required by the auth service only)
    jwt_secret_key: str | None = Field(default=None, alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Password hashing cost factor
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # Alerting
    notification_service_url: str | None = Field(
        default=None,
        alias="NOTIFICATION_SERVICE_URL",
        description="Base URL of the notification service; alerts are only logged when unset",
    )
    alert_timeout_seconds: float = Field(default=5.0, alias="ALERT_TIMEOUT_SECONDS")

    # Geofences
    geofences_geojson_path: str | None = Field(
        default=None,
        alias="GEOFENCES_GEOJSON_PATH",
        description="GeoJSON FeatureCollection used instead of the PostGIS geofences table",
    )

    # CORS
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    # Metrics
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def async_database_url(self) -> str:
        """Database URL with the asyncpg driver selected for plain PostgreSQL URLs."""
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]
