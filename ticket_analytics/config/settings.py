"""
Ticket Analytics Service
Centralized Configuration Management

Layered Pydantic settings with environment variable support. Each subsystem
(database, cache, logging, analytics engine) reads its own prefixed variables
and the top-level ``Settings`` aggregates them.
"""

from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Unit price per ticket category; Standard admission is free
DEFAULT_TICKET_PRICES: Dict[str, float] = {"Standard": 0, "Premium": 49, "VIP": 99}
DEFAULT_TOP_USERS_LIMIT = 5


class DatabaseSettings(BaseSettings):
    """Document store database configuration"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(default="ticket_analytics", description="Database name")
    user: str = Field(default="analytics", description="Database user")
    password: SecretStr = Field(default="secure_password", description="Database password")
    echo: bool = Field(default=False, description="Echo SQL queries")
    url: Optional[str] = Field(default=None, description="Full async URL (overrides host/port)")

    @property
    def async_url(self) -> str:
        """Async database URL; ``url`` wins when set (e.g. sqlite+aiosqlite in tests)"""
        if self.url:
            return self.url
        return (
            f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.db}"
        )


class RedisSettings(BaseSettings):
    """Redis Cache Configuration"""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    enabled: bool = Field(default=True, description="Use Redis for dashboard caching")
    host: str = Field(default="localhost", description="Redis host")
    port: int = Field(default=6379, description="Redis port")
    password: Optional[SecretStr] = Field(default=None, description="Redis password")
    db: int = Field(default=0, description="Redis database number")
    max_connections: int = Field(default=50, description="Max connections")
    socket_timeout: int = Field(default=5, description="Socket timeout in seconds")
    url: Optional[str] = Field(default=None, description="Redis URL (overrides host/port)")

    def get_url(self) -> str:
        """Redis connection URL - uses REDIS_URL if set, otherwise builds from host/port"""
        if self.url:
            return self.url
        if self.password:
            return f"redis://:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"
        return f"redis://{self.host}:{self.port}/{self.db}"


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE", description="Log file path")


class AnalyticsSettings(BaseSettings):
    """Rollup & forecasting engine configuration"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    # Collections
    collection: str = Field(default="analytics", description="Collection holding daily rollups")
    tickets_collection: str = Field(default="tickets", description="Raw ticket collection")
    users_collection: str = Field(default="users", description="Raw user collection")

    # Pricing (category -> unit price)
    ticket_prices: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_TICKET_PRICES),
        description="Unit price per ticket category",
    )

    # Engine tuning
    retention_days: int = Field(default=90, ge=0, description="Default rollup retention horizon")
    forecast_horizon_days: int = Field(default=7, ge=0, description="Default forecast horizon")
    min_forecast_days: int = Field(default=7, ge=2, description="Minimum history for a forecast")
    default_range_days: int = Field(default=30, ge=1, description="Default dashboard window")
    max_range_days: int = Field(default=366, ge=1, description="Longest range one request may assemble")
    top_users_limit: int = Field(default=DEFAULT_TOP_USERS_LIMIT, ge=1, description="Users listed in engagement metrics")
    realtime_sample_size: int = Field(default=100, ge=1, description="Latest tickets sampled for real-time totals")
    realtime_activity_limit: int = Field(default=10, ge=1, description="Entries in the real-time activity feed")

    # Backend
    store_backend: str = Field(default="sql", description="Document store backend: sql or memory")
    cache_ttl_seconds: int = Field(default=300, description="Dashboard cache TTL")

    @field_validator("store_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate store backend value"""
        allowed = ["sql", "memory"]
        if v.lower() not in allowed:
            raise ValueError(f"Store backend must be one of: {allowed}")
        return v.lower()


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="ticket-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        alias="CORS_ORIGINS",
        description="Allowed CORS origins",
    )

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
