"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        HENHOUSE_DB_HOST: Database host (default: localhost)
        HENHOUSE_DB_PORT: Database port (default: 5432)
        HENHOUSE_DB_DATABASE: Database name (default: henhouse)
        HENHOUSE_DB_USERNAME: Database user (default: henhouse)
        HENHOUSE_DB_PASSWORD: Database password (required in production)
        HENHOUSE_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        HENHOUSE_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        HENHOUSE_DB_ECHO: Log emitted SQL (default: false)

    The application role must not own the tables or hold BYPASSRLS,
    otherwise PostgreSQL row-level security does not apply to it.
    """

    model_config = SettingsConfigDict(
        env_prefix="HENHOUSE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="henhouse", description="Database name")
    username: str = Field(default="henhouse", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log emitted SQL statements")

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class HusbandrySettings(BaseSettings):
    """Settings for the husbandry bounded context.

    Environment variables:
        HENHOUSE_HUSBANDRY_DEFAULT_SEARCH_LIMIT: Autocomplete results when the
            caller does not ask for a limit (default: 20)
        HENHOUSE_HUSBANDRY_MAX_SEARCH_LIMIT: Upper bound for any requested
            autocomplete limit (default: 100)
    """

    model_config = SettingsConfigDict(
        env_prefix="HENHOUSE_HUSBANDRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_search_limit: int = Field(
        default=20,
        description="Default number of autocomplete results",
        ge=1,
    )
    max_search_limit: int = Field(
        default=100,
        description="Maximum number of autocomplete results",
        ge=1,
        le=1000,
    )

    @model_validator(mode="after")
    def validate_search_limits(self) -> "HusbandrySettings":
        """Validate max >= default."""
        if self.max_search_limit < self.default_search_limit:
            raise ValueError(
                f"max_search_limit ({self.max_search_limit}) must be >= "
                f"default_search_limit ({self.default_search_limit})"
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="HENHOUSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Henhouse", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def husbandry(self) -> HusbandrySettings:
        """Get husbandry settings."""
        return get_husbandry_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_husbandry_settings() -> HusbandrySettings:
    """Get cached husbandry settings."""
    return HusbandrySettings()
