"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from restrouter.core.connections import ConnectionConfig


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: RESTROUTER_
    """

    model_config = SettingsConfigDict(
        env_prefix="RESTROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Target database
    database: str = Field(default="", description="Database name, or file path for sqlite")
    user: str | None = Field(default=None)
    password: str | None = Field(default=None)
    host: str | None = Field(default=None)
    port: int | None = Field(default=None)
    dialect: str = Field(default="mysql", description="mysql, mariadb, postgresql, sqlite, mssql")
    driver: str | None = Field(default=None, description="Async DBAPI driver override")
    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL, e.g. postgresql+asyncpg://user:pw@host/db",
    )
    schema_name: str | None = Field(default=None, description="Schema to introspect")
    tables: list[str] | None = Field(default=None, description="Only expose these tables")
    skip_tables: list[str] = Field(default_factory=list)

    # Model options
    timestamps: bool = Field(default=False)
    freeze_table_name: bool = Field(default=True)
    close_connection_automatically: bool = Field(default=False)
    models_directory: Path | None = Field(
        default=None,
        description="Write YAML model descriptions here (debugging aid)",
    )
    echo_sql: bool = Field(default=False)

    # Generated endpoints
    page_size: int | None = Field(
        default=None,
        ge=1,
        description="Maximum rows returned by list endpoints without ?limit (None = all)",
    )

    # API
    api_prefix: str = Field(default="")
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000)
    api_reload: bool = Field(default=False)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")  # 'json' or 'console'

    def connection_config(self) -> ConnectionConfig:
        """Build the immutable connection configuration for a pipeline run."""
        return ConnectionConfig(
            database=self.database,
            user=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            dialect=self.dialect,
            driver=self.driver,
            url=self.database_url,
            schema=self.schema_name,
            tables=tuple(self.tables) if self.tables is not None else None,
            skip_tables=tuple(self.skip_tables),
            timestamps=self.timestamps,
            freeze_table_name=self.freeze_table_name,
            close_connection_automatically=self.close_connection_automatically,
            directory=self.models_directory,
            echo_sql=self.echo_sql,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
