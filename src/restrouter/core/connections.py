"""Connection configuration and engine management for the target database.

Usage:
    from restrouter.core.connections import ConnectionConfig, ConnectionManager

    config = ConnectionConfig(database="shop", user="admin", password="secret")
    manager = ConnectionManager(config)
    await manager.initialize()

    async with manager.engine.connect() as conn:
        ...

    await manager.close()

A caller that already holds an ``AsyncEngine`` can hand it over with
``ConnectionManager(config, engine=engine)``; such an engine is verified but
never disposed by the manager.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, DBAPIError, NoSuchModuleError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from restrouter.core.errors import DatabaseConnectionError
from restrouter.core.logging import get_logger

logger = get_logger(__name__)

# Async DBAPI driver used for each dialect unless ConnectionConfig.driver is set
ASYNC_DRIVERS: dict[str, str] = {
    "sqlite": "aiosqlite",
    "mysql": "aiomysql",
    "mariadb": "aiomysql",
    "postgresql": "asyncpg",
    "mssql": "aioodbc",
}

_DIALECT_ALIASES = {"postgres": "postgresql"}


@dataclass(frozen=True)
class ConnectionConfig:
    """Immutable description of the database to expose.

    Attributes:
        database: Database name (file path for sqlite)
        user: User that connects
        password: Password of that user
        host: Database host (ignored for sqlite)
        port: Database port
        dialect: SQLAlchemy dialect name (mysql, postgresql, sqlite, ...)
        driver: Async DBAPI driver, defaults to ASYNC_DRIVERS[dialect]
        url: Full SQLAlchemy URL; overrides every field above
        schema: Schema to introspect instead of the default one
        tables: Only expose these tables
        skip_tables: Never expose these tables
        timestamps: Maintain createdAt/updatedAt columns on write
        freeze_table_name: Use table names as resource names without pluralizing
        close_connection_automatically: Release introspection connections once done
        directory: Where to write model descriptions (None = don't write)
        echo_sql: Echo SQL statements (for debugging)
    """

    database: str
    user: str | None = None
    password: str | None = field(default=None, repr=False)
    host: str | None = None
    port: int | None = None
    dialect: str = "mysql"
    driver: str | None = None
    url: str | None = field(default=None, repr=False)
    schema: str | None = None
    tables: tuple[str, ...] | None = None
    skip_tables: tuple[str, ...] = ()
    timestamps: bool = False
    freeze_table_name: bool = True
    close_connection_automatically: bool = False
    directory: Path | None = None
    echo_sql: bool = False

    def __post_init__(self) -> None:
        # Normalize list-like inputs so the config stays hashable and immutable
        if self.tables is not None and not isinstance(self.tables, tuple):
            object.__setattr__(self, "tables", tuple(self.tables))
        if not isinstance(self.skip_tables, tuple):
            object.__setattr__(self, "skip_tables", tuple(self.skip_tables))
        if self.directory is not None and not isinstance(self.directory, Path):
            object.__setattr__(self, "directory", Path(self.directory))

    @classmethod
    def for_sqlite(cls, path: Path | str, **kwargs: Any) -> ConnectionConfig:
        """Create config for a SQLite database file."""
        return cls(database=str(path), dialect="sqlite", **kwargs)

    def with_options(self, **kwargs: Any) -> ConnectionConfig:
        """Return a copy with some attributes overridden."""
        return replace(self, **kwargs)

    @property
    def dialect_name(self) -> str:
        return _DIALECT_ALIASES.get(self.dialect, self.dialect)

    def sqlalchemy_url(self) -> URL:
        """Build the async SQLAlchemy URL for this configuration."""
        if self.url:
            return make_url(self.url)

        dialect = self.dialect_name
        driver = self.driver or ASYNC_DRIVERS.get(dialect)
        drivername = f"{dialect}+{driver}" if driver else dialect

        if dialect == "sqlite":
            return URL.create(drivername, database=self.database)

        return URL.create(
            drivername,
            username=self.user,
            password=self.password,
            host=self.host or "localhost",
            port=self.port,
            database=self.database,
        )

    def describe(self) -> str:
        """URL rendering safe for logs and error messages."""
        try:
            url = self.sqlalchemy_url()
        except ArgumentError:
            return "<invalid url>"
        return url.render_as_string(hide_password=True)


@dataclass
class ConnectionManager:
    """Owns (or wraps) the AsyncEngine shared by the introspector and every model.

    Thread Safety:
    - The engine and its pool are safe to share between concurrent requests
    - Each CRUD invocation checks out its own connection
    """

    config: ConnectionConfig
    engine_override: AsyncEngine | None = field(default=None, repr=False)
    _engine: AsyncEngine | None = field(default=None, init=False, repr=False)
    _initialized: bool = field(default=False, init=False, repr=False)
    _init_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    @property
    def owns_engine(self) -> bool:
        """Whether close() disposes the engine."""
        return self.engine_override is None

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Create the engine (unless supplied) and verify it can connect.

        Safe to call multiple times (idempotent).

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        async with self._init_lock:
            if self._initialized:
                return

            engine = self.engine_override or self._create_engine()
            try:
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            except (DBAPIError, OSError) as e:
                if self.owns_engine:
                    await engine.dispose()
                logger.error("database_unreachable", url=self.config.describe(), error=str(e))
                raise DatabaseConnectionError(
                    f"Cannot connect to {self.config.describe()}: {e}"
                ) from e

            self._engine = engine
            self._initialized = True
            logger.debug("database_connected", url=self.config.describe())

    def _create_engine(self) -> AsyncEngine:
        """Create the async engine described by the configuration."""
        try:
            url = self.config.sqlalchemy_url()
        except ArgumentError as e:
            raise DatabaseConnectionError(f"Invalid database URL: {e}") from e

        try:
            engine = create_async_engine(url, echo=self.config.echo_sql)
        except (ArgumentError, NoSuchModuleError, ImportError) as e:
            raise DatabaseConnectionError(
                f"Cannot create engine for {url.render_as_string(hide_password=True)}: {e}"
            ) from e

        if engine.dialect.name == "sqlite":

            @event.listens_for(engine.sync_engine, "connect")
            def set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        return engine

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ConnectionManager not initialized. Call await manager.initialize() first."
            )

    @property
    def engine(self) -> AsyncEngine:
        """Get the SQLAlchemy async engine.

        Raises:
            RuntimeError: If manager not initialized
        """
        self._ensure_initialized()
        assert self._engine is not None
        return self._engine

    async def release(self) -> None:
        """Close pooled connections; the engine reconnects on next use.

        A supplied engine is left untouched.
        """
        if self._engine is not None and self.owns_engine:
            await self._engine.dispose()
            logger.debug("database_connections_released", url=self.config.describe())

    async def close(self) -> None:
        """Dispose the engine if this manager created it.

        Safe to call multiple times.
        """
        if self._engine is not None and self.owns_engine:
            await self._engine.dispose()
        self._engine = None
        self._initialized = False
