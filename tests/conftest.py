"""Shared pytest fixtures for all tests."""

import os
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI
from sqlalchemy import create_engine, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from restrouter.core.config import get_settings
from restrouter.core.connections import ConnectionConfig, ConnectionManager
from restrouter.core.models import ColumnDescription, ColumnType, TableDescription
from restrouter.pipeline import RESTRouter, RouterBuild
from restrouter.registry.handle import ModelHandle

SHOP_SCHEMA = [
    "CREATE TABLE users (id INTEGER PRIMARY KEY, name VARCHAR(100) NOT NULL)",
    "CREATE TABLE orders (id INTEGER PRIMARY KEY, user_id INTEGER REFERENCES users(id), total FLOAT)",
    "INSERT INTO users (id, name) VALUES (1, 'Alice'), (2, 'Bob')",
    "INSERT INTO orders (id, user_id, total) VALUES (10, 1, 9.5), (11, 2, 20.0)",
]

EXTRA_SCHEMA = [
    # No primary key at all
    "CREATE TABLE audit_log (event VARCHAR(50), level INTEGER)",
    # Composite primary key
    "CREATE TABLE order_items (order_id INTEGER, line INTEGER, sku VARCHAR(20), "
    "PRIMARY KEY (order_id, line))",
    # Timestamped table
    'CREATE TABLE notes (id INTEGER PRIMARY KEY, body TEXT, "createdAt" DATETIME, '
    '"updatedAt" DATETIME)',
    # Mixed types
    "CREATE TABLE products (sku VARCHAR(20) PRIMARY KEY, price NUMERIC(10, 2), active BOOLEAN, "
    "added DATE, image BLOB)",
    "INSERT INTO audit_log (event, level) VALUES ('login', 1), ('logout', 1)",
]


def create_sqlite_database(path: Path, statements: list[str]) -> Path:
    """Create a SQLite database file and run the given statements in it."""
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        for statement in statements:
            conn.execute(text(statement))
    engine.dispose()
    return path


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep RESTROUTER_* variables of the host out of tests."""
    for key in list(os.environ):
        if key.startswith("RESTROUTER_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def shop_db(tmp_path: Path) -> Path:
    """SQLite database with users(id PK, name) and orders(id PK, user_id, total)."""
    return create_sqlite_database(tmp_path / "shop.db", SHOP_SCHEMA)


@pytest.fixture
def full_db(tmp_path: Path) -> Path:
    """Shop database plus keyless, composite-key, timestamped and mixed-type tables."""
    return create_sqlite_database(tmp_path / "full.db", SHOP_SCHEMA + EXTRA_SCHEMA)


@pytest.fixture
def empty_db(tmp_path: Path) -> Path:
    """SQLite database without any table."""
    return create_sqlite_database(tmp_path / "empty.db", [])


@pytest.fixture
def shop_config(shop_db: Path) -> ConnectionConfig:
    return ConnectionConfig.for_sqlite(shop_db)


@pytest.fixture
def full_config(full_db: Path) -> ConnectionConfig:
    return ConnectionConfig.for_sqlite(full_db)


@pytest.fixture
async def full_manager(full_config: ConnectionConfig) -> AsyncIterator[ConnectionManager]:
    """Initialized connection manager on the full database."""
    manager = ConnectionManager(full_config)
    await manager.initialize()
    yield manager
    await manager.close()


@pytest.fixture
async def full_build(full_config: ConnectionConfig) -> AsyncIterator[RouterBuild]:
    """Completed pipeline run over the full database."""
    rest = RESTRouter.from_config(full_config.with_options(timestamps=True))
    build = await rest.create_router()
    yield build
    await rest.close()


@pytest.fixture
async def client(full_build: RouterBuild) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client against an app with the generated router mounted at the root."""
    app = FastAPI()
    app.include_router(full_build.router)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
async def idle_engine() -> AsyncIterator[AsyncEngine]:
    """Engine that is never connected; handles only need it for binding."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    yield engine
    await engine.dispose()


@pytest.fixture
def model_factory(idle_engine: AsyncEngine) -> Callable[..., ModelHandle]:
    """Build a handle for a table with an integer id key (or none)."""

    def _make(name: str, *, keyed: bool = True) -> ModelHandle:
        columns = [ColumnDescription(name="value", type=ColumnType.STRING)]
        if keyed:
            columns.insert(0, ColumnDescription(name="id", type=ColumnType.INTEGER, primary_key=True))
        return ModelHandle(TableDescription(name=name, columns=tuple(columns)), idle_engine)

    return _make


@pytest.fixture
def make_db(tmp_path: Path) -> Callable[[list[str]], Path]:
    """Factory for a one-off SQLite database built from DDL statements."""

    def _make(statements: list[str]) -> Path:
        return create_sqlite_database(tmp_path / "custom.db", statements)

    return _make
