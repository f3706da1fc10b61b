"""Fixtures for registry tests."""

import pytest

from restrouter.core.connections import ConnectionManager
from restrouter.core.models import TableDescription
from restrouter.introspection.introspector import SchemaIntrospector
from restrouter.registry.handle import ModelHandle


@pytest.fixture
async def full_tables(full_manager: ConnectionManager) -> dict[str, TableDescription]:
    """Descriptions of every table in the full database, by name."""
    tables = await SchemaIntrospector(full_manager).introspect()
    return {table.name: table for table in tables}


@pytest.fixture
def make_handle(full_manager: ConnectionManager, full_tables: dict[str, TableDescription]):
    """Factory for handles bound to the full database."""

    def _make(name: str, *, timestamps: bool = False) -> ModelHandle:
        return ModelHandle(full_tables[name], full_manager.engine, timestamps=timestamps)

    return _make
