"""Schema introspection.

Reads table and column metadata through SQLAlchemy's inspector and reduces it
to TableDescription objects. Only metadata is read; no rows and no DDL.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Inspector
from sqlalchemy.exc import SQLAlchemyError

from restrouter.core.connections import ConnectionConfig, ConnectionManager
from restrouter.core.errors import IntrospectionError
from restrouter.core.logging import get_logger
from restrouter.core.models import ColumnDescription, TableDescription
from restrouter.introspection.types import infer_column_type, sql_type_name

logger = get_logger(__name__)


class SchemaIntrospector:
    """Produces one TableDescription per table of the configured database.

    The introspector initializes the ConnectionManager it is given; the
    manager keeps the engine open for the models bound afterwards.
    """

    def __init__(self, manager: ConnectionManager, config: ConnectionConfig | None = None):
        self.manager = manager
        self.config = config or manager.config

    async def introspect(self) -> list[TableDescription]:
        """Enumerate tables and their columns.

        Returns:
            Table descriptions in the database's enumeration order (possibly empty)

        Raises:
            DatabaseConnectionError: If the database cannot be reached
            IntrospectionError: If the schema cannot be read
        """
        await self.manager.initialize()

        logger.info("introspection_started", url=self.config.describe(), schema=self.config.schema)
        try:
            async with self.manager.engine.connect() as conn:
                tables = await conn.run_sync(self._read_schema)
        except SQLAlchemyError as e:
            raise IntrospectionError(f"Failed to read schema: {e}") from e

        logger.info("introspection_completed", tables=len(tables))
        return tables

    def _read_schema(self, sync_conn: Connection) -> list[TableDescription]:
        """Read every selected table (runs inside the greenlet-wrapped sync connection)."""
        inspector = inspect(sync_conn)
        try:
            names = inspector.get_table_names(schema=self.config.schema)
        except SQLAlchemyError as e:
            raise IntrospectionError(f"Failed to list tables: {e}") from e

        return [self._describe_table(inspector, name) for name in self.select_tables(names)]

    def select_tables(self, names: list[str]) -> list[str]:
        """Apply the tables / skip_tables filters, keeping enumeration order."""
        allowed = set(self.config.tables) if self.config.tables is not None else None
        skipped = set(self.config.skip_tables)

        selected = [
            name
            for name in names
            if (allowed is None or name in allowed) and name not in skipped
        ]
        if allowed is not None:
            missing = allowed.difference(names)
            if missing:
                logger.warning("requested_tables_missing", tables=sorted(missing))
        return selected

    def _describe_table(self, inspector: Inspector, name: str) -> TableDescription:
        schema = self.config.schema
        try:
            columns: list[dict[str, Any]] = list(inspector.get_columns(name, schema=schema))
            pk_constraint = inspector.get_pk_constraint(name, schema=schema) or {}
        except SQLAlchemyError as e:
            raise IntrospectionError(f"Failed to read columns: {e}", table=name) from e

        pk_columns = set(pk_constraint.get("constrained_columns") or [])
        dialect = inspector.bind.dialect

        description = TableDescription(
            name=name,
            schema_name=schema,
            columns=tuple(
                ColumnDescription(
                    name=column["name"],
                    type=infer_column_type(column["type"]),
                    nullable=bool(column.get("nullable", True)),
                    primary_key=column["name"] in pk_columns,
                    autoincrement=column.get("autoincrement") is True,
                    sql_type=sql_type_name(column["type"], dialect),
                )
                for column in columns
            ),
        )

        logger.debug(
            "table_introspected",
            table=name,
            columns=len(description.columns),
            primary_keys=[c.name for c in description.primary_keys],
        )
        return description
