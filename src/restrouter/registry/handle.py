"""Model handles - a table description bound to the live engine.

A ModelHandle builds a SQLAlchemy Core ``Table`` from the introspected column
descriptors and exposes the row operations the generated endpoints need.
Every call checks out its own connection, so one handle can serve concurrent
requests.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping, Sequence
from datetime import UTC, date, datetime, time
from typing import Any

from sqlalchemy import Column, MetaData, Table, delete, insert, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql import Select

from restrouter.core.errors import ConfigurationError, NotFoundError, ValidationError
from restrouter.core.logging import get_logger
from restrouter.core.models import ColumnDescription, ColumnType, TableDescription
from restrouter.introspection.types import bind_type, coerce_value, decode_value

logger = get_logger(__name__)

CREATED_AT_COLUMNS = ("createdAt", "created_at")
UPDATED_AT_COLUMNS = ("updatedAt", "updated_at")


def build_table(description: TableDescription) -> Table:
    """Build a Core Table from column descriptors.

    Each handle gets its own MetaData so a replacement handle for the same
    table name never conflicts with the one it replaces.
    """
    return Table(
        description.name,
        MetaData(),
        *(
            Column(
                column.name,
                bind_type(column.type, column.sql_type),
                primary_key=column.primary_key,
                nullable=column.nullable,
            )
            for column in description.columns
        ),
        schema=description.schema_name,
    )


class ModelHandle:
    """Queryable binding between one TableDescription and the engine."""

    def __init__(
        self,
        description: TableDescription,
        engine: AsyncEngine,
        *,
        timestamps: bool = False,
    ):
        self.description = description
        self.engine = engine
        self.timestamps = timestamps
        self.table = build_table(description)

    def __repr__(self) -> str:
        return f"ModelHandle(name={self.name!r}, columns={self.description.column_names!r})"

    @property
    def name(self) -> str:
        return self.description.name

    @property
    def key_column(self) -> ColumnDescription | None:
        """The single primary-key column, or None when there are zero or several."""
        keys = self.description.primary_keys
        if len(keys) == 1:
            return keys[0]
        return None

    @property
    def addressable(self) -> bool:
        """Whether rows can be addressed by a single id."""
        return self.key_column is not None

    def _require_key(self) -> tuple[ColumnDescription, Column[Any]]:
        key = self.key_column
        if key is None:
            count = len(self.description.primary_keys)
            reason = "no primary key" if count == 0 else f"a composite primary key ({count} columns)"
            raise ConfigurationError(
                f"Model '{self.name}' has no addressable id: the table has {reason}"
            )
        return key, self.table.c[key.name]

    def parse_id(self, raw_id: str) -> Any:
        """Convert an id from the URL to the key column's type."""
        key, _ = self._require_key()
        try:
            return coerce_value(key.type, raw_id, key.sql_type)
        except ValueError as e:
            raise ValidationError(
                f"Invalid id {raw_id!r} for '{self.name}.{key.name}' ({key.type.value})"
            ) from e

    def check_fields(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Reject fields that are not columns of this model and decode the rest.

        Temporal values arrive as ISO 8601 strings and binary values as base64.
        """
        unknown = sorted(set(payload).difference(self.description.column_names))
        if unknown:
            raise ValidationError(
                f"Unknown field(s) for '{self.name}': {', '.join(unknown)}"
            )

        values: dict[str, Any] = {}
        for name, value in payload.items():
            column = self.description.get_column(name)
            assert column is not None
            try:
                values[name] = decode_value(column.type, value, column.sql_type)
            except ValueError as e:
                raise ValidationError(
                    f"Invalid value for '{self.name}.{name}' ({column.type.value}): {e}"
                ) from e
        return values

    def _column(self, name: str) -> tuple[ColumnDescription, Column[Any]]:
        column = self.description.get_column(name)
        if column is None:
            raise ValidationError(f"Unknown field for '{self.name}': {name}")
        return column, self.table.c[name]

    def _timestamp(self, column: ColumnDescription) -> datetime | str:
        now = datetime.now(UTC)
        if column.type != ColumnType.DATE:
            return now.isoformat(sep=" ")
        sql_type = (column.sql_type or "").upper()
        if "WITH TIME ZONE" in sql_type or sql_type == "TIMESTAMPTZ":
            return now
        # Columns without a time zone take naive UTC
        return now.replace(tzinfo=None)

    def _stamp(self, values: dict[str, Any], *, created: bool) -> dict[str, Any]:
        if not self.timestamps:
            return values
        targets = UPDATED_AT_COLUMNS + (CREATED_AT_COLUMNS if created else ())
        for name in targets:
            column = self.description.get_column(name)
            if column is not None and name not in values:
                values[name] = self._timestamp(column)
        return values

    def _serialize(self, row: Mapping[str, Any]) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name, value in row.items():
            if isinstance(value, (bytes, bytearray, memoryview)):
                value = base64.b64encode(bytes(value)).decode("ascii")
            elif isinstance(value, (date, time)):
                value = value.isoformat()
            data[name] = value
        return data

    def _select_by_key(self, key_column: Column[Any], key: Any) -> Select[Any]:
        return select(self.table).where(key_column == key)

    async def list_rows(
        self,
        *,
        filters: Mapping[str, str] | None = None,
        sort: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return rows, optionally filtered by column equality, sorted and sliced.

        Without sort, rows are ordered by the primary key when there is a
        single one; otherwise the database's order applies.
        """
        stmt = select(self.table)

        for name, raw in (filters or {}).items():
            column, sql_column = self._column(name)
            try:
                value = coerce_value(column.type, raw, column.sql_type)
            except ValueError as e:
                raise ValidationError(
                    f"Invalid filter value {raw!r} for '{self.name}.{name}'"
                ) from e
            stmt = stmt.where(sql_column == value)

        if sort:
            for entry in sort:
                descending = entry.startswith("-")
                _, sql_column = self._column(entry.lstrip("+-"))
                stmt = stmt.order_by(sql_column.desc() if descending else sql_column.asc())
        elif self.key_column is not None:
            stmt = stmt.order_by(self.table.c[self.key_column.name])

        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            return [self._serialize(row) for row in result.mappings()]

    async def fetch(self, raw_id: str) -> dict[str, Any]:
        """Return the row with the given id.

        Raises:
            ConfigurationError: If the model has no single primary key
            ValidationError: If the id does not fit the key type
            NotFoundError: If no row matches
        """
        key = self.parse_id(raw_id)
        _, key_column = self._require_key()

        async with self.engine.connect() as conn:
            result = await conn.execute(self._select_by_key(key_column, key))
            row = result.mappings().first()

        if row is None:
            raise NotFoundError(f"{self.name} {raw_id} not found")
        return self._serialize(row)

    async def create(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a row from a full or partial payload and return it as stored."""
        values = self._stamp(self.check_fields(payload), created=True)

        async with self.engine.begin() as conn:
            try:
                result = await conn.execute(insert(self.table).values(values))
            except IntegrityError as e:
                raise ValidationError(f"Cannot create {self.name}: {e.orig}") from e

            key = self.key_column
            if key is None:
                return self._serialize(values)

            if key.name in values:
                key_value = values[key.name]
            elif result.inserted_primary_key:
                key_value = result.inserted_primary_key[0]
            else:
                key_value = None
            if key_value is None:
                return self._serialize(values)

            stored = await conn.execute(self._select_by_key(self.table.c[key.name], key_value))
            row: RowMapping | None = stored.mappings().first()

        logger.debug("row_created", model=self.name, id=key_value)
        return self._serialize(row if row is not None else values)

    async def update(self, raw_id: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Apply a partial payload to the row with the given id and return it.

        Raises:
            ConfigurationError: If the model has no single primary key
            ValidationError: If the payload or id does not fit the model
            NotFoundError: If no row matches
        """
        key = self.parse_id(raw_id)
        key_desc, key_column = self._require_key()
        values = self._stamp(self.check_fields(payload), created=False)

        async with self.engine.begin() as conn:
            if values:
                try:
                    result = await conn.execute(
                        update(self.table).where(key_column == key).values(values)
                    )
                except IntegrityError as e:
                    raise ValidationError(f"Cannot update {self.name} {raw_id}: {e.orig}") from e
                if result.rowcount == 0:
                    raise NotFoundError(f"{self.name} {raw_id} not found")
                key = values.get(key_desc.name, key)

            stored = await conn.execute(self._select_by_key(key_column, key))
            row = stored.mappings().first()

        if row is None:
            raise NotFoundError(f"{self.name} {raw_id} not found")
        logger.debug("row_updated", model=self.name, id=raw_id)
        return self._serialize(row)

    async def delete(self, raw_id: str) -> None:
        """Delete the row with the given id.

        Deleting is not idempotent: a missing row is always NotFoundError.
        """
        key = self.parse_id(raw_id)
        _, key_column = self._require_key()

        async with self.engine.begin() as conn:
            try:
                result = await conn.execute(delete(self.table).where(key_column == key))
            except IntegrityError as e:
                raise ValidationError(f"Cannot delete {self.name} {raw_id}: {e.orig}") from e
            if result.rowcount == 0:
                raise NotFoundError(f"{self.name} {raw_id} not found")
        logger.debug("row_deleted", model=self.name, id=raw_id)
