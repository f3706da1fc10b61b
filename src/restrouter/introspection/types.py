"""Mapping between SQLAlchemy types and ColumnType tags."""

from __future__ import annotations

import base64
from datetime import date, datetime, time
from typing import Any

from sqlalchemy import types as sqltypes
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import CompileError

from restrouter.core.models import ColumnType

_TEMPORAL_TYPES = (sqltypes.Date, sqltypes.DateTime, sqltypes.Time, sqltypes.Interval)
_BINARY_TYPES = (sqltypes.LargeBinary, sqltypes.BINARY, sqltypes.VARBINARY)
# Float stopped subclassing Numeric in SQLAlchemy 2.1
_NUMERIC_TYPES = (sqltypes.Numeric, sqltypes.Float)


def infer_column_type(sql_type: sqltypes.TypeEngine) -> ColumnType:
    """Reduce a reflected SQLAlchemy type to its semantic tag.

    Boolean is checked before Integer because some dialects implement
    booleans on top of integer storage.
    """
    if isinstance(sql_type, sqltypes.Boolean):
        return ColumnType.BOOLEAN
    if isinstance(sql_type, sqltypes.Integer):
        return ColumnType.INTEGER
    if isinstance(sql_type, _NUMERIC_TYPES):
        return ColumnType.FLOAT
    if isinstance(sql_type, _TEMPORAL_TYPES):
        return ColumnType.DATE
    if isinstance(sql_type, _BINARY_TYPES):
        return ColumnType.BINARY
    if isinstance(sql_type, (sqltypes.String, sqltypes.Uuid)):
        return ColumnType.STRING
    return ColumnType.OTHER


def sql_type_name(sql_type: sqltypes.TypeEngine, dialect: Dialect | None = None) -> str:
    """Render a type the way the database names it, falling back to the class name."""
    try:
        return str(sql_type.compile(dialect=dialect))
    except CompileError:
        return type(sql_type).__name__


def temporal_type(sql_type: str | None) -> type[sqltypes.TypeEngine]:
    """Pick the Date, Time or DateTime type for a temporal column from its database type name.

    Intervals have no ISO string form and are passed through untouched.
    """
    name = (sql_type or "").upper()
    if "INTERVAL" in name:
        return sqltypes.NullType
    if name.startswith("DATE") and "TIME" not in name:
        return sqltypes.Date
    if name.startswith("TIME") and "STAMP" not in name:
        return sqltypes.Time
    return sqltypes.DateTime


# Types used when binding a model back onto the engine. Unknown columns pass
# values through untouched.
_BIND_TYPES: dict[ColumnType, type[sqltypes.TypeEngine]] = {
    ColumnType.STRING: sqltypes.String,
    ColumnType.INTEGER: sqltypes.Integer,
    ColumnType.FLOAT: sqltypes.Float,
    ColumnType.BOOLEAN: sqltypes.Boolean,
    ColumnType.BINARY: sqltypes.LargeBinary,
}


def bind_type(column_type: ColumnType, sql_type: str | None = None) -> sqltypes.TypeEngine:
    """SQLAlchemy type used for a column of the given tag in generated queries."""
    if column_type == ColumnType.DATE:
        return temporal_type(sql_type)()
    type_class = _BIND_TYPES.get(column_type)
    if type_class is None:
        return sqltypes.NullType()
    return type_class()


def decode_value(column_type: ColumnType, value: Any, sql_type: str | None = None) -> Any:
    """Convert a JSON-transported value to what the column's bind type accepts.

    Temporal columns take ISO 8601 strings and binary columns take base64.
    Values of other tags, None and values already of the target type are
    returned unchanged.

    Raises:
        ValueError: If the value is not a valid ISO string or base64 text
    """
    if value is None:
        return None

    if column_type == ColumnType.BINARY:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        if not isinstance(value, str):
            raise ValueError(f"expected base64 text, got {type(value).__name__}")
        return base64.b64decode(value, validate=True)

    if column_type == ColumnType.DATE:
        kind = temporal_type(sql_type)
        if kind is sqltypes.NullType or isinstance(value, (date, time)):
            return value
        if not isinstance(value, str):
            raise ValueError(f"expected an ISO 8601 string, got {type(value).__name__}")
        if kind is sqltypes.Date:
            return date.fromisoformat(value)
        if kind is sqltypes.Time:
            return time.fromisoformat(value)
        return datetime.fromisoformat(value)

    return value


_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def coerce_value(column_type: ColumnType, raw: str, sql_type: str | None = None) -> Any:
    """Convert a value taken from a URL (path id or query filter) to the column's Python type.

    Raises:
        ValueError: If the value cannot represent the column type
    """
    if column_type == ColumnType.INTEGER:
        return int(raw)
    if column_type == ColumnType.FLOAT:
        return float(raw)
    if column_type == ColumnType.BOOLEAN:
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    return decode_value(column_type, raw, sql_type)
