"""Tests for SQL type mapping and URL value coercion."""

from datetime import date, datetime, time

import pytest
from sqlalchemy import types as sqltypes
from sqlalchemy.dialects import mysql, postgresql, sqlite

from restrouter.core.models import ColumnType
from restrouter.introspection.types import (
    bind_type,
    coerce_value,
    decode_value,
    infer_column_type,
    sql_type_name,
)


class TestInferColumnType:
    @pytest.mark.parametrize(
        ("sql_type", "expected"),
        [
            (sqltypes.VARCHAR(100), ColumnType.STRING),
            (sqltypes.TEXT(), ColumnType.STRING),
            (postgresql.UUID(), ColumnType.STRING),
            (sqltypes.INTEGER(), ColumnType.INTEGER),
            (sqltypes.BIGINT(), ColumnType.INTEGER),
            (mysql.TINYINT(), ColumnType.INTEGER),
            (sqltypes.NUMERIC(10, 2), ColumnType.FLOAT),
            (sqltypes.FLOAT(), ColumnType.FLOAT),
            (sqltypes.REAL(), ColumnType.FLOAT),
            (sqltypes.DOUBLE(), ColumnType.FLOAT),
            (sqltypes.BOOLEAN(), ColumnType.BOOLEAN),
            (sqltypes.DATE(), ColumnType.DATE),
            (sqlite.DATETIME(), ColumnType.DATE),
            (sqltypes.TIME(), ColumnType.DATE),
            (sqltypes.BLOB(), ColumnType.BINARY),
            (sqltypes.VARBINARY(16), ColumnType.BINARY),
            (postgresql.JSONB(), ColumnType.OTHER),
            (sqltypes.NullType(), ColumnType.OTHER),
        ],
    )
    def test_mapping(self, sql_type: sqltypes.TypeEngine, expected: ColumnType):
        assert infer_column_type(sql_type) == expected


class TestSqlTypeName:
    def test_renders_for_dialect(self):
        """Types are named the way the dialect names them."""
        assert sql_type_name(sqltypes.VARCHAR(20), sqlite.dialect()) == "VARCHAR(20)"

    def test_falls_back_to_class_name(self):
        """Types the dialect cannot render fall back to the class name."""
        assert sql_type_name(postgresql.JSONB(), sqlite.dialect()) == "JSONB"


class TestBindType:
    def test_known_tags(self):
        assert isinstance(bind_type(ColumnType.INTEGER), sqltypes.Integer)
        assert isinstance(bind_type(ColumnType.STRING), sqltypes.String)
        assert isinstance(bind_type(ColumnType.BOOLEAN), sqltypes.Boolean)

    def test_float_and_binary(self):
        assert isinstance(bind_type(ColumnType.FLOAT), sqltypes.Float)
        assert isinstance(bind_type(ColumnType.BINARY), sqltypes.LargeBinary)

    @pytest.mark.parametrize(
        ("sql_type", "expected"),
        [
            ("DATE", sqltypes.Date),
            ("DATETIME", sqltypes.DateTime),
            ("TIMESTAMP WITHOUT TIME ZONE", sqltypes.DateTime),
            ("TIME", sqltypes.Time),
            (None, sqltypes.DateTime),
        ],
    )
    def test_temporal_by_type_name(self, sql_type: str | None, expected: type):
        """Temporal columns bind as Date, Time or DateTime depending on their type name."""
        bound = bind_type(ColumnType.DATE, sql_type)
        assert type(bound) is expected

    def test_pass_through(self):
        """Unknown types and intervals are passed through untouched."""
        assert isinstance(bind_type(ColumnType.OTHER), sqltypes.NullType)
        assert isinstance(bind_type(ColumnType.DATE, "INTERVAL"), sqltypes.NullType)


class TestCoerceValue:
    def test_integer(self):
        assert coerce_value(ColumnType.INTEGER, "42") == 42

    def test_integer_rejects_text(self):
        with pytest.raises(ValueError):
            coerce_value(ColumnType.INTEGER, "abc")

    def test_float(self):
        assert coerce_value(ColumnType.FLOAT, "9.5") == 9.5

    @pytest.mark.parametrize("raw", ["true", "1", "YES", "on"])
    def test_boolean_true(self, raw: str):
        assert coerce_value(ColumnType.BOOLEAN, raw) is True

    @pytest.mark.parametrize("raw", ["false", "0", "No", "off"])
    def test_boolean_false(self, raw: str):
        assert coerce_value(ColumnType.BOOLEAN, raw) is False

    def test_boolean_rejects_other(self):
        with pytest.raises(ValueError, match="not a boolean"):
            coerce_value(ColumnType.BOOLEAN, "maybe")

    def test_strings_unchanged(self):
        """String and untyped values are returned as given."""
        assert coerce_value(ColumnType.STRING, "sku-1") == "sku-1"
        assert coerce_value(ColumnType.OTHER, "{}") == "{}"

    def test_date(self):
        assert coerce_value(ColumnType.DATE, "2024-01-31", "DATE") == date(2024, 1, 31)

    def test_date_rejects_text(self):
        with pytest.raises(ValueError):
            coerce_value(ColumnType.DATE, "last tuesday", "DATE")


class TestDecodeValue:
    """Tests for decoding JSON-transported values before they are written."""

    def test_datetime(self):
        value = decode_value(ColumnType.DATE, "2024-01-31T10:30:00", "DATETIME")
        assert value == datetime(2024, 1, 31, 10, 30)

    def test_time(self):
        assert decode_value(ColumnType.DATE, "10:30", "TIME") == time(10, 30)

    def test_date_rejects_numbers(self):
        with pytest.raises(ValueError, match="ISO 8601"):
            decode_value(ColumnType.DATE, 20240131, "DATE")

    def test_base64(self):
        assert decode_value(ColumnType.BINARY, "aGVsbG8=") == b"hello"

    def test_bytes_kept(self):
        assert decode_value(ColumnType.BINARY, b"\x00\x01") == b"\x00\x01"

    def test_invalid_base64(self):
        with pytest.raises(ValueError):
            decode_value(ColumnType.BINARY, "not base64!")

    def test_none_and_other_tags_unchanged(self):
        assert decode_value(ColumnType.DATE, None, "DATE") is None
        assert decode_value(ColumnType.INTEGER, 5) == 5
