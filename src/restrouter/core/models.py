"""Schema description models.

These are the contract between the introspector and the registry: a table is
reduced to an ordered list of typed column descriptors before anything is
bound to the live engine.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ColumnType(str, Enum):
    """Semantic type tag of a column."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    BINARY = "binary"
    OTHER = "other"


class ColumnDescription(BaseModel):
    """One introspected column."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ColumnType = ColumnType.OTHER
    nullable: bool = True
    primary_key: bool = False
    autoincrement: bool = False
    sql_type: str | None = Field(default=None, description="Database type name as reported")


class TableDescription(BaseModel):
    """One introspected table and its ordered columns."""

    model_config = ConfigDict(frozen=True)

    name: str
    columns: tuple[ColumnDescription, ...] = ()
    schema_name: str | None = None

    @property
    def primary_keys(self) -> list[ColumnDescription]:
        """Columns flagged as primary key, in column order."""
        return [c for c in self.columns if c.primary_key]

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> ColumnDescription | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None
