"""Schema introspection - tables and columns into TableDescriptions."""

from restrouter.introspection.introspector import SchemaIntrospector
from restrouter.introspection.output import ModelDescriptionWriter
from restrouter.introspection.types import (
    bind_type,
    coerce_value,
    decode_value,
    infer_column_type,
)

__all__ = [
    "ModelDescriptionWriter",
    "SchemaIntrospector",
    "bind_type",
    "coerce_value",
    "decode_value",
    "infer_column_type",
]
