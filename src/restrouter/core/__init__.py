"""Core module - configuration, connections, errors, and shared models."""

from restrouter.core.config import Settings, get_settings
from restrouter.core.connections import ConnectionConfig, ConnectionManager
from restrouter.core.errors import (
    ConfigurationError,
    DatabaseConnectionError,
    IntrospectionError,
    NotFoundError,
    PathCollisionError,
    RequestError,
    RestRouterError,
    ValidationError,
)
from restrouter.core.models import ColumnDescription, ColumnType, TableDescription

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Connections
    "ConnectionConfig",
    "ConnectionManager",
    # Errors
    "ConfigurationError",
    "DatabaseConnectionError",
    "IntrospectionError",
    "NotFoundError",
    "PathCollisionError",
    "RequestError",
    "RestRouterError",
    "ValidationError",
    # Models
    "ColumnDescription",
    "ColumnType",
    "TableDescription",
]
