"""Error hierarchy.

Pipeline errors (connection, introspection, path collision) abort a whole
``create_router`` run. Request errors are raised by the generated CRUD
operations and only fail the HTTP request that triggered them; each carries
the status code used for its response.
"""

from __future__ import annotations


class RestRouterError(Exception):
    """Base class for all restrouter errors."""


class DatabaseConnectionError(RestRouterError):
    """The database cannot be reached or rejected the credentials."""


class IntrospectionError(RestRouterError):
    """Connected, but the schema could not be enumerated."""

    def __init__(self, message: str, table: str | None = None):
        self.table = table
        if table is not None:
            message = f"{message} (table: {table})"
        super().__init__(message)


class PathCollisionError(RestRouterError):
    """Two tables map onto the same generated resource path."""

    def __init__(self, path: str, first_table: str, second_table: str):
        self.path = path
        self.first_table = first_table
        self.second_table = second_table
        super().__init__(
            f"Tables '{first_table}' and '{second_table}' both map to path '{path}'"
        )


class RequestError(RestRouterError):
    """Error local to a single CRUD invocation."""

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(RequestError):
    """A synthesized operation cannot work for this model (e.g. no addressable id)."""

    status_code = 501


class ValidationError(RequestError):
    """The request payload or parameters do not fit the model."""

    status_code = 400


class NotFoundError(RequestError):
    """No row (or model) matches the given identifier."""

    status_code = 404
