"""Generic CRUD endpoint functions bound to one model.

Each builder returns a coroutine function FastAPI can route directly. Request
errors raised by the model become HTTPExceptions carrying the error's status
code, so a failing request never escapes as a server error.
"""

from collections.abc import Iterable
from typing import Any

from fastapi import Body, HTTPException, Query, Request, Response

from restrouter.core.errors import RequestError
from restrouter.registry.handle import ModelHandle

# Query parameters of the list endpoint that are not column filters
RESERVED_QUERY_PARAMS = frozenset({"limit", "offset", "sort"})
# Prefix that makes any query parameter a filter, for columns named like a reserved one
FILTER_PREFIX = "where."


def _http_error(error: RequestError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


def split_sort(sort: str | None) -> list[str]:
    """Parse ``?sort=name,-id`` into ``["name", "-id"]``."""
    if not sort:
        return []
    return [part.strip() for part in sort.split(",") if part.strip()]


def column_filters(params: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Select the column filters among query parameters.

    ``?where.limit=5`` filters on a column named ``limit``.
    """
    filters: dict[str, str] = {}
    for key, value in params:
        if key.startswith(FILTER_PREFIX):
            filters[key[len(FILTER_PREFIX):]] = value
        elif key not in RESERVED_QUERY_PARAMS:
            filters[key] = value
    return filters


def build_list(model: ModelHandle, page_size: int | None = None):
    async def list_rows(
        request: Request,
        limit: int | None = Query(default=None, ge=1, description="Maximum rows to return"),
        offset: int = Query(default=0, ge=0, description="Rows to skip"),
        sort: str | None = Query(
            default=None, description="Comma-separated columns, '-' prefix for descending"
        ),
    ) -> list[dict[str, Any]]:
        """List rows, filtered by ?column=value."""
        filters = column_filters(request.query_params.items())
        try:
            return await model.list_rows(
                filters=filters,
                sort=split_sort(sort),
                limit=limit if limit is not None else page_size,
                offset=offset,
            )
        except RequestError as e:
            raise _http_error(e) from e

    return list_rows


def build_fetch(model: ModelHandle):
    async def fetch_row(id: str) -> dict[str, Any]:
        """Fetch one row by primary key."""
        try:
            return await model.fetch(id)
        except RequestError as e:
            raise _http_error(e) from e

    return fetch_row


def build_create(model: ModelHandle):
    async def create_row(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        """Create a row from a full or partial payload."""
        try:
            return await model.create(payload)
        except RequestError as e:
            raise _http_error(e) from e

    return create_row


def build_update(model: ModelHandle):
    async def update_row(id: str, payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        """Update one row by primary key with a partial payload."""
        try:
            return await model.update(id, payload)
        except RequestError as e:
            raise _http_error(e) from e

    return update_row


def build_delete(model: ModelHandle):
    async def delete_row(id: str) -> Response:
        """Delete one row by primary key."""
        try:
            await model.delete(id)
        except RequestError as e:
            raise _http_error(e) from e
        return Response(status_code=204)

    return delete_row
