"""Resource naming - pure functions from table names to routes."""

from __future__ import annotations

import re

from restrouter.core.errors import ConfigurationError

ID_PARAM = "id"

_INVALID_CHARS = re.compile(r"[^a-z0-9_-]+")


def resource_name(table_name: str, *, freeze_table_name: bool = True) -> str:
    """Normalize a table name into a URL-safe resource name.

    Lowercases, collapses every run of characters outside ``[a-z0-9_-]``
    into ``_`` and trims surrounding underscores. With ``freeze_table_name``
    off, the name is pluralized by appending ``s`` (unless it already ends in
    one). Distinct tables can normalize to the same name ("Users" and
    "users"); callers detect that as a collision.

    Raises:
        ConfigurationError: If nothing usable is left of the name
    """
    name = _INVALID_CHARS.sub("_", table_name.strip().lower()).strip("_")
    if not name:
        raise ConfigurationError(f"Table name {table_name!r} cannot be turned into a resource path")
    if not freeze_table_name and not name.endswith("s"):
        name = f"{name}s"
    return name


def collection_path(name: str) -> str:
    return f"/{name}"


def item_path(name: str) -> str:
    return f"/{name}/{{{ID_PARAM}}}"
