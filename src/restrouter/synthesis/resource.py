"""Resource - a routable CRUD unit backed by one model."""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from restrouter.registry.handle import ModelHandle

Endpoint = Callable[..., Coroutine[Any, Any, Any]]


@dataclass(frozen=True)
class ResourceOperations:
    """The five operation bindings of a resource."""

    list_rows: Endpoint
    fetch: Endpoint
    create: Endpoint
    update: Endpoint
    delete: Endpoint


@dataclass(frozen=True)
class Resource:
    """Immutable result of synthesizing one model."""

    name: str
    collection_path: str
    item_path: str
    model: ModelHandle
    operations: ResourceOperations

    @property
    def table_name(self) -> str:
        return self.model.name

    @property
    def endpoints(self) -> tuple[str, str]:
        return (self.collection_path, self.item_path)

    @property
    def addressable(self) -> bool:
        """Whether fetch/update/delete can work (single primary key)."""
        return self.model.addressable
