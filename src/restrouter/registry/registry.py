"""Model registry - name to ModelHandle mapping with idempotent replacement."""

from __future__ import annotations

import threading
from collections.abc import Iterator

from sqlalchemy.ext.asyncio import AsyncEngine

from restrouter.core.errors import NotFoundError
from restrouter.core.logging import get_logger
from restrouter.core.models import TableDescription
from restrouter.registry.handle import ModelHandle

logger = get_logger(__name__)


class ModelRegistry:
    """Holds one ModelHandle per table name.

    Registering a name that is already present swaps in the new handle; the
    old one is no longer reachable and the name keeps its original position.
    The registry performs no I/O.
    """

    def __init__(self, engine: AsyncEngine, *, timestamps: bool = False):
        self.engine = engine
        self.timestamps = timestamps
        self._models: dict[str, ModelHandle] = {}
        self._lock = threading.Lock()

    def register(self, description: TableDescription) -> ModelHandle:
        """Bind a table description to the engine, replacing any prior handle."""
        handle = ModelHandle(description, self.engine, timestamps=self.timestamps)

        with self._lock:
            replaced = description.name in self._models
            self._models[description.name] = handle

        logger.debug(
            "model_replaced" if replaced else "model_registered",
            model=description.name,
            columns=len(description.columns),
            addressable=handle.addressable,
        )
        return handle

    def lookup(self, name: str) -> ModelHandle:
        """Get the handle registered under a table name.

        Raises:
            NotFoundError: If no model has that name
        """
        with self._lock:
            handle = self._models.get(name)
        if handle is None:
            raise NotFoundError(f"Model {name} not registered")
        return handle

    def unregister(self, name: str) -> None:
        with self._lock:
            if self._models.pop(name, None) is None:
                raise NotFoundError(f"Model {name} not registered")

    def clear(self) -> None:
        with self._lock:
            self._models.clear()

    def names(self) -> list[str]:
        with self._lock:
            return list(self._models)

    def handles(self) -> list[ModelHandle]:
        """Registered handles in registration order."""
        with self._lock:
            return list(self._models.values())

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[ModelHandle]:
        return iter(self.handles())
