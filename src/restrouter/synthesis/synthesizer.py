"""Resource synthesis - one Resource per registered model."""

from __future__ import annotations

from collections.abc import Iterable

from restrouter.core.errors import PathCollisionError
from restrouter.core.logging import get_logger
from restrouter.registry.handle import ModelHandle
from restrouter.synthesis import handlers
from restrouter.synthesis.naming import collection_path, item_path, resource_name
from restrouter.synthesis.resource import Resource, ResourceOperations

logger = get_logger(__name__)


class ResourceSynthesizer:
    """Derives paths and CRUD bindings for models.

    One synthesizer covers one run: it remembers every path it produced and
    refuses a second model that maps onto an existing one.
    """

    def __init__(self, *, freeze_table_name: bool = True, page_size: int | None = None):
        self.freeze_table_name = freeze_table_name
        self.page_size = page_size
        self._paths: dict[str, str] = {}

    def synthesize(self, model: ModelHandle) -> Resource:
        """Build the resource for one model.

        Raises:
            PathCollisionError: If the derived path was already produced in this run
            ConfigurationError: If the table name yields an empty resource name
        """
        name = resource_name(model.name, freeze_table_name=self.freeze_table_name)
        path = collection_path(name)

        existing = self._paths.get(path)
        if existing is not None:
            raise PathCollisionError(path, existing, model.name)

        resource = Resource(
            name=name,
            collection_path=path,
            item_path=item_path(name),
            model=model,
            operations=ResourceOperations(
                list_rows=handlers.build_list(model, self.page_size),
                fetch=handlers.build_fetch(model),
                create=handlers.build_create(model),
                update=handlers.build_update(model),
                delete=handlers.build_delete(model),
            ),
        )
        self._paths[path] = model.name

        if not model.addressable:
            logger.warning(
                "resource_without_addressable_id",
                resource=name,
                primary_keys=[c.name for c in model.description.primary_keys],
            )
        logger.debug("resource_synthesized", resource=name, table=model.name, path=path)
        return resource

    def synthesize_all(self, models: Iterable[ModelHandle]) -> list[Resource]:
        """Synthesize every model in order; any collision fails the whole batch."""
        return [self.synthesize(model) for model in models]
