"""Router assembly - resources onto one mountable router.

The assembler never touches global state: it adds routes to the router it was
given (mutating it) or to a fresh ``APIRouter``. A FastAPI application works
as a target too since it exposes the same ``add_api_route`` method.
"""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter, FastAPI
from fastapi.responses import Response

from restrouter.core.logging import get_logger
from restrouter.synthesis.resource import Resource

logger = get_logger(__name__)

RouteTarget = APIRouter | FastAPI


class RouterAssembler:
    """Adds the routes of every resource, in order, to one router."""

    def __init__(self, router: RouteTarget | None = None):
        self.router: RouteTarget = router if router is not None else APIRouter()
        self.supplied = router is not None

    def assemble(self, resources: Sequence[Resource]) -> RouteTarget:
        """Add every resource's routes and return the router."""
        for resource in resources:
            self.add_resource(resource)

        logger.info(
            "router_assembled",
            resources=len(resources),
            supplied_router=self.supplied,
        )
        return self.router

    def add_resource(self, resource: Resource) -> None:
        ops = resource.operations
        tags = [resource.name]
        name = resource.name

        self.router.add_api_route(
            resource.collection_path,
            ops.list_rows,
            methods=["GET"],
            name=f"{name}_list",
            summary=f"List {name}",
            tags=tags,
        )
        self.router.add_api_route(
            resource.collection_path,
            ops.create,
            methods=["POST"],
            status_code=201,
            name=f"{name}_create",
            summary=f"Create {name}",
            tags=tags,
        )
        self.router.add_api_route(
            resource.item_path,
            ops.fetch,
            methods=["GET"],
            name=f"{name}_fetch",
            summary=f"Fetch {name} by id",
            tags=tags,
        )
        # PUT and PATCH share the partial-update semantics but need distinct operation ids
        for method, route_name in (("PUT", f"{name}_update"), ("PATCH", f"{name}_patch")):
            self.router.add_api_route(
                resource.item_path,
                ops.update,
                methods=[method],
                name=route_name,
                summary=f"Update {name} by id",
                tags=tags,
            )
        self.router.add_api_route(
            resource.item_path,
            ops.delete,
            methods=["DELETE"],
            status_code=204,
            response_class=Response,
            name=f"{name}_delete",
            summary=f"Delete {name} by id",
            tags=tags,
        )
