"""Pipeline orchestrator.

Runs introspect -> register -> synthesize -> assemble behind one coroutine.

Usage:
    from restrouter import RESTRouter

    rest = RESTRouter("shop", "admin", "secret", dialect="postgresql", host="db")
    build = await rest.create_router()
    app.include_router(build.router, prefix="/api/v1")

Only introspection awaits I/O; the remaining stages are synchronous
in-memory work. There is no internal timeout: wrap create_router() in
``asyncio.timeout()`` when latency must be bounded. Two overlapping runs on
one instance are refused; overlapping runs against the same database from
different instances are the caller's responsibility.
"""

from __future__ import annotations

import asyncio
from typing import Any
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncEngine

from restrouter.core.connections import ConnectionConfig, ConnectionManager
from restrouter.core.logging import get_logger, log_context
from restrouter.introspection.introspector import SchemaIntrospector
from restrouter.introspection.output import ModelDescriptionWriter
from restrouter.pipeline.base import TERMINAL_STATES, PipelineState, RouterBuild
from restrouter.registry.registry import ModelRegistry
from restrouter.routing.assembler import RouterAssembler, RouteTarget
from restrouter.synthesis.resource import Resource
from restrouter.synthesis.synthesizer import ResourceSynthesizer

logger = get_logger(__name__)


class RESTRouter:
    """Creates FastAPI routers exposing a database as a REST API.

    Args:
        database: Name of the database to expose (file path for sqlite)
        user: User that connects
        password: Password of that user
        engine: Pre-opened AsyncEngine to use instead of creating one
        page_size: Row cap for list endpoints called without ?limit
        **options: Any other ConnectionConfig attribute (dialect, host, ...)
    """

    def __init__(
        self,
        database: str,
        user: str | None = None,
        password: str | None = None,
        *,
        engine: AsyncEngine | None = None,
        page_size: int | None = None,
        **options: Any,
    ):
        config = ConnectionConfig(database=database, user=user, password=password, **options)
        self._setup(config, engine=engine, page_size=page_size)

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        *,
        engine: AsyncEngine | None = None,
        page_size: int | None = None,
    ) -> RESTRouter:
        """Create an instance from an existing ConnectionConfig."""
        rest = cls.__new__(cls)
        rest._setup(config, engine=engine, page_size=page_size)
        return rest

    def _setup(
        self,
        config: ConnectionConfig,
        *,
        engine: AsyncEngine | None,
        page_size: int | None,
    ) -> None:
        self.config = config
        self.page_size = page_size
        self.manager = ConnectionManager(config, engine_override=engine)
        self.introspector = SchemaIntrospector(self.manager, config)
        self.state = PipelineState.IDLE
        self.error: BaseException | None = None
        self.registry: ModelRegistry | None = None
        self.router: RouteTarget | None = None
        self.resources: list[Resource] = []

    @classmethod
    async def create(
        cls,
        database: str,
        user: str | None = None,
        password: str | None = None,
        router: RouteTarget | None = None,
        **options: Any,
    ) -> RouterBuild:
        """Shortcut for ``await RESTRouter(database, user, password, **options).create_router(router)``."""
        return await cls(database, user, password, **options).create_router(router)

    def __repr__(self) -> str:
        return f"RESTRouter(url={self.config.describe()!r}, state={self.state.value!r})"

    def _transition(self, state: PipelineState) -> None:
        logger.debug("pipeline_state_changed", previous=self.state.value, state=state.value)
        self.state = state

    async def create_router(self, router: RouteTarget | None = None) -> RouterBuild:
        """Introspect the database and build one resource per table.

        Args:
            router: Router or FastAPI app to add the routes to. It is mutated.
                    A new APIRouter is created when omitted.

        Returns:
            RouterBuild with this instance, the router and the resources

        Raises:
            DatabaseConnectionError: If the database cannot be reached
            IntrospectionError: If the schema cannot be read
            PathCollisionError: If two tables map to the same path
            ConfigurationError: If a table name cannot become a path
            RuntimeError: If a run is already in progress on this instance
        """
        if self.state not in TERMINAL_STATES and self.state != PipelineState.IDLE:
            raise RuntimeError(f"A pipeline run is already in progress ({self.state.value})")

        self.error = None
        run_id = str(uuid4())

        with log_context(run_id=run_id, database=self.config.database):
            try:
                self._transition(PipelineState.INTROSPECTING)
                tables = await self.introspector.introspect()
                if self.config.directory is not None:
                    ModelDescriptionWriter(self.config.directory).write(tables)
                if self.config.close_connection_automatically:
                    await self.manager.release()

                self._transition(PipelineState.REGISTERING)
                registry = ModelRegistry(self.manager.engine, timestamps=self.config.timestamps)
                for table in tables:
                    registry.register(table)

                self._transition(PipelineState.SYNTHESIZING)
                synthesizer = ResourceSynthesizer(
                    freeze_table_name=self.config.freeze_table_name,
                    page_size=self.page_size,
                )
                resources = synthesizer.synthesize_all(registry.handles())

                self._transition(PipelineState.ASSEMBLING)
                composed = RouterAssembler(router).assemble(resources)
            except asyncio.CancelledError as e:
                self._fail(e)
                await asyncio.shield(self.manager.close())
                raise
            except Exception as e:
                self._fail(e)
                await self.manager.close()
                raise

            self.registry = registry
            self.router = composed
            self.resources = resources
            self._transition(PipelineState.READY)
            logger.info(
                "pipeline_ready",
                resources=len(resources),
                paths=[r.collection_path for r in resources],
            )

        return RouterBuild(rest=self, router=composed, resources=list(resources))

    def _fail(self, error: BaseException) -> None:
        failed_in = self.state.value
        self.error = error
        self._transition(PipelineState.FAILED)
        logger.error(
            "pipeline_failed",
            stage=failed_in,
            error_type=type(error).__name__,
            error=str(error),
        )

    async def close(self) -> None:
        """Dispose the engine if this instance created it."""
        await self.manager.close()

    async def __aenter__(self) -> RESTRouter:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
