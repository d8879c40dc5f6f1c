"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg_pool import AsyncConnectionPool

from sharegrant.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from sharegrant.infrastructure.persistence.postgres.principal_directory import (
    PostgresPrincipalDirectory,
)
from sharegrant.infrastructure.persistence.postgres.shared_entity_repository import (
    PostgresSharedEntityRepository,
)
from sharegrant.infrastructure.persistence.postgres.visualization_repository import (
    PostgresVisualizationRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._permissions = PostgresPermissionRepository(self._conn)
        self._shared_entities = PostgresSharedEntityRepository(self._conn)
        self._principals = PostgresPrincipalDirectory(self._conn)
        self._visualizations = PostgresVisualizationRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def shared_entities(self) -> PostgresSharedEntityRepository:
        return self._shared_entities

    @property
    def principals(self) -> PostgresPrincipalDirectory:
        return self._principals

    @property
    def visualizations(self) -> PostgresVisualizationRepository:
        return self._visualizations

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager)."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        async with uow:
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise

    return factory
