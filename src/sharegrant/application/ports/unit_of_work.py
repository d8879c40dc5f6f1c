"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from sharegrant.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from sharegrant.application.ports.repositories.principal_directory import (
    PrincipalDirectory,
)
from sharegrant.application.ports.repositories.shared_entity_repository import (
    SharedEntityRepository,
)
from sharegrant.application.ports.repositories.visualization_repository import (
    VisualizationRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def shared_entities(self) -> SharedEntityRepository: ...

    @property
    def principals(self) -> PrincipalDirectory: ...

    @property
    def visualizations(self) -> VisualizationRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
