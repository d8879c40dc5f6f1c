"""Visualization repository port."""

from typing import Protocol
from uuid import UUID

from sharegrant.domain.entities import Visualization


class VisualizationRepository(Protocol):
    """Port for visualizations and their table dependencies."""

    async def get_by_id(self, visualization_id: UUID) -> Visualization | None: ...

    async def get_by_permission_id(self, permission_id: UUID) -> Visualization | None: ...

    async def attach_permission(self, visualization_id: UUID, permission_id: UUID) -> None: ...

    async def get_canonical_for_table(self, table_id: UUID) -> Visualization | None: ...

    async def list_fully_dependent(self, table_id: UUID) -> list[Visualization]: ...

    async def list_partially_dependent(self, table_id: UUID) -> list[Visualization]: ...

    async def unlink_table(self, visualization_id: UUID, table_id: UUID) -> None: ...

    async def delete(self, visualization_id: UUID) -> None: ...
