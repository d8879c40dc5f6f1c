"""Permission repository port."""

from typing import Protocol
from uuid import UUID

from sharegrant.domain.entities import Permission


class PermissionRepository(Protocol):
    """Port for permission persistence."""

    async def get_by_id(self, permission_id: UUID, for_update: bool = False) -> Permission | None: ...

    async def create(self, permission: Permission) -> Permission: ...

    async def update(self, permission: Permission) -> None: ...

    async def delete(self, permission_id: UUID) -> None: ...
