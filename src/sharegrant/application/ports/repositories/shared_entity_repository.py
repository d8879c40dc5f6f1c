"""Shared entity repository port."""

from typing import Protocol
from uuid import UUID

from sharegrant.domain.entities import SharedEntity


class SharedEntityRepository(Protocol):
    """Port for the shared entity index."""

    async def list_by_entity(self, entity_id: UUID) -> list[SharedEntity]: ...

    async def create(self, shared_entity: SharedEntity) -> SharedEntity: ...

    async def delete(self, recipient_id: UUID, entity_id: UUID) -> None: ...

    async def delete_by_entity(self, entity_id: UUID) -> None: ...
