"""Permission checker port - read/write checks on shared entities."""

from typing import Protocol
from uuid import UUID

from sharegrant.domain.value_objects import AccessLevel


class PermissionChecker(Protocol):
    """Port for checking a user's access through a permission."""

    async def access_level(self, user_id: UUID, permission_id: UUID) -> AccessLevel: ...

    async def check(self, user_id: UUID, permission_id: UUID, required: AccessLevel) -> bool: ...
