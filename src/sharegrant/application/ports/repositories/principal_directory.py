"""Principal directory port - users, organizations and groups."""

from typing import Protocol
from uuid import UUID

from sharegrant.domain.entities import Group, Organization, User


class PrincipalDirectory(Protocol):
    """Port for looking up principals by id."""

    async def get_user(self, user_id: UUID) -> User | None: ...

    async def get_organization(self, organization_id: UUID) -> Organization | None: ...

    async def get_group(self, group_id: UUID) -> Group | None: ...

    async def list_users(self, user_ids: list[UUID]) -> list[User]: ...
