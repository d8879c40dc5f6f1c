"""Backing store port - database grants on user tables."""

from typing import Protocol

from sharegrant.domain.entities import Group, Organization, TableRef, User
from sharegrant.domain.value_objects import AccessLevel


class BackingStore(Protocol):
    """Port for granting and revoking table access in the database."""

    async def grant_user(self, table: TableRef, user: User, access: AccessLevel) -> None: ...

    async def grant_organization(
        self, table: TableRef, organization: Organization, access: AccessLevel
    ) -> None: ...

    async def grant_group(self, table: TableRef, group: Group, access: AccessLevel) -> None: ...

    async def remove_access(self, table: TableRef, user: User) -> None: ...

    async def remove_organization_access(
        self, table: TableRef, organization: Organization
    ) -> None: ...
