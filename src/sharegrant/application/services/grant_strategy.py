"""Backing-store grant strategy, keyed by recipient kind.

Users and organizations get table grants through this module. Groups are
granted directly through BackingStore.grant_group by the synchronizer.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from sharegrant.application.ports import BackingStore
from sharegrant.application.ports.repositories import PrincipalDirectory
from sharegrant.domain.entities import Organization, Permission, TableRef, User, Visualization
from sharegrant.domain.exceptions import PermissionGrantError
from sharegrant.domain.value_objects import AccessLevel, PrincipalType

logger = logging.getLogger(__name__)

WITHOUT_OWNERSHIP = "Trying to change permissions to a table without ownership"


@dataclass(frozen=True)
class UserGrantTarget:
    user: User

    @property
    def recipient_id(self) -> UUID:
        return self.user.id


@dataclass(frozen=True)
class OrganizationGrantTarget:
    organization: Organization

    @property
    def recipient_id(self) -> UUID:
        return self.organization.id


GrantTarget = UserGrantTarget | OrganizationGrantTarget


async def grant_target_for(
    principal_type: PrincipalType,
    principal_id: UUID,
    principals: PrincipalDirectory,
) -> GrantTarget | None:
    """Resolve the recipient into a grant target. None if it does not exist."""
    if principal_type == PrincipalType.USER:
        user = await principals.get_user(principal_id)
        return UserGrantTarget(user) if user else None
    if principal_type == PrincipalType.ORGANIZATION:
        organization = await principals.get_organization(principal_id)
        return OrganizationGrantTarget(organization) if organization else None
    raise ValueError(f"No grant strategy for {principal_type} recipients")


async def _grant_user(
    store: BackingStore, table: TableRef, target: UserGrantTarget, access: AccessLevel
) -> None:
    await store.grant_user(table, target.user, access)


async def _grant_organization(
    store: BackingStore,
    table: TableRef,
    target: OrganizationGrantTarget,
    access: AccessLevel,
) -> None:
    await store.grant_organization(table, target.organization, access)


_GRANTERS: dict[type, Callable[..., Awaitable[None]]] = {
    UserGrantTarget: _grant_user,
    OrganizationGrantTarget: _grant_organization,
}


async def apply_grant(
    store: BackingStore,
    target: GrantTarget,
    permission: Permission,
    visualization: Visualization,
    entity_owner_id: UUID,
    access: AccessLevel,
) -> None:
    """Grant readonly or readwrite on the visualization's table to target.

    entity_owner_id is the owner of the visualization's own permission; it
    must match the permission doing the grant.
    """
    if not visualization.is_table_backed():
        raise PermissionGrantError(WITHOUT_OWNERSHIP)
    if permission.owner_id != entity_owner_id:
        raise PermissionGrantError(WITHOUT_OWNERSHIP)
    if access not in (AccessLevel.READONLY, AccessLevel.READWRITE):
        raise ValueError(f"Cannot grant access level {access!r} to a table")

    logger.debug(
        "Granting %s on %s.%s to %s",
        access.value,
        visualization.table.schema,
        visualization.table.name,
        target.recipient_id,
    )
    await _GRANTERS[type(target)](store, visualization.table, target, access)
