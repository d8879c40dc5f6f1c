"""Access resolver - effective access level of a user against an ACL.

All functions are pure; they need only the loaded ACL and the owner id.
"""

from collections.abc import Sequence
from uuid import UUID

from sharegrant.domain.entities import ACLEntry, User
from sharegrant.domain.value_objects import AccessLevel, PrincipalType


def _is_for_user(entry: ACLEntry, user: User) -> bool:
    return entry.principal_type == PrincipalType.USER and entry.principal_id == user.id


def _is_for_organization(entry: ACLEntry, user: User) -> bool:
    return (
        user.organization_id is not None
        and entry.principal_type == PrincipalType.ORGANIZATION
        and entry.principal_id == user.organization_id
    )


def _is_for_user_group(entry: ACLEntry, user: User) -> bool:
    return entry.principal_type == PrincipalType.GROUP and entry.principal_id in user.group_ids


def acl_entries_for_user(user: User, acl: Sequence[ACLEntry]) -> list[ACLEntry]:
    """Entries matching the user directly, via organization or via a group."""
    return [
        entry
        for entry in acl
        if _is_for_user(entry, user)
        or _is_for_organization(entry, user)
        or _is_for_user_group(entry, user)
    ]


def permission_for(user: User, acl: Sequence[ACLEntry], owner_id: UUID) -> AccessLevel:
    """Highest access the user gets. Owners always get readwrite."""
    if user.id == owner_id:
        return AccessLevel.READWRITE
    return AccessLevel.highest(entry.access for entry in acl_entries_for_user(user, acl))


def is_permitted(
    user: User,
    acl: Sequence[ACLEntry],
    owner_id: UUID,
    required: AccessLevel,
) -> bool:
    return permission_for(user, acl, owner_id).allows(required)


def read_permitted(user: User, acl: Sequence[ACLEntry], owner_id: UUID) -> bool:
    return user.id == owner_id or is_permitted(user, acl, owner_id, AccessLevel.READONLY)


def write_permitted(user: User, acl: Sequence[ACLEntry], owner_id: UUID) -> bool:
    return user.id == owner_id or is_permitted(user, acl, owner_id, AccessLevel.READWRITE)
