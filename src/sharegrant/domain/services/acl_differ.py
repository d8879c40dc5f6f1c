"""ACL differ - grant/revoke transitions between two ACLs."""

from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from sharegrant.domain.entities import ACLEntry
from sharegrant.domain.value_objects import AccessLevel, GrantAction, PrincipalType


@dataclass(frozen=True)
class AclChange:
    """One transition. A revoke carries access=NONE; previous is the old level."""

    action: GrantAction
    access: AccessLevel
    previous: AccessLevel = AccessLevel.NONE


AclDelta = dict[PrincipalType, dict[UUID, list[AclChange]]]


def _levels_by_principal(
    acl: Sequence[ACLEntry],
) -> dict[tuple[PrincipalType, UUID], AccessLevel]:
    levels: dict[tuple[PrincipalType, UUID], AccessLevel] = {}
    for entry in acl:
        key = (entry.principal_type, entry.principal_id)
        levels[key] = AccessLevel.highest([levels.get(key, AccessLevel.NONE), entry.access])
    return levels


def _change(old: AccessLevel, new: AccessLevel) -> AclChange | None:
    if old == new:
        return None
    if new == AccessLevel.NONE:
        return AclChange(action=GrantAction.REVOKE, access=AccessLevel.NONE, previous=old)
    # Level changes between readable levels are a single grant at the new level.
    return AclChange(action=GrantAction.GRANT, access=new, previous=old)


def diff(old_acl: Sequence[ACLEntry], new_acl: Sequence[ACLEntry]) -> AclDelta:
    """Transitions grouped by principal type, then principal id.

    Principals whose level did not change are left out.
    """
    old_levels = _levels_by_principal(old_acl)
    new_levels = _levels_by_principal(new_acl)

    delta: AclDelta = {}
    for key in [*old_levels, *(k for k in new_levels if k not in old_levels)]:
        change = _change(
            old_levels.get(key, AccessLevel.NONE),
            new_levels.get(key, AccessLevel.NONE),
        )
        if change is None:
            continue
        principal_type, principal_id = key
        delta.setdefault(principal_type, {}).setdefault(principal_id, []).append(change)
    return delta


def is_empty(delta: AclDelta) -> bool:
    return not any(changes for by_id in delta.values() for changes in by_id.values())


def iter_changes(delta: AclDelta):
    """Yield (principal_type, principal_id, change) for every transition."""
    for principal_type, by_id in delta.items():
        for principal_id, changes in by_id.items():
            for change in changes:
                yield principal_type, principal_id, change
