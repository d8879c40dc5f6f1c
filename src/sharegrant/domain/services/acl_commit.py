"""Commit of a proposed ACL against the current one."""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sharegrant.domain.entities import ACLEntry, User
from sharegrant.domain.exceptions import WriteDeniedToViewer
from sharegrant.domain.services import acl_codec, acl_differ
from sharegrant.domain.services.acl_differ import AclDelta
from sharegrant.domain.value_objects import AccessLevel, PrincipalType


def commit(
    current_acl: Sequence[ACLEntry],
    proposed_acl: Any,
    table_backed: bool,
) -> tuple[list[ACLEntry], AclDelta]:
    """Validate proposed_acl and diff it against current_acl.

    current_acl is the snapshot taken before the change. Nothing is
    mutated; callers persist the validated ACL themselves.
    """
    validated = acl_codec.validate(proposed_acl, table_backed)
    return validated, acl_differ.diff(current_acl, validated)


def user_ids_with_access(acl: Sequence[ACLEntry], access: AccessLevel) -> list[UUID]:
    return [
        entry.principal_id
        for entry in acl
        if entry.principal_type == PrincipalType.USER and entry.access == access
    ]


def validate_viewer_writes(acl: Sequence[ACLEntry], users: Sequence[User]) -> None:
    """Reject ACLs granting readwrite to viewers.

    users must contain the users referenced by readwrite entries.
    """
    writers = set(user_ids_with_access(acl, AccessLevel.READWRITE))
    viewer_writers = [user.username for user in users if user.id in writers and user.viewer]
    if viewer_writers:
        raise WriteDeniedToViewer(viewer_writers)
