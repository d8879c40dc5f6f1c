"""Shared loading helpers for permission use cases."""

from uuid import UUID

from sharegrant.application.ports import UnitOfWork
from sharegrant.domain.entities import Permission, Visualization
from sharegrant.domain.exceptions import NotFound, PermissionDenied


async def load_owned_permission(
    uow: UnitOfWork, actor_id: UUID, permission_id: UUID
) -> Permission:
    """Load permission for update. Only its owner may change it."""
    permission = await uow.permissions.get_by_id(permission_id, for_update=True)
    if not permission:
        raise NotFound("Permission", permission_id)
    if not permission.is_owner(actor_id):
        raise PermissionDenied("Only the owner can change permissions")
    return permission


async def find_entity(uow: UnitOfWork, permission: Permission) -> Visualization | None:
    """Visualization protected by permission."""
    if permission.entity_id is not None:
        return await uow.visualizations.get_by_id(permission.entity_id)
    return await uow.visualizations.get_by_permission_id(permission.id)


async def load_entity(uow: UnitOfWork, permission: Permission) -> Visualization:
    visualization = await find_entity(uow, permission)
    if not visualization:
        raise NotFound("Visualization", permission.entity_id or permission.id)
    return visualization
