"""Permission removal - drop a permission together with its share index."""

from sharegrant.application.ports import UnitOfWork
from sharegrant.domain.entities import Permission, Visualization
from sharegrant.domain.services import acl_differ
from sharegrant.domain.services.acl_differ import AclDelta


async def remove_permission(
    uow: UnitOfWork,
    permission: Permission,
    visualization: Visualization | None,
) -> AclDelta:
    """Delete permission and the shared entity rows of its visualization.

    Returns the delta against an empty ACL, every grant reported as a revoke.
    """
    delta = acl_differ.diff(permission.access_control_list, [])
    if visualization is not None:
        await uow.shared_entities.delete_by_entity(visualization.id)
    await uow.permissions.delete(permission.id)
    return delta
