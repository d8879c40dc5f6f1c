"""Create permission use case."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sharegrant.domain.entities import Permission
from sharegrant.domain.exceptions import NotFound, PermissionDenied, ValidationError


class CreatePermissionUseCase:
    """Create the permission protecting a visualization, with an empty ACL."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, owner_id: UUID, entity_id: UUID) -> Permission:
        """Owner must own the visualization, which must not have a permission yet."""
        async with self._uow_factory() as uow:
            owner = await uow.principals.get_user(owner_id)
            if not owner:
                raise NotFound("User", owner_id)
            visualization = await uow.visualizations.get_by_id(entity_id)
            if not visualization:
                raise NotFound("Visualization", entity_id)
            if visualization.user_id != owner.id:
                raise PermissionDenied("User does not own the visualization")
            if visualization.permission_id is not None:
                raise ValidationError(f"Visualization {entity_id} already has a permission")

            now = datetime.now(UTC)
            permission = Permission(
                id=uuid4(),
                owner_id=owner.id,
                owner_username=owner.username,
                entity_id=visualization.id,
                created_at=now,
                updated_at=now,
            )
            await uow.permissions.create(permission)
            await uow.visualizations.attach_permission(visualization.id, permission.id)
            return permission
