"""Delete permission use case."""

import logging
from uuid import UUID

from sharegrant.application.dto.commit_result import CommitResult
from sharegrant.application.services.notification_emitter import NotificationEmitter
from sharegrant.application.services.permission_removal import remove_permission
from sharegrant.application.services.shared_entity_synchronizer import (
    SharedEntitySynchronizer,
)
from sharegrant.application.use_cases.permission._loading import (
    find_entity,
    load_owned_permission,
)

logger = logging.getLogger(__name__)


class DeletePermissionUseCase:
    """Delete a permission. Every current grant is reported as a revoke.

    Table grants held by former recipients are revoked and dependent
    visualizations are pruned in the same unit of work.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        synchronizer: SharedEntitySynchronizer,
        emitter: NotificationEmitter,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._synchronizer = synchronizer
        self._emitter = emitter

    async def execute(self, actor_id: UUID, permission_id: UUID) -> CommitResult:
        sync = None
        async with self._uow_factory() as uow:
            permission = await load_owned_permission(uow, actor_id, permission_id)
            visualization = await find_entity(uow, permission)

            if visualization:
                sync = await self._synchronizer.withdraw(uow, permission, visualization)
            delta = await remove_permission(uow, permission, visualization)

        notifications = await self._emitter.emit(delta, permission, visualization)
        if sync:
            notifications = await self._emitter.emit_removed(
                sync.removed_permissions, notifications
            )
        logger.info("Permission %s deleted", permission.id)
        return CommitResult(acl=[], delta=delta, sync=sync, notifications=notifications)
