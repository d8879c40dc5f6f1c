"""Set access control list use case."""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sharegrant.application.dto.commit_result import CommitResult
from sharegrant.application.services.notification_emitter import NotificationEmitter
from sharegrant.application.services.shared_entity_synchronizer import (
    SharedEntitySynchronizer,
)
from sharegrant.application.use_cases.permission._loading import (
    load_entity,
    load_owned_permission,
)
from sharegrant.domain.services import acl_commit
from sharegrant.domain.value_objects import AccessLevel

logger = logging.getLogger(__name__)


class SetAccessControlListUseCase:
    """Replace a permission's ACL and cascade the change.

    Validation happens before anything is written. The cascade runs in the
    same unit of work. Notifications are sent once it has committed.
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

    async def execute(
        self,
        actor_id: UUID,
        permission_id: UUID,
        acl: Any,
        *,
        sync_backing_store: bool = True,
    ) -> CommitResult:
        """Set acl (incoming format) on permission. Actor must be the owner."""
        async with self._uow_factory() as uow:
            permission = await load_owned_permission(uow, actor_id, permission_id)
            visualization = await load_entity(uow, permission)

            previous_acl = list(permission.access_control_list)
            validated, delta = acl_commit.commit(
                previous_acl, acl, visualization.is_table_backed()
            )
            writers = acl_commit.user_ids_with_access(validated, AccessLevel.READWRITE)
            if writers:
                users = await uow.principals.list_users(writers)
                acl_commit.validate_viewer_writes(validated, users)

            permission.access_control_list = validated
            permission.updated_at = datetime.now(UTC)
            await uow.permissions.update(permission)

            sync = await self._synchronizer.synchronize(
                uow,
                permission,
                visualization,
                previous_acl,
                sync_backing_store=sync_backing_store,
            )

        notifications = await self._emitter.emit(delta, permission, visualization)
        notifications = await self._emitter.emit_removed(sync.removed_permissions, notifications)
        logger.info(
            "Permission %s updated: %d entries, shared with %d, %d sync failures",
            permission.id,
            len(validated),
            len(sync.shared_with),
            len(sync.failures),
        )
        return CommitResult(
            acl=validated,
            delta=delta,
            sync=sync,
            notifications=notifications,
        )
