"""Resync permission use case."""

import logging
from uuid import UUID

from sharegrant.application.dto.commit_result import SyncReport
from sharegrant.application.services.shared_entity_synchronizer import (
    SharedEntitySynchronizer,
)
from sharegrant.application.use_cases.permission._loading import load_entity
from sharegrant.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class ResyncPermissionUseCase:
    """Re-run the share cascade for a permission's current ACL.

    Used to recover from backing-store failures: the cascade is idempotent,
    so re-running it converges on the state the ACL describes. No
    notifications are sent since the ACL does not change.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        synchronizer: SharedEntitySynchronizer,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._synchronizer = synchronizer

    async def execute(
        self, permission_id: UUID, *, sync_backing_store: bool = True
    ) -> SyncReport:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id, for_update=True)
            if not permission:
                raise NotFound("Permission", permission_id)
            visualization = await load_entity(uow, permission)
            report = await self._synchronizer.synchronize(
                uow,
                permission,
                visualization,
                permission.access_control_list,
                sync_backing_store=sync_backing_store,
            )
        logger.info(
            "Permission %s resynced: shared with %d, %d failures",
            permission_id,
            len(report.shared_with),
            len(report.failures),
        )
        return report
