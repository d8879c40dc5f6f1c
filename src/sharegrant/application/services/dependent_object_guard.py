"""Dependent object guard - prune maps whose owner lost access to a table."""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from sharegrant.application.dto.commit_result import RemovedPermission
from sharegrant.application.ports import UnitOfWork
from sharegrant.application.services.permission_removal import remove_permission
from sharegrant.domain.entities import Permission, TableRef, Visualization
from sharegrant.domain.services import access_resolver

logger = logging.getLogger(__name__)


@dataclass
class GuardResult:
    unlinked: list[UUID] = field(default_factory=list)
    deleted: list[UUID] = field(default_factory=list)
    removed_permissions: list[RemovedPermission] = field(default_factory=list)


class DependentObjectGuard:
    """Unlinks or deletes visualizations that depend on a table their owner can't read.

    Partially dependent visualizations lose their layers on the table,
    fully dependent ones are deleted along with their permission and shares.
    """

    async def check(
        self,
        uow: UnitOfWork,
        table: TableRef,
        table_permission: Permission,
    ) -> GuardResult:
        """table_permission must already hold the post-commit ACL."""
        result = GuardResult()
        fully = await uow.visualizations.list_fully_dependent(table.id)
        partially = await uow.visualizations.list_partially_dependent(table.id)

        for visualization in partially:
            if not await self._owner_can_read(uow, visualization, table_permission):
                logger.info(
                    "Unlinking table %s from visualization %s, owner lost access",
                    table.id,
                    visualization.id,
                )
                await uow.visualizations.unlink_table(visualization.id, table.id)
                result.unlinked.append(visualization.id)

        for visualization in fully:
            if not await self._owner_can_read(uow, visualization, table_permission):
                logger.info(
                    "Deleting visualization %s, owner lost access to table %s",
                    visualization.id,
                    table.id,
                )
                await self._delete(uow, visualization, result)

        return result

    async def _delete(
        self, uow: UnitOfWork, visualization: Visualization, result: GuardResult
    ) -> None:
        permission = None
        if visualization.permission_id is not None:
            permission = await uow.permissions.get_by_id(
                visualization.permission_id, for_update=True
            )
        if permission is None:
            await uow.shared_entities.delete_by_entity(visualization.id)
        else:
            delta = await remove_permission(uow, permission, visualization)
            result.removed_permissions.append(
                RemovedPermission(permission, visualization, delta)
            )
        await uow.visualizations.delete(visualization.id)
        result.deleted.append(visualization.id)

    async def _owner_can_read(
        self,
        uow: UnitOfWork,
        visualization: Visualization,
        table_permission: Permission,
    ) -> bool:
        owner = await uow.principals.get_user(visualization.user_id)
        if owner is None:
            logger.warning(
                "Owner %s of visualization %s not found, leaving it untouched",
                visualization.user_id,
                visualization.id,
            )
            return True
        return access_resolver.read_permitted(
            owner, table_permission.access_control_list, table_permission.owner_id
        )
