"""Shared entity synchronizer - rebuild the share index and table grants."""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from sharegrant.application.dto.commit_result import SyncFailure, SyncReport
from sharegrant.application.ports import BackingStore, EntityInvalidator, UnitOfWork
from sharegrant.application.services.dependent_object_guard import DependentObjectGuard
from sharegrant.application.services.grant_strategy import apply_grant, grant_target_for
from sharegrant.domain.entities import ACLEntry, Permission, SharedEntity, Visualization
from sharegrant.domain.exceptions import BackingStoreError
from sharegrant.domain.value_objects import AccessLevel, PrincipalType

logger = logging.getLogger(__name__)


def relevant_entries(acl: Sequence[ACLEntry], principal_type: PrincipalType) -> list[ACLEntry]:
    """Entries of one principal type granting more than none.

    A principal listed twice keeps its highest level, in first-seen order.
    """
    levels: dict[UUID, AccessLevel] = {}
    for entry in acl:
        if entry.principal_type != principal_type or entry.access == AccessLevel.NONE:
            continue
        current = levels.get(entry.principal_id, AccessLevel.NONE)
        levels[entry.principal_id] = AccessLevel.highest([current, entry.access])
    return [
        ACLEntry(principal_type, principal_id, access)
        for principal_id, access in levels.items()
    ]


def shared_recipients(acl: Sequence[ACLEntry]) -> list[ACLEntry]:
    """Users, the first organization entry and groups, in that order."""
    organizations = relevant_entries(acl, PrincipalType.ORGANIZATION)
    return [
        *relevant_entries(acl, PrincipalType.USER),
        *organizations[:1],
        *relevant_entries(acl, PrincipalType.GROUP),
    ]


class SharedEntitySynchronizer:
    """Makes the shared entity index and backing-store grants match an ACL.

    Runs inside the caller's unit of work so the index rebuild shares its
    transaction. Backing-store grants are not transactional with the index.
    When a grant fails the recipient is dropped from the index and reported,
    and the remaining recipients are still processed.
    Running it again with the same ACL converges to the same state.
    """

    def __init__(
        self,
        backing_store: BackingStore,
        invalidator: EntityInvalidator,
        guard: DependentObjectGuard | None = None,
    ) -> None:
        self._backing_store = backing_store
        self._invalidator = invalidator
        self._guard = guard or DependentObjectGuard()

    async def synchronize(
        self,
        uow: UnitOfWork,
        permission: Permission,
        visualization: Visualization,
        previous_acl: Sequence[ACLEntry],
        *,
        sync_backing_store: bool = True,
    ) -> SyncReport:
        """Rebuild shares of visualization from permission's current ACL.

        sync_backing_store=False skips group grants, for updates that were
        themselves triggered by the database.
        """
        report = SyncReport()
        table_backed = visualization.is_table_backed()

        if table_backed:
            await self._revoke_previous(uow, visualization, previous_acl, report, sync_backing_store)
            await self._guard_dependents(uow, visualization, permission, report)

        await uow.shared_entities.delete_by_entity(visualization.id)

        entity_owner_id = await self._entity_owner_id(uow, permission, visualization)
        for entry in shared_recipients(permission.access_control_list):
            if not await self._exists(uow, entry):
                logger.warning(
                    "Skipping share of %s with unknown %s %s",
                    visualization.id,
                    entry.principal_type.value,
                    entry.principal_id,
                )
                report.skipped.append(entry.principal_id)
                continue

            await uow.shared_entities.create(
                SharedEntity(
                    recipient_id=entry.principal_id,
                    recipient_type=entry.principal_type,
                    entity_id=visualization.id,
                    created_at=datetime.now(UTC),
                )
            )
            granted = True
            if table_backed:
                granted = await self._grant(
                    uow, entry, permission, visualization, entity_owner_id, report, sync_backing_store
                )
            if granted:
                report.shared_with.append(entry.principal_id)
            else:
                await uow.shared_entities.delete(entry.principal_id, visualization.id)

        await self._invalidate(visualization)
        return report

    async def withdraw(
        self,
        uow: UnitOfWork,
        permission: Permission,
        visualization: Visualization,
        *,
        sync_backing_store: bool = True,
    ) -> SyncReport:
        """Undo every share of visualization before its permission is deleted.

        Table grants held under the current ACL are revoked and dependent
        visualizations are checked as if nobody but the owner could read.
        """
        report = SyncReport()
        if visualization.is_table_backed():
            await self._revoke_previous(
                uow, visualization, permission.access_control_list, report, sync_backing_store
            )
            await self._guard_dependents(
                uow, visualization, replace(permission, access_control_list=[]), report
            )
        await uow.shared_entities.delete_by_entity(visualization.id)
        await self._invalidate(visualization)
        return report

    async def _guard_dependents(
        self,
        uow: UnitOfWork,
        visualization: Visualization,
        permission: Permission,
        report: SyncReport,
    ) -> None:
        guarded = await self._guard.check(uow, visualization.table, permission)
        report.unlinked_visualizations.extend(guarded.unlinked)
        report.deleted_visualizations.extend(guarded.deleted)
        report.removed_permissions.extend(guarded.removed_permissions)

    async def _exists(self, uow: UnitOfWork, entry: ACLEntry) -> bool:
        principals = uow.principals
        if entry.principal_type == PrincipalType.USER:
            return await principals.get_user(entry.principal_id) is not None
        if entry.principal_type == PrincipalType.ORGANIZATION:
            return await principals.get_organization(entry.principal_id) is not None
        return await principals.get_group(entry.principal_id) is not None

    async def _entity_owner_id(
        self, uow: UnitOfWork, permission: Permission, visualization: Visualization
    ) -> UUID | None:
        if visualization.permission_id in (None, permission.id):
            return permission.owner_id
        entity_permission = await uow.permissions.get_by_id(visualization.permission_id)
        return entity_permission.owner_id if entity_permission else None

    async def _grant(
        self,
        uow: UnitOfWork,
        entry: ACLEntry,
        permission: Permission,
        visualization: Visualization,
        entity_owner_id: UUID | None,
        report: SyncReport,
        sync_backing_store: bool,
    ) -> bool:
        try:
            if entry.principal_type == PrincipalType.GROUP:
                if sync_backing_store:
                    group = await uow.principals.get_group(entry.principal_id)
                    await self._backing_store.grant_group(visualization.table, group, entry.access)
                return True
            target = await grant_target_for(entry.principal_type, entry.principal_id, uow.principals)
            await apply_grant(
                self._backing_store,
                target,
                permission,
                visualization,
                entity_owner_id,
                entry.access,
            )
            return True
        except BackingStoreError as e:
            logger.exception(
                "Failed to grant %s on %s to %s %s",
                entry.access.value,
                visualization.id,
                entry.principal_type.value,
                entry.principal_id,
            )
            report.failures.append(SyncFailure(entry.principal_id, "grant", str(e)))
            return False

    async def _revoke_previous(
        self,
        uow: UnitOfWork,
        visualization: Visualization,
        previous_acl: Sequence[ACLEntry],
        report: SyncReport,
        sync_backing_store: bool,
    ) -> None:
        table = visualization.table
        organizations = relevant_entries(previous_acl, PrincipalType.ORGANIZATION)
        if organizations:
            organization = await uow.principals.get_organization(organizations[0].principal_id)
            if organization is not None:
                await self._revoke(
                    report,
                    organization.id,
                    self._backing_store.remove_organization_access(table, organization),
                )

        for entry in relevant_entries(previous_acl, PrincipalType.USER):
            user = await uow.principals.get_user(entry.principal_id)
            if user is None:
                continue
            await self._revoke(report, user.id, self._backing_store.remove_access(table, user))

        if not sync_backing_store:
            return
        for entry in relevant_entries(previous_acl, PrincipalType.GROUP):
            group = await uow.principals.get_group(entry.principal_id)
            if group is None:
                continue
            await self._revoke(
                report,
                group.id,
                self._backing_store.grant_group(table, group, AccessLevel.NONE),
            )

    async def _revoke(self, report: SyncReport, recipient_id: UUID, call) -> None:
        try:
            await call
        except BackingStoreError as e:
            logger.exception("Failed to revoke table access from %s", recipient_id)
            report.failures.append(SyncFailure(recipient_id, "revoke", str(e)))

    async def _invalidate(self, visualization: Visualization) -> None:
        try:
            await self._invalidator.invalidate(visualization)
        except Exception:
            logger.exception("Failed to invalidate caches of visualization %s", visualization.id)
