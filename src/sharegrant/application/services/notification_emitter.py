"""Notification emitter - share/unshare events for ACL deltas."""

import logging
from collections.abc import Sequence
from uuid import UUID

from sharegrant.application.dto.commit_result import EmissionResult, RemovedPermission
from sharegrant.application.dto.notification_event import NotificationEvent
from sharegrant.application.ports import NotificationSink
from sharegrant.domain.entities import Permission, Visualization
from sharegrant.domain.exceptions import NotFound, NotificationDeliveryFailure
from sharegrant.domain.services.acl_differ import AclChange, AclDelta, iter_changes
from sharegrant.domain.value_objects import (
    GrantAction,
    NotificationType,
    PrincipalType,
    VisualizationType,
)

logger = logging.getLogger(__name__)

_EVENT_TYPES = {
    (VisualizationType.DERIVED, GrantAction.GRANT): NotificationType.SHARE_VISUALIZATION,
    (VisualizationType.DERIVED, GrantAction.REVOKE): NotificationType.UNSHARE_VISUALIZATION,
    (VisualizationType.TABLE, GrantAction.GRANT): NotificationType.SHARE_TABLE,
    (VisualizationType.TABLE, GrantAction.REVOKE): NotificationType.UNSHARE_TABLE,
}


def event_for(
    change: AclChange,
    recipient_id: UUID,
    permission: Permission,
    visualization: Visualization,
) -> NotificationEvent | None:
    """Event for one user transition, None when nothing should be sent."""
    event_type = _EVENT_TYPES.get((visualization.type, change.action))
    if event_type is None:
        return None
    if change.action == GrantAction.GRANT:
        if not change.access.is_readable:
            return None
        return NotificationEvent(
            type=event_type,
            entity_id=visualization.id,
            recipient_id=recipient_id,
        )
    if not change.previous.is_readable:
        return None
    return NotificationEvent(
        type=event_type,
        entity_id=visualization.id,
        recipient_id=recipient_id,
        entity_name=visualization.name,
        owner_name=permission.owner_username,
    )


class NotificationEmitter:
    """Enqueues one event per user grant/revoke. Best effort, never raises."""

    def __init__(self, sink: NotificationSink, enabled: bool = True) -> None:
        self._sink = sink
        self._enabled = enabled

    async def emit(
        self,
        delta: AclDelta,
        permission: Permission,
        visualization: Visualization | None,
    ) -> EmissionResult:
        result = EmissionResult()
        if not self._enabled:
            return result

        # Only user recipients are notified.
        for principal_type, recipient_id, change in iter_changes(delta):
            if principal_type != PrincipalType.USER:
                continue
            try:
                if visualization is None:
                    raise NotFound("Visualization", permission.entity_id)
                event = event_for(change, recipient_id, permission, visualization)
                if event is None:
                    continue
                await self._sink.enqueue(event)
                result.sent += 1
            except Exception as e:
                logger.exception(
                    "Problem sending notification mail to %s for permission %s",
                    recipient_id,
                    permission.id,
                )
                result.errors.append(NotificationDeliveryFailure(str(e)))
        return result

    async def emit_removed(
        self, removed: Sequence[RemovedPermission], result: EmissionResult
    ) -> EmissionResult:
        """Unshare events for permissions deleted with their visualization, added to result."""
        for item in removed:
            emitted = await self.emit(item.delta, item.permission, item.visualization)
            result.sent += emitted.sent
            result.errors.extend(emitted.errors)
        return result
