"""Notification event DTO."""

from dataclasses import dataclass
from uuid import UUID

from sharegrant.domain.value_objects import NotificationType


@dataclass(frozen=True)
class NotificationEvent:
    """Outbound share/unshare event addressed to one recipient.

    Unshare events carry entity and owner names: the recipient can no
    longer read the entity itself.
    """

    type: NotificationType
    entity_id: UUID
    recipient_id: UUID
    entity_name: str | None = None
    owner_name: str | None = None
