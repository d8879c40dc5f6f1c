"""Shared entity - derived index of who has a visualization shared with them."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sharegrant.domain.value_objects import PrincipalType

ENTITY_TYPE_VISUALIZATION = "vis"


@dataclass
class SharedEntity:
    """Recipient (user, organization or group) with non-none access to an entity."""

    recipient_id: UUID
    recipient_type: PrincipalType
    entity_id: UUID
    created_at: datetime
    entity_type: str = ENTITY_TYPE_VISUALIZATION
