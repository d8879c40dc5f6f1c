"""Permission entity - owner and ACL protecting one visualization."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from sharegrant.domain.entities.acl_entry import ACLEntry


@dataclass
class Permission:
    """Permission - owner has full access, ACL grants access to others.

    entity_id is the visualization this permission protects. One permission
    protects at most one visualization and vice versa.
    """

    id: UUID
    owner_id: UUID
    owner_username: str
    created_at: datetime
    updated_at: datetime
    entity_id: UUID | None = None
    access_control_list: list[ACLEntry] = field(default_factory=list)

    def is_owner(self, user_id: UUID) -> bool:
        return self.owner_id == user_id
