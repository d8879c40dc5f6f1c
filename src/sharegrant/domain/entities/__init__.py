"""Domain entities."""

from sharegrant.domain.entities.acl_entry import ACLEntry
from sharegrant.domain.entities.permission import Permission
from sharegrant.domain.entities.principal import Group, Organization, User
from sharegrant.domain.entities.shared_entity import SharedEntity
from sharegrant.domain.entities.visualization import TableRef, Visualization

__all__ = [
    "ACLEntry",
    "Group",
    "Organization",
    "Permission",
    "SharedEntity",
    "TableRef",
    "User",
    "Visualization",
]
