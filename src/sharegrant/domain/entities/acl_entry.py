"""ACL entry - access granted to one principal."""

from dataclasses import dataclass
from uuid import UUID

from sharegrant.domain.value_objects import AccessLevel, PrincipalType


@dataclass(frozen=True)
class ACLEntry:
    """Access level granted to a user, organization or group."""

    principal_type: PrincipalType
    principal_id: UUID
    access: AccessLevel

    def to_dict(self) -> dict[str, str]:
        """Stored form: {type, id, access}."""
        return {
            "type": self.principal_type.value,
            "id": str(self.principal_id),
            "access": self.access.value,
        }
