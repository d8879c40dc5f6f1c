"""Results of permission commits."""

from dataclasses import dataclass, field
from uuid import UUID

from sharegrant.domain.entities import ACLEntry, Permission, Visualization
from sharegrant.domain.services.acl_differ import AclDelta


@dataclass
class SyncFailure:
    """Backing-store change that could not be applied for one recipient."""

    recipient_id: UUID
    operation: str
    error: str


@dataclass
class RemovedPermission:
    """Permission dropped with its visualization, and the revokes it implies."""

    permission: Permission
    visualization: Visualization
    delta: AclDelta


@dataclass
class SyncReport:
    """Outcome of a shared entity synchronization."""

    shared_with: list[UUID] = field(default_factory=list)
    skipped: list[UUID] = field(default_factory=list)
    failures: list[SyncFailure] = field(default_factory=list)
    unlinked_visualizations: list[UUID] = field(default_factory=list)
    deleted_visualizations: list[UUID] = field(default_factory=list)
    removed_permissions: list[RemovedPermission] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class EmissionResult:
    """Outcome of notification emission. Errors are informational only."""

    sent: int = 0
    errors: list[Exception] = field(default_factory=list)


@dataclass
class CommitResult:
    """Validated ACL, its delta against the previous one, and cascade outcome."""

    acl: list[ACLEntry]
    delta: AclDelta
    sync: SyncReport | None = None
    notifications: EmissionResult = field(default_factory=EmissionResult)
