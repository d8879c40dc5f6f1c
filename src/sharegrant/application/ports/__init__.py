"""Application ports - interfaces for external adapters."""

from sharegrant.application.ports.backing_store import BackingStore
from sharegrant.application.ports.entity_invalidator import EntityInvalidator
from sharegrant.application.ports.notification_sink import NotificationSink
from sharegrant.application.ports.permission_checker import PermissionChecker
from sharegrant.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "BackingStore",
    "EntityInvalidator",
    "NotificationSink",
    "PermissionChecker",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
