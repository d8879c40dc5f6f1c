"""Domain value objects."""

from sharegrant.domain.value_objects.access_level import AccessLevel
from sharegrant.domain.value_objects.grant_action import GrantAction
from sharegrant.domain.value_objects.notification_type import NotificationType
from sharegrant.domain.value_objects.principal_type import PrincipalType
from sharegrant.domain.value_objects.visualization_type import VisualizationType

__all__ = [
    "AccessLevel",
    "GrantAction",
    "NotificationType",
    "PrincipalType",
    "VisualizationType",
]
