"""Repository ports."""

from sharegrant.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from sharegrant.application.ports.repositories.principal_directory import (
    PrincipalDirectory,
)
from sharegrant.application.ports.repositories.shared_entity_repository import (
    SharedEntityRepository,
)
from sharegrant.application.ports.repositories.visualization_repository import (
    VisualizationRepository,
)

__all__ = [
    "PermissionRepository",
    "PrincipalDirectory",
    "SharedEntityRepository",
    "VisualizationRepository",
]
