"""Visualization entity - a map or a canonical table visualization."""

from dataclasses import dataclass
from uuid import UUID

from sharegrant.domain.value_objects import VisualizationType


@dataclass(frozen=True)
class TableRef:
    """User table backing a canonical visualization."""

    id: UUID
    schema: str
    name: str


@dataclass
class Visualization:
    """Shared entity protected by a Permission."""

    id: UUID
    name: str
    type: VisualizationType
    user_id: UUID
    permission_id: UUID | None = None
    table: TableRef | None = None

    def is_table_backed(self) -> bool:
        return self.type == VisualizationType.TABLE and self.table is not None
