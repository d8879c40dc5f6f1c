"""Principals - users, organizations and groups."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass
class User:
    """Platform user. Viewers cannot be granted write access."""

    id: UUID
    username: str
    database_role: str
    organization_id: UUID | None = None
    group_ids: list[UUID] = field(default_factory=list)
    viewer: bool = False


@dataclass
class Organization:
    """Organization grouping users, with a shared database role."""

    id: UUID
    name: str
    database_role: str


@dataclass
class Group:
    """Group of users inside an organization."""

    id: UUID
    name: str
    organization_id: UUID
    database_role: str
