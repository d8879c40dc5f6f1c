"""Pytest fixtures for ShareGrant tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from sharegrant.application.dto.notification_event import NotificationEvent
from sharegrant.domain.entities import (
    Group,
    Organization,
    Permission,
    SharedEntity,
    TableRef,
    User,
    Visualization,
)
from sharegrant.domain.exceptions import BackingStoreError
from sharegrant.domain.value_objects import AccessLevel, VisualizationType


# --- Fake repositories ---


def _copy_permission(permission: Permission) -> Permission:
    return replace(permission, access_control_list=list(permission.access_control_list))


class FakePermissionRepository:
    """In-memory permission repository. Stores and returns copies."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Permission] = {}

    async def get_by_id(self, permission_id: UUID, for_update: bool = False) -> Permission | None:
        perm = self._by_id.get(permission_id)
        return _copy_permission(perm) if perm else None

    async def create(self, permission: Permission) -> Permission:
        self._by_id[permission.id] = _copy_permission(permission)
        return permission

    async def update(self, permission: Permission) -> None:
        self._by_id[permission.id] = _copy_permission(permission)

    async def delete(self, permission_id: UUID) -> None:
        self._by_id.pop(permission_id, None)

    def add(self, permission: Permission) -> None:
        """Helper to store permission for tests."""
        self._by_id[permission.id] = _copy_permission(permission)

    def stored(self, permission_id: UUID) -> Permission | None:
        return self._by_id.get(permission_id)


class FakeSharedEntityRepository:
    """In-memory shared entity index."""

    def __init__(self) -> None:
        self._rows: list[SharedEntity] = []

    async def list_by_entity(self, entity_id: UUID) -> list[SharedEntity]:
        return [r for r in self._rows if r.entity_id == entity_id]

    async def create(self, shared_entity: SharedEntity) -> SharedEntity:
        await self.delete(shared_entity.recipient_id, shared_entity.entity_id)
        self._rows.append(shared_entity)
        return shared_entity

    async def delete(self, recipient_id: UUID, entity_id: UUID) -> None:
        self._rows = [
            r
            for r in self._rows
            if not (r.recipient_id == recipient_id and r.entity_id == entity_id)
        ]

    async def delete_by_entity(self, entity_id: UUID) -> None:
        self._rows = [r for r in self._rows if r.entity_id != entity_id]

    def pairs(self, entity_id: UUID) -> set[tuple[UUID, str]]:
        """Helper: (recipient_id, recipient_type) shared for entity."""
        return {
            (r.recipient_id, r.recipient_type.value)
            for r in self._rows
            if r.entity_id == entity_id
        }


class FakePrincipalDirectory:
    """In-memory users, organizations and groups."""

    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}
        self.organizations: dict[UUID, Organization] = {}
        self.groups: dict[UUID, Group] = {}

    async def get_user(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)

    async def get_organization(self, organization_id: UUID) -> Organization | None:
        return self.organizations.get(organization_id)

    async def get_group(self, group_id: UUID) -> Group | None:
        return self.groups.get(group_id)

    async def list_users(self, user_ids: list[UUID]) -> list[User]:
        return [self.users[i] for i in user_ids if i in self.users]

    def add_user(self, username: str, **kwargs) -> User:
        user = User(id=uuid4(), username=username, database_role=f"role_{username}", **kwargs)
        self.users[user.id] = user
        return user

    def add_organization(self, name: str) -> Organization:
        org = Organization(id=uuid4(), name=name, database_role=f"org_{name}")
        self.organizations[org.id] = org
        return org

    def add_group(self, name: str, organization_id: UUID) -> Group:
        group = Group(
            id=uuid4(),
            name=name,
            organization_id=organization_id,
            database_role=f"group_{name}",
        )
        self.groups[group.id] = group
        return group


class FakeVisualizationRepository:
    """In-memory visualizations with table layers."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Visualization] = {}
        self._layers: dict[UUID, set[UUID]] = {}  # visualization_id -> {table_id}

    async def get_by_id(self, visualization_id: UUID) -> Visualization | None:
        return self._by_id.get(visualization_id)

    async def get_by_permission_id(self, permission_id: UUID) -> Visualization | None:
        for v in self._by_id.values():
            if v.permission_id == permission_id:
                return v
        return None

    async def attach_permission(self, visualization_id: UUID, permission_id: UUID) -> None:
        self._by_id[visualization_id] = replace(
            self._by_id[visualization_id], permission_id=permission_id
        )

    async def get_canonical_for_table(self, table_id: UUID) -> Visualization | None:
        for v in self._by_id.values():
            if v.type == VisualizationType.TABLE and v.table and v.table.id == table_id:
                return v
        return None

    async def list_fully_dependent(self, table_id: UUID) -> list[Visualization]:
        return [
            self._by_id[vis_id]
            for vis_id, tables in self._layers.items()
            if tables == {table_id}
        ]

    async def list_partially_dependent(self, table_id: UUID) -> list[Visualization]:
        return [
            self._by_id[vis_id]
            for vis_id, tables in self._layers.items()
            if table_id in tables and len(tables) > 1
        ]

    async def unlink_table(self, visualization_id: UUID, table_id: UUID) -> None:
        self._layers.get(visualization_id, set()).discard(table_id)

    async def delete(self, visualization_id: UUID) -> None:
        self._by_id.pop(visualization_id, None)
        self._layers.pop(visualization_id, None)

    def add(self, visualization: Visualization, layer_tables: list[UUID] | None = None) -> None:
        """Helper to add visualization, with layer tables for derived maps."""
        self._by_id[visualization.id] = visualization
        if layer_tables is not None:
            self._layers[visualization.id] = set(layer_tables)

    def layers(self, visualization_id: UUID) -> set[UUID]:
        return self._layers.get(visualization_id, set())


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work. Rollback restores permissions and the share index."""

    def __init__(self) -> None:
        self.permissions = FakePermissionRepository()
        self.shared_entities = FakeSharedEntityRepository()
        self.principals = FakePrincipalDirectory()
        self.visualizations = FakeVisualizationRepository()
        self.commits = 0
        self.rollbacks = 0
        self._snapshot: tuple | None = None

    def begin(self) -> None:
        self._snapshot = (
            dict(self.permissions._by_id),
            list(self.shared_entities._rows),
        )

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1
        if self._snapshot:
            self.permissions._by_id, self.shared_entities._rows = self._snapshot
            self._snapshot = None


def factory_for(uow: FakeUnitOfWork):
    """UoW factory yielding the same FakeUnitOfWork, committing like the Postgres one."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        uow.begin()
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise

    return _factory


# --- Fake adapters ---


class RecordingBackingStore:
    """Backing store recording calls and resulting privileges per (role, table)."""

    def __init__(self, fail_roles: set[str] | None = None) -> None:
        self.calls: list[tuple[str, str, UUID, AccessLevel]] = []
        self.privileges: dict[tuple[str, UUID], AccessLevel] = {}
        self.fail_roles = fail_roles or set()

    def _set(self, op: str, role: str, table: TableRef, access: AccessLevel) -> None:
        self.calls.append((op, role, table.id, access))
        if role in self.fail_roles:
            raise BackingStoreError(f"role {role} does not exist")
        if access == AccessLevel.NONE:
            self.privileges.pop((role, table.id), None)
        else:
            self.privileges[(role, table.id)] = access

    async def grant_user(self, table: TableRef, user: User, access: AccessLevel) -> None:
        self._set("grant_user", user.database_role, table, access)

    async def grant_organization(
        self, table: TableRef, organization: Organization, access: AccessLevel
    ) -> None:
        self._set("grant_organization", organization.database_role, table, access)

    async def grant_group(self, table: TableRef, group: Group, access: AccessLevel) -> None:
        self._set("grant_group", group.database_role, table, access)

    async def remove_access(self, table: TableRef, user: User) -> None:
        self._set("remove_access", user.database_role, table, AccessLevel.NONE)

    async def remove_organization_access(
        self, table: TableRef, organization: Organization
    ) -> None:
        self._set(
            "remove_organization_access", organization.database_role, table, AccessLevel.NONE
        )

    def ops(self, op: str) -> list[tuple[str, str, UUID, AccessLevel]]:
        return [c for c in self.calls if c[0] == op]


class RecordingNotificationSink:
    """Collects enqueued events."""

    def __init__(self) -> None:
        self.events: list[NotificationEvent] = []

    async def enqueue(self, event: NotificationEvent) -> None:
        self.events.append(event)


class RecordingInvalidator:
    def __init__(self) -> None:
        self.invalidated: list[UUID] = []

    async def invalidate(self, visualization: Visualization) -> None:
        self.invalidated.append(visualization.id)


# --- Builders ---


def make_permission(owner: User, entity_id: UUID | None = None, acl=None) -> Permission:
    now = datetime.now(UTC)
    return Permission(
        id=uuid4(),
        owner_id=owner.id,
        owner_username=owner.username,
        entity_id=entity_id,
        created_at=now,
        updated_at=now,
        access_control_list=list(acl or []),
    )


def make_table_visualization(owner: User, name: str = "cities") -> Visualization:
    return Visualization(
        id=uuid4(),
        name=name,
        type=VisualizationType.TABLE,
        user_id=owner.id,
        table=TableRef(id=uuid4(), schema=owner.username, name=name),
    )


def make_derived_visualization(owner: User, name: str = "my map") -> Visualization:
    return Visualization(
        id=uuid4(),
        name=name,
        type=VisualizationType.DERIVED,
        user_id=owner.id,
    )


def acl_item(principal, access: str, principal_type: str = "user") -> dict:
    """Incoming ACL item for principal."""
    entity = {"id": str(principal.id)}
    if isinstance(principal, User):
        entity["username"] = principal.username
    else:
        entity["name"] = principal.name
    return {"type": principal_type, "entity": entity, "access": access}


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager around fake_uow."""
    return factory_for(fake_uow)


@pytest.fixture
def backing_store() -> RecordingBackingStore:
    return RecordingBackingStore()


@pytest.fixture
def sink() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def invalidator() -> RecordingInvalidator:
    return RecordingInvalidator()
