"""Unit tests for the shared entity synchronizer."""

from uuid import uuid4

import pytest

from sharegrant.application.services.shared_entity_synchronizer import (
    SharedEntitySynchronizer,
    shared_recipients,
)
from sharegrant.domain.entities import ACLEntry
from sharegrant.domain.exceptions import PermissionGrantError
from sharegrant.domain.value_objects import AccessLevel, PrincipalType

from tests.conftest import (
    FakeUnitOfWork,
    RecordingBackingStore,
    RecordingInvalidator,
    make_derived_visualization,
    make_permission,
    make_table_visualization,
)

R = AccessLevel.READONLY
RW = AccessLevel.READWRITE


@pytest.fixture
def world(fake_uow: FakeUnitOfWork):
    """Owner with a table, two users, an organization and a group."""
    directory = fake_uow.principals
    owner = directory.add_user("olga")
    org = directory.add_organization("acme")
    bob = directory.add_user("bob", organization_id=org.id)
    carl = directory.add_user("carl")
    group = directory.add_group("analysts", org.id)
    vis = make_table_visualization(owner)
    fake_uow.visualizations.add(vis)
    return {"owner": owner, "org": org, "bob": bob, "carl": carl, "group": group, "vis": vis}


def _synchronizer(backing_store, invalidator) -> SharedEntitySynchronizer:
    return SharedEntitySynchronizer(backing_store=backing_store, invalidator=invalidator)


def test_shared_recipients_order_and_single_org() -> None:
    user, org1, org2, group = uuid4(), uuid4(), uuid4(), uuid4()
    acl = [
        ACLEntry(PrincipalType.GROUP, group, R),
        ACLEntry(PrincipalType.ORGANIZATION, org1, R),
        ACLEntry(PrincipalType.ORGANIZATION, org2, R),
        ACLEntry(PrincipalType.USER, user, AccessLevel.NONE),
    ]
    assert [e.principal_id for e in shared_recipients(acl)] == [org1, group]


@pytest.mark.asyncio
async def test_rebuilds_index_and_grants(
    fake_uow: FakeUnitOfWork, world, backing_store: RecordingBackingStore, invalidator
) -> None:
    vis, owner = world["vis"], world["owner"]
    acl = [
        ACLEntry(PrincipalType.USER, world["bob"].id, RW),
        ACLEntry(PrincipalType.USER, world["carl"].id, AccessLevel.NONE),
        ACLEntry(PrincipalType.ORGANIZATION, world["org"].id, R),
        ACLEntry(PrincipalType.GROUP, world["group"].id, R),
    ]
    perm = make_permission(owner, vis.id, acl)

    report = await _synchronizer(backing_store, invalidator).synchronize(
        fake_uow, perm, vis, []
    )

    assert report.ok
    assert fake_uow.shared_entities.pairs(vis.id) == {
        (world["bob"].id, "user"),
        (world["org"].id, "org"),
        (world["group"].id, "group"),
    }
    assert backing_store.privileges == {
        ("role_bob", vis.table.id): RW,
        ("org_acme", vis.table.id): R,
        ("group_analysts", vis.table.id): R,
    }
    assert invalidator.invalidated == [vis.id]


@pytest.mark.asyncio
async def test_revokes_previous_grants(fake_uow, world, backing_store, invalidator) -> None:
    vis, owner = world["vis"], world["owner"]
    previous = [
        ACLEntry(PrincipalType.USER, world["bob"].id, RW),
        ACLEntry(PrincipalType.ORGANIZATION, world["org"].id, R),
        ACLEntry(PrincipalType.GROUP, world["group"].id, R),
    ]
    sync = _synchronizer(backing_store, invalidator)
    await sync.synchronize(fake_uow, make_permission(owner, vis.id, previous), vis, [])

    report = await sync.synchronize(fake_uow, make_permission(owner, vis.id, []), vis, previous)

    assert report.ok
    assert backing_store.privileges == {}
    assert len(backing_store.ops("remove_access")) == 1
    assert len(backing_store.ops("remove_organization_access")) == 1
    assert fake_uow.shared_entities.pairs(vis.id) == set()


@pytest.mark.asyncio
async def test_is_idempotent(fake_uow, world, backing_store, invalidator) -> None:
    vis, owner = world["vis"], world["owner"]
    acl = [
        ACLEntry(PrincipalType.USER, world["bob"].id, R),
        ACLEntry(PrincipalType.GROUP, world["group"].id, RW),
    ]
    perm = make_permission(owner, vis.id, acl)
    sync = _synchronizer(backing_store, invalidator)

    await sync.synchronize(fake_uow, perm, vis, [])
    index_once = fake_uow.shared_entities.pairs(vis.id)
    privileges_once = dict(backing_store.privileges)
    await sync.synchronize(fake_uow, perm, vis, acl)

    assert fake_uow.shared_entities.pairs(vis.id) == index_once
    assert backing_store.privileges == privileges_once


@pytest.mark.asyncio
async def test_group_sync_suppressed(fake_uow, world, backing_store, invalidator) -> None:
    """Updates coming from the database do not touch group grants."""
    vis, owner = world["vis"], world["owner"]
    group_entry = ACLEntry(PrincipalType.GROUP, world["group"].id, R)
    perm = make_permission(owner, vis.id, [group_entry])

    await _synchronizer(backing_store, invalidator).synchronize(
        fake_uow, perm, vis, [group_entry], sync_backing_store=False
    )

    assert backing_store.ops("grant_group") == []
    assert fake_uow.shared_entities.pairs(vis.id) == {(world["group"].id, "group")}


@pytest.mark.asyncio
async def test_derived_visualization_has_no_grants(
    fake_uow, world, backing_store, invalidator
) -> None:
    owner = world["owner"]
    vis = make_derived_visualization(owner)
    perm = make_permission(owner, vis.id, [ACLEntry(PrincipalType.USER, world["bob"].id, R)])

    report = await _synchronizer(backing_store, invalidator).synchronize(
        fake_uow, perm, vis, []
    )

    assert report.shared_with == [world["bob"].id]
    assert backing_store.calls == []


@pytest.mark.asyncio
async def test_unknown_recipients_skipped(fake_uow, world, backing_store, invalidator) -> None:
    vis, owner = world["vis"], world["owner"]
    ghost = uuid4()
    acl = [
        ACLEntry(PrincipalType.USER, ghost, R),
        ACLEntry(PrincipalType.USER, world["bob"].id, R),
    ]

    report = await _synchronizer(backing_store, invalidator).synchronize(
        fake_uow, make_permission(owner, vis.id, acl), vis, []
    )

    assert report.skipped == [ghost]
    assert report.shared_with == [world["bob"].id]


@pytest.mark.asyncio
async def test_backing_store_failure_isolated(fake_uow, world, invalidator, caplog) -> None:
    """A failing recipient is reported and left out of the index; others proceed."""
    vis, owner = world["vis"], world["owner"]
    backing_store = RecordingBackingStore(fail_roles={"role_bob"})
    acl = [
        ACLEntry(PrincipalType.USER, world["bob"].id, R),
        ACLEntry(PrincipalType.USER, world["carl"].id, R),
    ]

    report = await _synchronizer(backing_store, invalidator).synchronize(
        fake_uow, make_permission(owner, vis.id, acl), vis, []
    )

    assert not report.ok
    assert [(f.recipient_id, f.operation) for f in report.failures] == [
        (world["bob"].id, "grant")
    ]
    assert fake_uow.shared_entities.pairs(vis.id) == {(world["carl"].id, "user")}
    assert backing_store.privileges == {("role_carl", vis.table.id): R}
    assert "Failed to grant" in caplog.text


@pytest.mark.asyncio
async def test_foreign_table_permission_aborts(
    fake_uow, world, backing_store, invalidator
) -> None:
    vis = world["vis"]
    intruder_perm = make_permission(world["carl"], vis.id, [])
    owner_perm = make_permission(world["owner"], vis.id, [])
    fake_uow.permissions.add(owner_perm)
    vis.permission_id = owner_perm.id
    intruder_perm.access_control_list = [ACLEntry(PrincipalType.USER, world["bob"].id, RW)]

    with pytest.raises(PermissionGrantError):
        await _synchronizer(backing_store, invalidator).synchronize(
            fake_uow, intruder_perm, vis, []
        )
    assert backing_store.ops("grant_user") == []


@pytest.mark.asyncio
async def test_invalidation_failure_does_not_fail_sync(
    fake_uow, world, backing_store
) -> None:
    from unittest.mock import AsyncMock

    invalidator = AsyncMock()
    invalidator.invalidate.side_effect = RuntimeError("cache down")
    vis = world["vis"]

    report = await _synchronizer(backing_store, invalidator).synchronize(
        fake_uow, make_permission(world["owner"], vis.id, []), vis, []
    )

    assert report.ok
    invalidator.invalidate.assert_awaited_once()


@pytest.mark.asyncio
async def test_duplicate_entries_grant_highest_level(
    fake_uow, world, backing_store, invalidator
) -> None:
    vis, owner, bob = world["vis"], world["owner"], world["bob"]
    acl = [
        ACLEntry(PrincipalType.USER, bob.id, RW),
        ACLEntry(PrincipalType.USER, bob.id, R),
    ]

    report = await _synchronizer(backing_store, invalidator).synchronize(
        fake_uow, make_permission(owner, vis.id, acl), vis, []
    )

    assert report.shared_with == [bob.id]
    assert backing_store.ops("grant_user") == [("grant_user", "role_bob", vis.table.id, RW)]
    assert backing_store.privileges == {("role_bob", vis.table.id): RW}


@pytest.mark.asyncio
async def test_withdraw_revokes_grants_and_clears_index(
    fake_uow, world, backing_store, invalidator
) -> None:
    vis, owner = world["vis"], world["owner"]
    acl = [
        ACLEntry(PrincipalType.USER, world["bob"].id, RW),
        ACLEntry(PrincipalType.USER, world["carl"].id, R),
        ACLEntry(PrincipalType.ORGANIZATION, world["org"].id, R),
        ACLEntry(PrincipalType.GROUP, world["group"].id, R),
    ]
    perm = make_permission(owner, vis.id, acl)
    sync = _synchronizer(backing_store, invalidator)
    await sync.synchronize(fake_uow, perm, vis, [])

    report = await sync.withdraw(fake_uow, perm, vis)

    assert report.ok
    assert backing_store.privileges == {}
    assert {c[1] for c in backing_store.ops("remove_access")} == {"role_bob", "role_carl"}
    assert fake_uow.shared_entities.pairs(vis.id) == set()


@pytest.mark.asyncio
async def test_withdraw_prunes_dependent_maps(
    fake_uow, world, backing_store, invalidator
) -> None:
    vis, owner, bob = world["vis"], world["owner"], world["bob"]
    acl = [ACLEntry(PrincipalType.USER, bob.id, R)]
    perm = make_permission(owner, vis.id, acl)
    bobs_map = make_derived_visualization(bob)
    fake_uow.visualizations.add(bobs_map, [vis.table.id])

    report = await _synchronizer(backing_store, invalidator).withdraw(fake_uow, perm, vis)

    assert report.deleted_visualizations == [bobs_map.id]
    assert await fake_uow.visualizations.get_by_id(bobs_map.id) is None
