"""PostgreSQL permission repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from sharegrant.domain.entities import Permission
from sharegrant.domain.services import acl_codec

_COLUMNS = "id, owner_id, owner_username, access_control_list, entity_id, created_at, updated_at"


def _row_to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        owner_id=r[1],
        owner_username=r[2],
        access_control_list=acl_codec.parse(r[3]),
        entity_id=r[4],
        created_at=r[5],
        updated_at=r[6],
    )


class PostgresPermissionRepository:
    """Permission repository implementation. ACL is stored as jsonb."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: UUID, for_update: bool = False) -> Permission | None:
        """Get permission by id, optionally locking the row until commit."""
        query = f"SELECT {_COLUMNS} FROM permission WHERE id = %s"
        if for_update:
            query += " FOR UPDATE"
        cur = await self._conn.execute(query, (permission_id,))
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_permission(r)

    async def create(self, permission: Permission) -> Permission:
        """Create permission."""
        await self._conn.execute(
            f"INSERT INTO permission ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s)",
            (
                permission.id,
                permission.owner_id,
                permission.owner_username,
                Jsonb(acl_codec.serialize(permission.access_control_list)),
                permission.entity_id,
                permission.created_at,
                permission.updated_at,
            ),
        )
        return permission

    async def update(self, permission: Permission) -> None:
        """Update ACL and owner."""
        await self._conn.execute(
            "UPDATE permission SET owner_id=%s, owner_username=%s, access_control_list=%s, "
            "entity_id=%s, updated_at=%s WHERE id=%s",
            (
                permission.owner_id,
                permission.owner_username,
                Jsonb(acl_codec.serialize(permission.access_control_list)),
                permission.entity_id,
                permission.updated_at,
                permission.id,
            ),
        )

    async def delete(self, permission_id: UUID) -> None:
        """Delete permission."""
        await self._conn.execute(
            "DELETE FROM permission WHERE id = %s",
            (permission_id,),
        )
