"""PostgreSQL shared entity repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from sharegrant.domain.entities import SharedEntity
from sharegrant.domain.value_objects import PrincipalType


class PostgresSharedEntityRepository:
    """Shared entity index. Rows are derived from ACLs, never edited by hand."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_by_entity(self, entity_id: UUID) -> list[SharedEntity]:
        """List recipients an entity is shared with."""
        cur = await self._conn.execute(
            "SELECT recipient_id, recipient_type, entity_id, entity_type, created_at "
            "FROM shared_entity WHERE entity_id = %s ORDER BY created_at",
            (entity_id,),
        )
        rows = await cur.fetchall()
        return [
            SharedEntity(
                recipient_id=r[0],
                recipient_type=PrincipalType(r[1]),
                entity_id=r[2],
                entity_type=r[3],
                created_at=r[4],
            )
            for r in rows
        ]

    async def create(self, shared_entity: SharedEntity) -> SharedEntity:
        """Insert index row. Re-inserting an existing pair is a no-op."""
        await self._conn.execute(
            "INSERT INTO shared_entity (recipient_id, recipient_type, entity_id, entity_type, created_at) "
            "VALUES (%s, %s, %s, %s, %s) ON CONFLICT (recipient_id, entity_id) DO NOTHING",
            (
                shared_entity.recipient_id,
                shared_entity.recipient_type.value,
                shared_entity.entity_id,
                shared_entity.entity_type,
                shared_entity.created_at,
            ),
        )
        return shared_entity

    async def delete(self, recipient_id: UUID, entity_id: UUID) -> None:
        await self._conn.execute(
            "DELETE FROM shared_entity WHERE recipient_id = %s AND entity_id = %s",
            (recipient_id, entity_id),
        )

    async def delete_by_entity(self, entity_id: UUID) -> None:
        await self._conn.execute(
            "DELETE FROM shared_entity WHERE entity_id = %s",
            (entity_id,),
        )
