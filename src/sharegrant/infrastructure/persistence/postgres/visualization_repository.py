"""PostgreSQL visualization repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from sharegrant.domain.entities import TableRef, Visualization
from sharegrant.domain.value_objects import VisualizationType

_SELECT = (
    "SELECT v.id, v.name, v.type, v.user_id, v.permission_id, "
    "t.id, t.schema_name, t.table_name "
    "FROM visualizations v LEFT JOIN user_tables t ON t.id = v.table_id "
)

# Derived visualizations using the table, split on whether they use other tables too.
_DEPENDENT = (
    _SELECT
    + "WHERE v.type = 'derived' AND EXISTS ("
    "SELECT 1 FROM visualization_table d WHERE d.visualization_id = v.id AND d.table_id = %s"
    ") AND {negation} EXISTS ("
    "SELECT 1 FROM visualization_table o WHERE o.visualization_id = v.id AND o.table_id <> %s"
    ")"
)


def _row_to_visualization(r: tuple) -> Visualization:
    table = TableRef(id=r[5], schema=r[6], name=r[7]) if r[5] else None
    return Visualization(
        id=r[0],
        name=r[1],
        type=VisualizationType(r[2]),
        user_id=r[3],
        permission_id=r[4],
        table=table,
    )


class PostgresVisualizationRepository:
    """Visualization repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def _fetch_one(self, where: str, params: tuple) -> Visualization | None:
        cur = await self._conn.execute(_SELECT + where, params)
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_visualization(r)

    async def get_by_id(self, visualization_id: UUID) -> Visualization | None:
        """Get visualization by id."""
        return await self._fetch_one("WHERE v.id = %s", (visualization_id,))

    async def get_by_permission_id(self, permission_id: UUID) -> Visualization | None:
        """Get the visualization a permission protects."""
        return await self._fetch_one("WHERE v.permission_id = %s", (permission_id,))

    async def get_canonical_for_table(self, table_id: UUID) -> Visualization | None:
        """Get the table visualization of a user table."""
        return await self._fetch_one(
            "WHERE v.type = 'table' AND v.table_id = %s", (table_id,)
        )

    async def attach_permission(self, visualization_id: UUID, permission_id: UUID) -> None:
        await self._conn.execute(
            "UPDATE visualizations SET permission_id = %s WHERE id = %s",
            (permission_id, visualization_id),
        )

    async def list_fully_dependent(self, table_id: UUID) -> list[Visualization]:
        """Derived visualizations whose layers only use this table."""
        cur = await self._conn.execute(
            _DEPENDENT.format(negation="NOT"), (table_id, table_id)
        )
        return [_row_to_visualization(r) for r in await cur.fetchall()]

    async def list_partially_dependent(self, table_id: UUID) -> list[Visualization]:
        """Derived visualizations using this table and at least one other."""
        cur = await self._conn.execute(
            _DEPENDENT.format(negation=""), (table_id, table_id)
        )
        return [_row_to_visualization(r) for r in await cur.fetchall()]

    async def unlink_table(self, visualization_id: UUID, table_id: UUID) -> None:
        """Remove the visualization's layers on the table."""
        await self._conn.execute(
            "DELETE FROM visualization_table WHERE visualization_id = %s AND table_id = %s",
            (visualization_id, table_id),
        )

    async def delete(self, visualization_id: UUID) -> None:
        await self._conn.execute(
            "DELETE FROM visualizations WHERE id = %s",
            (visualization_id,),
        )
