"""PostgreSQL principal directory - users, organizations, groups."""

from uuid import UUID

from psycopg import AsyncConnection

from sharegrant.domain.entities import Group, Organization, User

_USER_SELECT = (
    "SELECT u.id, u.username, u.database_role, u.organization_id, u.viewer, "
    "COALESCE(array_agg(ug.group_id) FILTER (WHERE ug.group_id IS NOT NULL), '{}') "
    "FROM users u LEFT JOIN user_group ug ON ug.user_id = u.id "
)


def _row_to_user(r: tuple) -> User:
    return User(
        id=r[0],
        username=r[1],
        database_role=r[2],
        organization_id=r[3],
        viewer=r[4],
        group_ids=list(r[5]),
    )


class PostgresPrincipalDirectory:
    """Principal lookups by id."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_user(self, user_id: UUID) -> User | None:
        """Get user with group memberships."""
        cur = await self._conn.execute(
            _USER_SELECT + "WHERE u.id = %s GROUP BY u.id",
            (user_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_user(r)

    async def list_users(self, user_ids: list[UUID]) -> list[User]:
        """Get users by ids. Unknown ids are ignored."""
        if not user_ids:
            return []
        cur = await self._conn.execute(
            _USER_SELECT + "WHERE u.id = ANY(%s) GROUP BY u.id",
            (list(user_ids),),
        )
        rows = await cur.fetchall()
        return [_row_to_user(r) for r in rows]

    async def get_organization(self, organization_id: UUID) -> Organization | None:
        cur = await self._conn.execute(
            "SELECT id, name, database_role FROM organizations WHERE id = %s",
            (organization_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return Organization(id=r[0], name=r[1], database_role=r[2])

    async def get_group(self, group_id: UUID) -> Group | None:
        cur = await self._conn.execute(
            "SELECT id, name, organization_id, database_role FROM groups WHERE id = %s",
            (group_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return Group(id=r[0], name=r[1], organization_id=r[2], database_role=r[3])
