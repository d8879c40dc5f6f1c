"""PostgreSQL backing store - GRANT/REVOKE on user tables."""

import logging

import psycopg
from psycopg import sql
from psycopg_pool import AsyncConnectionPool

from sharegrant.domain.entities import Group, Organization, TableRef, User
from sharegrant.domain.exceptions import BackingStoreError
from sharegrant.domain.value_objects import AccessLevel

logger = logging.getLogger(__name__)

PRIVILEGES: dict[AccessLevel, tuple[str, ...]] = {
    AccessLevel.NONE: (),
    AccessLevel.READONLY: ("SELECT",),
    AccessLevel.READWRITE: ("SELECT", "INSERT", "UPDATE", "DELETE"),
}


def _table(table: TableRef) -> sql.Composed:
    return sql.SQL("{}.{}").format(sql.Identifier(table.schema), sql.Identifier(table.name))


def grant_statements(table: TableRef, role: str, access: AccessLevel) -> list[sql.Composed]:
    """Statements leaving role with exactly the privileges of access on table."""
    statements = [
        sql.SQL("REVOKE ALL ON TABLE {} FROM {}").format(_table(table), sql.Identifier(role))
    ]
    privileges = PRIVILEGES[access]
    if privileges:
        statements.append(
            sql.SQL("GRANT USAGE ON SCHEMA {} TO {}").format(
                sql.Identifier(table.schema), sql.Identifier(role)
            )
        )
        statements.append(
            sql.SQL("GRANT {} ON TABLE {} TO {}").format(
                sql.SQL(", ").join(sql.SQL(p) for p in privileges),
                _table(table),
                sql.Identifier(role),
            )
        )
    return statements


class PostgresBackingStore:
    """Applies table privileges to user, organization and group database roles.

    Each call runs in its own short transaction with a statement timeout.
    Grants leave the role with exactly the requested privileges, so
    repeating a call is harmless.
    """

    def __init__(self, pool: AsyncConnectionPool, statement_timeout_ms: int = 5000) -> None:
        self._pool = pool
        self._statement_timeout_ms = statement_timeout_ms

    async def _run(self, statements: list[sql.Composed]) -> None:
        try:
            async with self._pool.connection() as conn:
                async with conn.transaction():
                    if self._statement_timeout_ms:
                        await conn.execute(
                            sql.SQL("SET LOCAL statement_timeout = {}").format(
                                sql.Literal(self._statement_timeout_ms)
                            )
                        )
                    for statement in statements:
                        await conn.execute(statement)
        except psycopg.Error as e:
            raise BackingStoreError(f"Backing store rejected table privileges: {e}") from e

    async def _set(self, table: TableRef, role: str, access: AccessLevel) -> None:
        logger.debug("Setting %s on %s.%s for role %s", access.value, table.schema, table.name, role)
        await self._run(grant_statements(table, role, access))

    async def grant_user(self, table: TableRef, user: User, access: AccessLevel) -> None:
        await self._set(table, user.database_role, access)

    async def grant_organization(
        self, table: TableRef, organization: Organization, access: AccessLevel
    ) -> None:
        await self._set(table, organization.database_role, access)

    async def grant_group(self, table: TableRef, group: Group, access: AccessLevel) -> None:
        await self._set(table, group.database_role, access)

    async def remove_access(self, table: TableRef, user: User) -> None:
        await self._set(table, user.database_role, AccessLevel.NONE)

    async def remove_organization_access(
        self, table: TableRef, organization: Organization
    ) -> None:
        await self._set(table, organization.database_role, AccessLevel.NONE)
