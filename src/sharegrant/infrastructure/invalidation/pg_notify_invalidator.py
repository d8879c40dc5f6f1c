"""Cache invalidation through PostgreSQL NOTIFY."""

import json

from psycopg_pool import AsyncConnectionPool

from sharegrant.domain.entities import Visualization


class PgNotifyInvalidator:
    """Publishes visualization ids on a channel; tile and map caches listen on it."""

    def __init__(self, pool: AsyncConnectionPool, channel: str) -> None:
        self._pool = pool
        self._channel = channel

    async def invalidate(self, visualization: Visualization) -> None:
        payload = {
            "visualization_id": str(visualization.id),
            "table_id": str(visualization.table.id) if visualization.table else None,
            "reason": "permissions",
        }
        async with self._pool.connection() as conn:
            await conn.execute(
                "SELECT pg_notify(%s, %s)",
                (self._channel, json.dumps(payload)),
            )
