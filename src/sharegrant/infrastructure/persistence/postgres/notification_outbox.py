"""PostgreSQL notification outbox - the mail worker polls this table."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from psycopg_pool import AsyncConnectionPool

from sharegrant.application.dto.notification_event import NotificationEvent

logger = logging.getLogger(__name__)


class PostgresOutboxNotificationSink:
    """Writes events to notification_outbox on its own connection.

    Events are independent of the permission transaction: they are only
    enqueued after the permission change has committed.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def enqueue(self, event: NotificationEvent) -> None:
        async with self._pool.connection() as conn:
            await conn.execute(
                "INSERT INTO notification_outbox "
                "(id, type, entity_id, recipient_id, entity_name, owner_name, created_at) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s)",
                (
                    uuid4(),
                    event.type.value,
                    event.entity_id,
                    event.recipient_id,
                    event.entity_name,
                    event.owner_name,
                    datetime.now(UTC),
                ),
            )
        logger.debug("Enqueued %s for %s", event.type.value, event.recipient_id)
