"""Application entry point and composition root."""

from dataclasses import dataclass

from psycopg_pool import AsyncConnectionPool

from sharegrant import __version__
from sharegrant.application.services.notification_emitter import NotificationEmitter
from sharegrant.application.services.shared_entity_synchronizer import (
    SharedEntitySynchronizer,
)
from sharegrant.application.use_cases.permission.create_permission import (
    CreatePermissionUseCase,
)
from sharegrant.application.use_cases.permission.delete_permission import (
    DeletePermissionUseCase,
)
from sharegrant.application.use_cases.permission.list_recipients import ListRecipientsUseCase
from sharegrant.application.use_cases.permission.resync_permission import (
    ResyncPermissionUseCase,
)
from sharegrant.application.use_cases.permission.set_access_control_list import (
    SetAccessControlListUseCase,
)
from sharegrant.config import Settings, get_settings
from sharegrant.infrastructure.backing_store.postgres_backing_store import PostgresBackingStore
from sharegrant.infrastructure.invalidation.pg_notify_invalidator import PgNotifyInvalidator
from sharegrant.infrastructure.permission.permission_checker import (
    ShareGrantPermissionChecker,
)
from sharegrant.infrastructure.persistence.postgres.connection import create_pool
from sharegrant.infrastructure.persistence.postgres.notification_outbox import (
    PostgresOutboxNotificationSink,
)
from sharegrant.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from sharegrant.logging_config import configure_logging


@dataclass
class ShareGrantServices:
    """Wired use cases plus the pools they run on."""

    pools: list[AsyncConnectionPool]
    permission_checker: ShareGrantPermissionChecker
    create_permission: CreatePermissionUseCase
    set_access_control_list: SetAccessControlListUseCase
    delete_permission: DeletePermissionUseCase
    resync_permission: ResyncPermissionUseCase
    list_recipients: ListRecipientsUseCase

    async def open(self) -> None:
        for pool in self.pools:
            await pool.open()

    async def close(self) -> None:
        for pool in self.pools:
            await pool.close()


def main() -> None:
    """CLI entry point."""
    print(f"ShareGrant v{__version__}")


def create_sharegrant_services(settings: Settings | None = None) -> ShareGrantServices:
    """Composition root - build use cases with all dependencies.

    Pools are created closed; call ``await services.open()`` before use.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.debug)

    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    pools = [pool]
    backing_pool = pool
    if settings.backing_store_url and settings.backing_store_url != settings.database_url:
        backing_pool = create_pool(
            settings.backing_store_url,
            min_size=1,
            max_size=settings.db_pool_max_size,
            application_name="sharegrant-grants",
        )
        pools.append(backing_pool)

    uow_factory = create_uow_factory(pool)
    backing_store = PostgresBackingStore(
        backing_pool,
        statement_timeout_ms=settings.backing_store_statement_timeout_ms,
    )
    synchronizer = SharedEntitySynchronizer(
        backing_store=backing_store,
        invalidator=PgNotifyInvalidator(pool, settings.invalidation_channel),
    )
    emitter = NotificationEmitter(
        PostgresOutboxNotificationSink(pool),
        enabled=settings.notifications_enabled,
    )

    return ShareGrantServices(
        pools=pools,
        permission_checker=ShareGrantPermissionChecker(uow_factory),
        create_permission=CreatePermissionUseCase(unit_of_work_factory=uow_factory),
        set_access_control_list=SetAccessControlListUseCase(
            unit_of_work_factory=uow_factory,
            synchronizer=synchronizer,
            emitter=emitter,
        ),
        delete_permission=DeletePermissionUseCase(
            unit_of_work_factory=uow_factory,
            synchronizer=synchronizer,
            emitter=emitter,
        ),
        resync_permission=ResyncPermissionUseCase(
            unit_of_work_factory=uow_factory,
            synchronizer=synchronizer,
        ),
        list_recipients=ListRecipientsUseCase(unit_of_work_factory=uow_factory),
    )
