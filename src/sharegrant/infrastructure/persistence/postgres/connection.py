"""PostgreSQL async connection pools."""

from psycopg_pool import AsyncConnectionPool


def create_pool(
    conninfo: str,
    min_size: int = 2,
    max_size: int = 10,
    application_name: str = "sharegrant",
) -> AsyncConnectionPool:
    """Create async connection pool.

    Pool is created with open=False. Caller must await pool.open() before
    use and pool.close() on shutdown.
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        kwargs={"application_name": application_name},
        open=False,
    )
