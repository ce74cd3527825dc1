"""PostgreSQL async connection pool."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import psycopg
from psycopg import AsyncConnection, IsolationLevel
from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


async def _configure(conn: AsyncConnection) -> None:
    await conn.set_isolation_level(IsolationLevel.READ_COMMITTED)


def create_pool(
    conninfo: str,
    min_size: int = 2,
    max_size: int = 20,
    timeout: float = 2.0,
    max_idle: float = 30.0,
) -> AsyncConnectionPool:
    """Create async connection pool.

    Pool is created with open=False. Caller must call await pool.open()
    before use (e.g. via PoolLifespanMiddleware in ASGI lifespan).
    ``timeout`` bounds the wait for a free connection; every connection
    runs its transactions at READ COMMITTED.
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        max_idle=max_idle,
        configure=_configure,
        open=False,
    )


@asynccontextmanager
async def get_connection(pool: AsyncConnectionPool) -> AsyncIterator:
    """Get connection from pool (context manager)."""
    async with pool.connection() as conn:
        yield conn


async def ping(pool: AsyncConnectionPool) -> bool:
    """Round-trip a trivial query; False when the database is unreachable."""
    try:
        async with get_connection(pool) as conn:
            cur = await conn.execute("SELECT 1")
            row = await cur.fetchone()
    except psycopg.Error as e:
        logger.warning("Database ping failed: %s", e)
        return False
    return bool(row and row[0] == 1)
