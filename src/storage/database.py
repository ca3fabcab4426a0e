"""
PostgreSQL database connection management.

Uses asyncpg for async database operations. Every query borrows a
connection from the pool for its own duration and returns it on
both success and error paths.
"""

import logging
import ssl
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from src.config.settings import get_settings

logger = logging.getLogger(__name__)


class StoreUnavailable(Exception):
    """Raised when the database cannot be reached at startup."""


def _build_ssl_context(mode: str) -> ssl.SSLContext | None:
    """Build the TLS context for hosted databases with self-signed certs."""
    if mode != "require":
        return None
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


class Database:
    """
    Async PostgreSQL database connection manager.

    One pool per process, opened by the app lifespan or a CLI command.
    ``connect`` fails fast with StoreUnavailable so a missing database
    stops startup instead of surfacing on the first submission.

    Usage:
        db = Database()
        await db.connect()
        row = await db.fetchrow("SELECT ... RETURNING id", ...)
        await db.close()
    """

    def __init__(
        self,
        database_url: str | None = None,
        min_size: int | None = None,
        max_size: int | None = None,
        ssl_mode: str | None = None,
    ):
        """
        Initialize database connection manager.

        Args:
            database_url: PostgreSQL connection URL
            min_size: Minimum pool size
            max_size: Maximum pool size
            ssl_mode: "disable" or "require"
        """
        settings = get_settings()

        self._database_url = database_url or str(settings.database_url)
        self._min_size = min_size or settings.db_pool_min_size
        self._max_size = max_size or settings.db_pool_max_size
        self._ssl_mode = ssl_mode or settings.database_ssl
        self._command_timeout = settings.db_command_timeout

        self._pool: asyncpg.Pool | None = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        """
        Establish database connection pool.

        Creates the pool and borrows one connection to prove the
        server is reachable before any traffic is served.

        Raises:
            StoreUnavailable: If the pool cannot be created or the
                probe connection fails.
        """
        try:
            self._pool = await asyncpg.create_pool(
                self._database_url,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
                ssl=_build_ssl_context(self._ssl_mode),
            )

            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")

            logger.info(
                f"Database connected (pool: {self._min_size}-{self._max_size})"
            )

        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error(f"Failed to connect to database: {e}")
            if self._pool is not None:
                await self._pool.close()
                self._pool = None
            raise StoreUnavailable(f"Database unreachable: {e}") from e

    async def close(self) -> None:
        """Close database connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database connection closed")

    @property
    def pool(self) -> asyncpg.Pool:
        """The open pool; RuntimeError before ``connect`` or after ``close``."""
        if self._pool is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._pool

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow one pooled connection for the duration of the block."""
        async with self.pool.acquire() as conn:
            yield conn

    async def execute(self, query: str, *args: Any) -> str:
        """
        Run a statement that returns no rows (DDL, plain writes).

        Returns:
            PostgreSQL command tag, e.g. "CREATE TABLE"
        """
        async with self.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        """Run a query and return its first row, or None when it yields none."""
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args)

    async def health_check(self) -> bool:
        """True when a pooled connection answers ``SELECT 1``."""
        try:
            return await self.fetchval("SELECT 1") == 1
        except (RuntimeError, OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False
