"""PostgreSQL store handle.

A ``Database`` owns one asyncpg connection pool. It is constructed once in
the app lifespan, stored on ``app.state.db`` and handed to routers and
repositories through ``get_database``; nothing in the package reaches for a
module-level pool.

Every driver failure leaving this module is translated into the typed
errors from ``fitlink.errors``:

    UniqueViolationError      -> Conflict
    CheckViolationError       -> Conflict
    ForeignKeyViolationError  -> NotFound
    NotNullViolationError     -> InvalidData
    DataError                 -> InvalidData
    anything else from the driver, OSError, timeouts -> StoreUnavailable
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import asyncpg

from fitlink.config import Settings, get_settings
from fitlink.errors import Conflict, InvalidData, NotFound, StoreUnavailable

logger = logging.getLogger("fitlink.db")


def rows_affected(status: str) -> int:
    """Parse the row count out of a command status tag like ``UPDATE 1``.

    Raises:
        StoreUnavailable: If the tag carries no row count.
    """
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError) as exc:
        logger.error("Unrecognized command status: %r", status)
        raise StoreUnavailable("Unrecognized database response") from exc


@asynccontextmanager
async def _translate_errors() -> AsyncGenerator[None, None]:
    try:
        yield
    except asyncpg.UniqueViolationError as exc:
        raise Conflict(exc.detail or "Record already exists") from exc
    except asyncpg.CheckViolationError as exc:
        raise Conflict(f"Constraint violated: {exc.constraint_name}") from exc
    except asyncpg.ForeignKeyViolationError as exc:
        raise NotFound(exc.detail or "Referenced record not found") from exc
    except asyncpg.NotNullViolationError as exc:
        raise InvalidData(f"Missing required value: {exc.column_name}") from exc
    except asyncpg.DataError as exc:
        raise InvalidData(str(exc)) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
        logger.error("Database statement failed: %s", exc)
        raise StoreUnavailable("Database error") from exc
    except (OSError, asyncio.TimeoutError) as exc:
        logger.error("Database unreachable: %s", exc)
        raise StoreUnavailable("Database unavailable") from exc


class Database:
    """Connection-pool wrapper with an explicit connect/close lifecycle."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._pool: asyncpg.Pool | None = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        """Create the pool. Call once at app startup."""
        if self._pool is not None:
            return
        s = self._settings
        async with _translate_errors():
            self._pool = await asyncpg.create_pool(
                s.database_url,
                min_size=s.db_pool_min_size,
                max_size=s.db_pool_max_size,
                command_timeout=s.db_command_timeout,
            )
        logger.info(
            "Database pool initialized (min=%d, max=%d)",
            s.db_pool_min_size,
            s.db_pool_max_size,
        )

    async def close(self) -> None:
        """Drain the pool. Call at app shutdown."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    def _require_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StoreUnavailable("Database pool not initialized")
        return self._pool

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[asyncpg.Connection, None]:
        """Borrow a connection from the pool for several statements."""
        pool = self._require_pool()
        async with _translate_errors():
            async with pool.acquire() as conn:
                yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[asyncpg.Connection, None]:
        """Borrow a connection and open a transaction on it.

        The transaction commits when the block exits normally and rolls back
        on any exception, including ``NotFound`` raised by the caller.
        """
        pool = self._require_pool()
        async with _translate_errors():
            async with pool.acquire() as conn:
                async with conn.transaction():
                    yield conn

    async def execute(self, query: str, *args: Any) -> str:
        """Execute a single statement and return its status tag."""
        async with self.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        async with self.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args)

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by the health check."""
        try:
            return await self.fetchval("SELECT 1") == 1
        except StoreUnavailable as exc:
            logger.warning("Database probe failed: %s", exc)
            return False
