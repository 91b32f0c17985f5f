"""
Pooled aiosqlite connections for the ledger database.

Every connection runs in WAL mode with foreign keys enforced, so readers
keep working while a stock write holds the lock. Writes that read stock
and then change it go through ``transaction(immediate=True)``.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)


def connection_pragmas(busy_timeout: int) -> tuple[str, ...]:
    """PRAGMAs every ledger connection is opened with."""
    return (
        "PRAGMA journal_mode=WAL",
        "PRAGMA synchronous=NORMAL",
        f"PRAGMA busy_timeout={busy_timeout}",
        "PRAGMA foreign_keys=ON",
    )


async def open_connection(db_path: Path, busy_timeout: int = 30000) -> aiosqlite.Connection:
    """Open one configured connection, creating the database directory if needed."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = await aiosqlite.connect(db_path)
    for pragma in connection_pragmas(busy_timeout):
        await conn.execute(pragma)
    conn.row_factory = aiosqlite.Row
    return conn


class ConnectionPool:
    """
    Fixed-size set of ledger connections.

    All connections are opened together on first use; ``acquire`` waits
    for an idle one when every connection is checked out.
    """

    def __init__(self, db_path: Path, size: int = 5, busy_timeout: int = 30000):
        self.db_path = db_path
        self.size = size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=size)
        self._all: list[aiosqlite.Connection] = []
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return bool(self._all)

    @property
    def idle_count(self) -> int:
        return self._idle.qsize()

    async def open(self) -> None:
        async with self._open_lock:
            if self.is_open:
                return
            for _ in range(self.size):
                conn = await open_connection(self.db_path, self.busy_timeout)
                self._all.append(conn)
                self._idle.put_nowait(conn)

        logger.info("connection_pool_opened", db_path=str(self.db_path), size=self.size)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Check out a connection for the duration of the block."""
        if not self.is_open:
            await self.open()

        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self, immediate: bool = False) -> AsyncIterator[aiosqlite.Connection]:
        """
        Check out a connection and commit when the block exits cleanly.

        Any exception rolls the transaction back. ``immediate=True`` issues
        BEGIN IMMEDIATE, taking the write lock before the first read.
        """
        async with self.acquire() as conn:
            if immediate:
                await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

    async def close(self) -> None:
        async with self._open_lock:
            while self._all:
                await self._all.pop().close()
            self._idle = asyncio.Queue(maxsize=self.size)
        logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool, built from storage settings on first call."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            storage.db_path,
            size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
        await _pool.open()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Read connection from the process-wide pool."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction(immediate: bool = False) -> AsyncIterator[aiosqlite.Connection]:
    """Write transaction on the process-wide pool."""
    pool = await get_pool()
    async with pool.transaction(immediate=immediate) as conn:
        yield conn
