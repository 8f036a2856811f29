"""
SQLite connections for the ledger database.

Reads use a small queue of query-only connections and never wait for a
writer: with WAL they see the last committed state. Writes share one
connection, taken under an asyncio lock and opened with BEGIN IMMEDIATE, so
write transactions queue inside the process and never half-apply.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from slotledger.config import get_logger, get_settings

logger = get_logger(__name__)


class ConnectionPool:
    """Reader connections plus a single writer connection for one database file."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = max(1, pool_size)
        self.busy_timeout = busy_timeout

        self._readers: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._writer: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()
        self._open_lock = asyncio.Lock()
        self._all: list[aiosqlite.Connection] = []

    @property
    def is_open(self) -> bool:
        return self._writer is not None

    async def open(self) -> None:
        async with self._open_lock:
            if self.is_open:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            # The writer connects first so WAL mode is set before readers attach
            self._writer = await self._connect(query_only=False)
            for _ in range(self.pool_size):
                await self._readers.put(await self._connect(query_only=True))

            logger.info(
                "ledger_db_opened",
                db_path=str(self.db_path),
                readers=self.pool_size,
            )

    async def _connect(self, query_only: bool) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        self._all.append(conn)
        conn.row_factory = aiosqlite.Row
        if not query_only:
            await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")
        if query_only:
            await conn.execute("PRAGMA query_only=ON")
        return conn

    @asynccontextmanager
    async def read(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a query-only connection."""
        await self.open()
        conn = await self._readers.get()
        try:
            yield conn
        finally:
            self._readers.put_nowait(conn)

    @asynccontextmanager
    async def write(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Run one write transaction on the writer connection.

        Commits when the block exits cleanly. Any exception, including task
        cancellation, rolls back everything written in the block.
        """
        await self.open()
        async with self._write_lock:
            conn = self._writer
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def close(self) -> None:
        async with self._open_lock:
            for conn in self._all:
                await conn.close()
            self._all.clear()
            self._readers = asyncio.Queue()
            self._writer = None
            logger.info("ledger_db_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or open the process-wide pool for the configured database."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
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
    """Query-only connection from the global pool."""
    pool = await get_pool()
    async with pool.read() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Write transaction on the global pool's writer connection."""
    pool = await get_pool()
    async with pool.write() as conn:
        yield conn
