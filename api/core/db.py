"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. FastAPI opens it on startup and closes
it on shutdown (see `api/main.py`). Nothing here holds a transaction open
across calls: each call is its own unit of work.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Callable, Iterator, Sequence, TypeVar

import asyncpg

from . import sql
from .config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Postgres wire protocol limit on bind parameters per statement.
MAX_BIND_PARAMS = 32767

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


class DatabaseError(RuntimeError):
    """
    Storage failure (connectivity, constraint violation, bad statement).

    The driver exception is kept as `__cause__`.
    """


class NoRowsError(LookupError):
    pass


class Row:
    """
    Result of `Database.query_row`: zero or one record.
    """

    def __init__(self, record: asyncpg.Record | None) -> None:
        self._record = record

    def scan(self, scanner: Callable[[Sequence[Any]], T]) -> T:
        if self._record is None:
            raise NoRowsError("Query returned no rows.")
        return scanner(self._record)


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    try:
        yield
    except _DRIVER_ERRORS as exc:
        raise DatabaseError(f"Database {action} failed.") from exc


def _rows_affected(status: str) -> int:
    # Command tags look like "INSERT 0 3" or "UPDATE 1".
    last = (status or "").rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else 0


class Database:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool: asyncpg.Pool | None = pool

    @classmethod
    async def open(cls, settings: Settings) -> Database:
        with _translate_errors("open"):
            pool = await asyncpg.create_pool(
                min_size=1,
                max_size=5,
                command_timeout=30,
                **settings.connect_kwargs(),
            )
        logger.info(
            "db_pool_opened host=%s port=%s database=%s",
            settings.db_host if not settings.database_url else "<dsn>",
            settings.db_port,
            settings.db_name,
        )
        return cls(pool)

    async def close(self) -> None:
        if self._pool is None:
            return None
        pool, self._pool = self._pool, None
        with _translate_errors("close"):
            await pool.close()
        logger.info("db_pool_closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database is closed.")
        return self._pool

    async def execute(self, sql_text: str, *args: Any, timeout: float | None = None) -> int:
        """
        Run a statement without a result set. Returns the affected row count.
        """
        with _translate_errors("execute"):
            status = await self.pool.execute(sql_text, *args, timeout=timeout)
        return _rows_affected(status)

    async def query_row(self, sql_text: str, *args: Any, timeout: float | None = None) -> Row:
        with _translate_errors("query"):
            record = await self.pool.fetchrow(sql_text, *args, timeout=timeout)
        return Row(record)

    @asynccontextmanager
    async def stream(
        self,
        sql_text: str,
        *args: Any,
        timeout: float | None = None,
    ) -> AsyncIterator[AsyncIterator[asyncpg.Record]]:
        """
        Iterate a query lazily through a server-side cursor.

            async with database.stream("SELECT ...") as rows:
                async for record in rows:
                    ...

        The connection goes back to the pool when the block exits, however
        it exits.
        """
        with _translate_errors("query"):
            async with self.pool.acquire(timeout=timeout) as conn:
                # asyncpg cursors only exist inside a transaction.
                async with conn.transaction():
                    yield conn.cursor(sql_text, *args, timeout=timeout)

    async def run_query(
        self,
        sql_text: str,
        consumer: Callable[[asyncpg.Record], None],
        *args: Any,
        timeout: float | None = None,
    ) -> None:
        """
        Call `consumer` once per row, in result order.

        An exception from `consumer` stops iteration and propagates.
        """
        async with self.stream(sql_text, *args, timeout=timeout) as rows:
            async for record in rows:
                consumer(record)

    async def bulk_insert(
        self,
        table: str,
        columns: Sequence[str],
        values: Sequence[Any],
        on_conflict: str = "",
        *,
        timeout: float | None = None,
    ) -> int:
        """
        Insert `len(values) // len(columns)` rows with a single statement.

        `values` is flat: row after row, each in `columns` order. An empty
        `values` sends nothing and returns 0.
        """
        width = len(columns)
        if width == 0:
            raise sql.StatementError("bulk_insert requires at least one column.")
        if len(values) % width != 0:
            raise sql.StatementError(
                f"bulk_insert got {len(values)} values, not a multiple of {width} columns."
            )
        if not values:
            return 0
        if len(values) > MAX_BIND_PARAMS:
            raise sql.StatementError(
                f"bulk_insert got {len(values)} values; at most {MAX_BIND_PARAMS} fit in one statement."
            )

        rows = [values[i : i + width] for i in range(0, len(values), width)]
        statement = sql.insert(table, columns, *rows, suffix=on_conflict)
        return await self.execute(statement.text, *statement.args, timeout=timeout)
