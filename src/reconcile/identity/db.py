from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

import psycopg
from psycopg import IsolationLevel

from .config import get_settings

T = TypeVar("T")


@asynccontextmanager
async def get_connection() -> AsyncIterator[psycopg.AsyncConnection[Any]]:
    settings = get_settings()
    conn = await psycopg.AsyncConnection.connect(settings.database_url)
    try:
        yield conn
    finally:
        await conn.close()


async def run_in_transaction(
    fn: Callable[[psycopg.AsyncConnection[Any]], Awaitable[T]],
    *,
    isolation_level: IsolationLevel = IsolationLevel.SERIALIZABLE,
    timeout_ms: int | None = None,
) -> T:
    """Run ``fn`` inside one transaction, committing only if it returns.

    The transaction is rolled back on any exception; serialization failures
    surface as ``psycopg.errors.SerializationFailure`` for the caller to retry.
    """

    async with get_connection() as conn:
        await conn.set_isolation_level(isolation_level)
        async with conn.transaction():
            if timeout_ms:
                # transaction-local; the idle bound covers the gaps between statements
                await conn.execute(
                    "SELECT set_config('statement_timeout', %s, true),"
                    " set_config('idle_in_transaction_session_timeout', %s, true)",
                    (str(timeout_ms), str(timeout_ms)),
                )
            return await fn(conn)


__all__ = ["get_connection", "run_in_transaction"]
