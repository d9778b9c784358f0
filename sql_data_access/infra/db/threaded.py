"""
Awaitable wrappers for blocking DB-API drivers.

Neither pyodbc nor pymssql offers an asyncio API, so the asynchronous
SQL Server operations run each driver call in a worker thread with
``asyncio.to_thread``.  The wrappers expose the same awaitable cursor
surface as psycopg's ``AsyncConnection`` so the async command code is
shared between backends.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable


class ThreadedCursor:
    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor

    @property
    def description(self):
        return self._cursor.description

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount

    async def execute(self, sql: str, args: Any = None) -> "ThreadedCursor":
        if args is None:
            await asyncio.to_thread(self._cursor.execute, sql)
        else:
            await asyncio.to_thread(self._cursor.execute, sql, args)
        return self

    async def nextset(self):
        return await asyncio.to_thread(self._cursor.nextset)

    async def fetchone(self):
        return await asyncio.to_thread(self._cursor.fetchone)

    async def fetchall(self):
        return await asyncio.to_thread(self._cursor.fetchall)

    async def close(self) -> None:
        await asyncio.to_thread(self._cursor.close)


class ThreadedConnection:
    def __init__(self, connection: Any) -> None:
        self._connection = connection

    @classmethod
    async def connect(cls, factory: Callable[..., Any], *args: Any, **kwargs: Any) -> "ThreadedConnection":
        connection = await asyncio.to_thread(factory, *args, **kwargs)
        return cls(connection)

    @property
    def raw(self) -> Any:
        return self._connection

    @property
    def closed(self) -> bool:
        return bool(getattr(self._connection, "closed", False))

    def cursor(self) -> ThreadedCursor:
        return ThreadedCursor(self._connection.cursor())

    async def close(self) -> None:
        await asyncio.to_thread(self._connection.close)
