"""
Forward-only readers over a driver cursor, and the guard that keeps at
most one of them open per managed connection.
"""

from __future__ import annotations

import inspect
from typing import Any, AsyncIterator, Iterator, List, Optional, Sequence, Union

from .exceptions import DataAccessStateError


def skip_to_result_set(cursor: Any) -> bool:
    """Advance past row-count results to the next set that has columns.

    Batches such as ``INSERT ...; SELECT SCOPE_IDENTITY()`` or procedures
    without ``SET NOCOUNT ON`` report row counts before their rows.
    Returns ``False`` when the cursor runs out of result sets.
    """
    while not cursor.description:
        nextset = getattr(cursor, "nextset", None)
        if nextset is None or not nextset():
            return False
    return True


async def skip_to_result_set_async(cursor: Any) -> bool:
    while not cursor.description:
        nextset = getattr(cursor, "nextset", None)
        if nextset is None:
            return False
        # psycopg's AsyncCursor.nextset is a plain method
        advanced = nextset()
        if inspect.isawaitable(advanced):
            advanced = await advanced
        if not advanced:
            return False
    return True


class _ReaderState:
    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._columns: List[str] = []
        self._row: Optional[Sequence[Any]] = None
        self._closed = False
        self._load_columns()

    def _load_columns(self) -> None:
        description = self._cursor.description or ()
        self._columns = [column[0] for column in description]

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    @property
    def field_count(self) -> int:
        return len(self._columns)

    @property
    def rows_affected(self) -> int:
        return self._cursor.rowcount

    def get_ordinal(self, name: str) -> int:
        try:
            return self._columns.index(name)
        except ValueError:
            lowered = [column.lower() for column in self._columns]
            try:
                return lowered.index(name.lower())
            except ValueError:
                raise KeyError(f"No column named {name!r} in the result set") from None

    def __getitem__(self, key: Union[int, str]) -> Any:
        if self._row is None:
            raise IndexError("No current row; call read() first")
        if isinstance(key, str):
            key = self.get_ordinal(key)
        return self._row[key]

    def as_dict(self) -> dict:
        """Return the current row keyed by column name."""
        if self._row is None:
            raise IndexError("No current row; call read() first")
        return dict(zip(self._columns, self._row))


class DataReader(_ReaderState):
    """Reader over a blocking DB-API cursor.

    Usage::

        reader = db.execute_reader(CommandType.TEXT, "SELECT id, name FROM users")
        while reader.read():
            print(reader["id"], reader["name"])
        reader.close()
    """

    def read(self) -> bool:
        if self._closed or not self._columns:
            self._row = None
            return False
        self._row = self._cursor.fetchone()
        return self._row is not None

    def fetchall(self) -> List[Sequence[Any]]:
        if self._closed or not self._columns:
            return []
        rows = list(self._cursor.fetchall() or [])
        self._row = None
        return rows

    def next_result(self) -> bool:
        """Move to the next row set, skipping row-count results."""
        self._row = None
        if self._closed:
            return False
        nextset = getattr(self._cursor, "nextset", None)
        advanced = bool(nextset is not None and nextset()) and skip_to_result_set(self._cursor)
        self._columns = []
        if advanced:
            self._load_columns()
        return advanced

    def __iter__(self) -> Iterator[Sequence[Any]]:
        while self.read():
            yield self._row

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._row = None
        self._cursor.close()

    def __enter__(self) -> "DataReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class AsyncDataReader(_ReaderState):
    """Reader over a cursor whose fetch and close calls are awaitable."""

    async def read(self) -> bool:
        if self._closed or not self._columns:
            self._row = None
            return False
        self._row = await self._cursor.fetchone()
        return self._row is not None

    async def fetchall(self) -> List[Sequence[Any]]:
        if self._closed or not self._columns:
            return []
        rows = list(await self._cursor.fetchall() or [])
        self._row = None
        return rows

    async def next_result(self) -> bool:
        self._row = None
        if self._closed:
            return False
        nextset = getattr(self._cursor, "nextset", None)
        if nextset is None:
            advanced = False
        else:
            advanced = nextset()
            if inspect.isawaitable(advanced):
                advanced = await advanced
            advanced = bool(advanced) and await skip_to_result_set_async(self._cursor)
        self._columns = []
        if advanced:
            self._load_columns()
        return advanced

    async def __aiter__(self) -> AsyncIterator[Sequence[Any]]:
        while await self.read():
            yield self._row

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._row = None
        await self._cursor.close()

    async def __aenter__(self) -> "AsyncDataReader":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class ReaderGuard:
    """Tracks the single open reader of a managed connection."""

    def __init__(self) -> None:
        self._reader: Optional[Union[DataReader, AsyncDataReader]] = None

    @property
    def current(self) -> Optional[Union[DataReader, AsyncDataReader]]:
        return self._reader

    def track(self, reader):
        self._reader = reader
        return reader

    def release(self) -> None:
        """Close and forget the tracked reader.  No-op if there is none."""
        reader = self._reader
        if reader is None:
            return
        if isinstance(reader, AsyncDataReader):
            raise DataAccessStateError("The open reader is asynchronous; use release_async()")
        if not reader.is_closed:
            reader.close()
        self._reader = None

    async def release_async(self) -> None:
        reader = self._reader
        if reader is None:
            return
        if not reader.is_closed:
            if isinstance(reader, AsyncDataReader):
                await reader.close()
            else:
                reader.close()
        self._reader = None
