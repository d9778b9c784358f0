"""
Command objects.

``create_command`` is the parameter marshaller: it binds the command
text, the command type and the parameters (in caller order) to a
connection.  The command owns the driver cursor it executes on and
closes it when the command is closed, unless the cursor was handed to a
reader.
"""

from __future__ import annotations

import enum
from dataclasses import replace
from typing import Any, List, Optional

from .parameters import DB_NULL, SqlParameter, is_output_like
from .reader import AsyncDataReader, DataReader, skip_to_result_set, skip_to_result_set_async


class CommandType(enum.Enum):
    TEXT = "Text"
    STORED_PROCEDURE = "StoredProcedure"
    TABLE_DIRECT = "TableDirect"

    @property
    def label(self) -> str:
        return self.value


def bind_parameter(parameter: SqlParameter) -> SqlParameter:
    """Return the parameter as it should be bound.

    Output-like parameters without a value get ``DB_NULL``; the
    caller's object is left untouched.
    """
    if is_output_like(parameter.direction) and parameter.value is None:
        return replace(parameter, value=DB_NULL)
    return parameter


class _BaseCommand:
    def __init__(self, connection: Any, dialect: Any, command_type: CommandType, command_text: str) -> None:
        self.connection = connection
        self.dialect = dialect
        self.command_type = command_type
        self.command_text = command_text
        self.parameters: List[SqlParameter] = []
        self._cursor: Optional[Any] = None

    def add_parameter(self, parameter: SqlParameter) -> SqlParameter:
        bound = bind_parameter(parameter)
        self.parameters.append(bound)
        return bound

    def render(self):
        return self.dialect.render(self.command_type, self.command_text, self.parameters)

    @property
    def is_closed(self) -> bool:
        return self.connection is None


class SqlCommand(_BaseCommand):
    """A command executed on a blocking DB-API connection."""

    def _execute(self) -> Any:
        if self.connection is None:
            raise RuntimeError("Command has already been closed")
        sql, args = self.render()
        self._cursor = self.connection.cursor()
        if args:
            self._cursor.execute(sql, args)
        else:
            self._cursor.execute(sql)
        return self._cursor

    def execute_reader(self) -> DataReader:
        cursor = self._execute()
        skip_to_result_set(cursor)
        # the reader owns the cursor from here on
        self._cursor = None
        return DataReader(cursor)

    def execute_non_query(self) -> int:
        return self._execute().rowcount

    def execute_scalar(self) -> Any:
        cursor = self._execute()
        if not skip_to_result_set(cursor):
            return None
        row = cursor.fetchone()
        return row[0] if row else None

    def close(self) -> None:
        cursor, self._cursor = self._cursor, None
        self.connection = None
        if cursor is not None:
            cursor.close()

    def __enter__(self) -> "SqlCommand":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class AsyncSqlCommand(_BaseCommand):
    """A command executed on a connection with an awaitable cursor API."""

    async def _execute(self) -> Any:
        if self.connection is None:
            raise RuntimeError("Command has already been closed")
        sql, args = self.render()
        self._cursor = self.connection.cursor()
        if args:
            await self._cursor.execute(sql, args)
        else:
            await self._cursor.execute(sql)
        return self._cursor

    async def execute_reader(self) -> AsyncDataReader:
        cursor = await self._execute()
        await skip_to_result_set_async(cursor)
        self._cursor = None
        return AsyncDataReader(cursor)

    async def execute_non_query(self) -> int:
        cursor = await self._execute()
        return cursor.rowcount

    async def execute_scalar(self) -> Any:
        cursor = await self._execute()
        if not await skip_to_result_set_async(cursor):
            return None
        row = await cursor.fetchone()
        return row[0] if row else None

    async def close(self) -> None:
        cursor, self._cursor = self._cursor, None
        self.connection = None
        if cursor is not None:
            await cursor.close()

    async def __aenter__(self) -> "AsyncSqlCommand":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def create_command(
    connection: Any,
    dialect: Any,
    command_type: CommandType,
    command_text: str,
    *parameters: SqlParameter,
) -> SqlCommand:
    """Build a ``SqlCommand`` bound to ``connection``.

    Parameters are attached in the order given.  Names and types are not
    validated; the driver reports any problem when the command runs.
    """
    command = SqlCommand(connection, dialect, command_type, command_text)
    for parameter in parameters:
        command.add_parameter(parameter)
    return command


def create_async_command(
    connection: Any,
    dialect: Any,
    command_type: CommandType,
    command_text: str,
    *parameters: SqlParameter,
) -> AsyncSqlCommand:
    """Async counterpart of :func:`create_command`."""
    command = AsyncSqlCommand(connection, dialect, command_type, command_text)
    for parameter in parameters:
        command.add_parameter(parameter)
    return command
