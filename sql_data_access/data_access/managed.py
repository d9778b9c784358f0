"""
Facade that owns its connection.

``DataAccess`` holds a single connection opened with one of the
``open_*`` methods.  Readers it returns stay open until the next command
on the same instance, which closes them first, or until the instance is
disposed.  Use it as a context manager::

    with SqlServerDataAccess(connection_string) as db:
        reader = db.execute_reader(CommandType.TEXT, "SELECT id FROM users")
        ids = [row[0] for row in reader]

    async with PostgreSqlDataAccess(connection_string) as db:
        total = await db.execute_scalar_async(CommandType.TEXT, "SELECT COUNT(*) FROM users")

Instances are not safe for concurrent use; calls are expected one at a
time.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..core.command import CommandType
from ..core.exceptions import DataAccessStateError
from ..core.parameters import SqlParameter
from ..core.reader import AsyncDataReader, DataReader, ReaderGuard
from .base import ConnectionSourceMixin


class DataAccess(ConnectionSourceMixin):
    def __init__(self, source, dialect: Any = None) -> None:
        super().__init__(source, dialect)
        self._connection: Optional[Any] = None
        self._is_async = False
        self._reader_guard = ReaderGuard()

    @property
    def connection(self) -> Optional[Any]:
        return self._connection

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    @property
    def current_reader(self):
        return self._reader_guard.current

    def _require_connection(self, asynchronous: bool) -> Any:
        if self._connection is None:
            raise DataAccessStateError(
                "Connection is not initialized. Use open_connection() or open_connection_async() "
                "(or the read-only variants) to initialize the connection first."
            )
        if self._is_async != asynchronous:
            if self._is_async:
                raise DataAccessStateError(
                    "The connection was opened with open_connection_async(); use the *_async methods."
                )
            raise DataAccessStateError(
                "The connection was opened with open_connection(); use the synchronous methods."
            )
        return self._connection

    def _close(self, connection: Any) -> None:
        if getattr(connection, "closed", False):
            return
        try:
            connection.close()
        except Exception as err:
            translated = self.executor.translate_connection_error(err)
            if translated is err:
                raise
            raise translated from err

    async def _close_async(self, connection: Any) -> None:
        if getattr(connection, "closed", False):
            return
        try:
            await connection.close()
        except Exception as err:
            translated = self.executor.translate_connection_error(err)
            if translated is err:
                raise
            raise translated from err

    # Synchronous lifecycle

    def open_connection(self) -> "DataAccess":
        """Open the read-write connection, replacing any open one."""
        connection_string = self.settings.require_connection_string()
        self.dispose()
        self._connection = self._connect(connection_string)
        self._is_async = False
        return self

    def open_readonly_connection(self) -> "DataAccess":
        connection_string = self.settings.require_read_only_connection_string()
        self.dispose()
        self._connection = self._connect(connection_string)
        self._is_async = False
        return self

    open = open_connection

    def dispose(self) -> None:
        """Close the tracked reader and the connection.  Safe to repeat."""
        if self._connection is not None and self._is_async:
            raise DataAccessStateError("The connection was opened asynchronously; use dispose_async().")
        self._reader_guard.release()
        connection, self._connection = self._connection, None
        if connection is not None:
            logging.info(f"{self.executor.tag} closing connection")
            self._close(connection)

    close = dispose

    def __enter__(self) -> "DataAccess":
        if self._connection is None:
            self.open_connection()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # Asynchronous lifecycle

    async def open_connection_async(self) -> "DataAccess":
        connection_string = self.settings.require_connection_string()
        await self.dispose_async()
        self._connection = await self._connect_async(connection_string)
        self._is_async = True
        return self

    async def open_readonly_connection_async(self) -> "DataAccess":
        connection_string = self.settings.require_read_only_connection_string()
        await self.dispose_async()
        self._connection = await self._connect_async(connection_string)
        self._is_async = True
        return self

    open_async = open_connection_async

    async def dispose_async(self) -> None:
        await self._reader_guard.release_async()
        connection, self._connection = self._connection, None
        if connection is None:
            return
        logging.info(f"{self.executor.tag} closing connection")
        if self._is_async:
            await self._close_async(connection)
        else:
            self._close(connection)

    close_async = dispose_async

    async def __aenter__(self) -> "DataAccess":
        if self._connection is None:
            await self.open_connection_async()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose_async()

    # Synchronous operations

    def execute_reader(self, command_type: CommandType, command_text: str, *parameters: SqlParameter) -> DataReader:
        connection = self._require_connection(asynchronous=False)
        self._reader_guard.release()
        reader = self.executor.execute_reader(connection, command_type, command_text, *parameters)
        return self._reader_guard.track(reader)

    def execute_non_query(self, command_type: CommandType, command_text: str, *parameters: SqlParameter) -> int:
        connection = self._require_connection(asynchronous=False)
        self._reader_guard.release()
        return self.executor.execute_non_query(connection, command_type, command_text, *parameters)

    def execute_scalar(
        self,
        command_type: CommandType,
        command_text: str,
        *parameters: SqlParameter,
        result_type: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        connection = self._require_connection(asynchronous=False)
        self._reader_guard.release()
        return self.executor.execute_scalar(
            connection, command_type, command_text, *parameters, result_type=result_type
        )

    # Asynchronous operations

    async def execute_reader_async(
        self, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> AsyncDataReader:
        connection = self._require_connection(asynchronous=True)
        await self._reader_guard.release_async()
        reader = await self.executor.execute_reader_async(connection, command_type, command_text, *parameters)
        return self._reader_guard.track(reader)

    async def execute_non_query_async(
        self, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> int:
        connection = self._require_connection(asynchronous=True)
        await self._reader_guard.release_async()
        return await self.executor.execute_non_query_async(connection, command_type, command_text, *parameters)

    async def execute_scalar_async(
        self,
        command_type: CommandType,
        command_text: str,
        *parameters: SqlParameter,
        result_type: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        connection = self._require_connection(asynchronous=True)
        await self._reader_guard.release_async()
        return await self.executor.execute_scalar_async(
            connection, command_type, command_text, *parameters, result_type=result_type
        )
