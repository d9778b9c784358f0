"""
Facade over externally held connections.

``DataAccessBase`` opens connections on request and runs each command
against the connection passed to it.  It keeps no state between calls:
readers are returned open and belong to the caller.  Subclass it to
build repositories::

    class UserRepository(SqlServerDataAccessBase):
        def count(self) -> int:
            connection = self.open_readonly_connection()
            try:
                return self.execute_scalar(
                    connection, CommandType.TEXT, "SELECT COUNT(*) FROM users", result_type=int)
            finally:
                connection.close()
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..config.connection import (
    ConnectionSettings,
    ConnectionSource,
    FromCredentials,
    FromLookup,
    FromStrings,
    Lookup,
    SqlCredentials,
    resolve_connection_settings,
)
from ..core.command import CommandType
from ..core.executor import SqlExecutor
from ..core.parameters import SqlParameter
from ..core.reader import AsyncDataReader, DataReader


class ConnectionSourceMixin:
    """Construction from the supported connection sources."""

    dialect_class: Optional[Callable[[], Any]] = None

    def __init__(self, source: ConnectionSource, dialect: Any = None) -> None:
        self.settings: ConnectionSettings = resolve_connection_settings(source)
        if dialect is None:
            if self.dialect_class is None:
                raise TypeError(f"{type(self).__name__} does not define a dialect")
            dialect = self.dialect_class()
        self.dialect = dialect
        self.executor = SqlExecutor(dialect)

    @classmethod
    def from_lookup(cls, key: str, lookup: Optional[Lookup] = None, **kwargs: Any):
        """Build from a configuration key path (``env_lookup`` by default)."""
        return cls(FromLookup(key, lookup), **kwargs)

    @classmethod
    def from_credentials(cls, credentials: SqlCredentials, **kwargs: Any):
        return cls(FromCredentials(credentials), **kwargs)

    @classmethod
    def from_strings(cls, connection_string: str, read_only_connection_string: Optional[str] = None, **kwargs: Any):
        return cls(FromStrings(connection_string, read_only_connection_string), **kwargs)

    @property
    def connection_string(self) -> Optional[str]:
        return self.settings.connection_string

    @property
    def read_only_connection_string(self) -> Optional[str]:
        return self.settings.read_only_connection_string

    def _connect(self, connection_string: str) -> Any:
        try:
            return self.dialect.connect(connection_string)
        except Exception as err:
            translated = self.executor.translate_connection_error(err)
            if translated is err:
                raise
            raise translated from err

    async def _connect_async(self, connection_string: str) -> Any:
        try:
            return await self.dialect.connect_async(connection_string)
        except Exception as err:
            translated = self.executor.translate_connection_error(err)
            if translated is err:
                raise
            raise translated from err


class DataAccessBase(ConnectionSourceMixin):
    # Connections

    def open_connection(self, connection_string: Optional[str] = None) -> Any:
        """Open a driver connection (read-write unless a string is given)."""
        return self._connect(connection_string or self.settings.require_connection_string())

    def open_readonly_connection(self) -> Any:
        return self._connect(self.settings.require_read_only_connection_string())

    async def open_connection_async(self, connection_string: Optional[str] = None) -> Any:
        return await self._connect_async(connection_string or self.settings.require_connection_string())

    async def open_readonly_connection_async(self) -> Any:
        return await self._connect_async(self.settings.require_read_only_connection_string())

    # Synchronous operations

    def execute_reader(
        self, connection: Any, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> DataReader:
        return self.executor.execute_reader(connection, command_type, command_text, *parameters)

    def execute_non_query(
        self, connection: Any, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> int:
        return self.executor.execute_non_query(connection, command_type, command_text, *parameters)

    def execute_scalar(
        self,
        connection: Any,
        command_type: CommandType,
        command_text: str,
        *parameters: SqlParameter,
        result_type: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        return self.executor.execute_scalar(
            connection, command_type, command_text, *parameters, result_type=result_type
        )

    # Asynchronous operations

    async def execute_reader_async(
        self, connection: Any, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> AsyncDataReader:
        return await self.executor.execute_reader_async(connection, command_type, command_text, *parameters)

    async def execute_non_query_async(
        self, connection: Any, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> int:
        return await self.executor.execute_non_query_async(connection, command_type, command_text, *parameters)

    async def execute_scalar_async(
        self,
        connection: Any,
        command_type: CommandType,
        command_text: str,
        *parameters: SqlParameter,
        result_type: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        return await self.executor.execute_scalar_async(
            connection, command_type, command_text, *parameters, result_type=result_type
        )
