"""
Per-call command execution.

``SqlExecutor`` runs reader, non-query and scalar commands against a
connection supplied by the caller.  Each call creates its command,
executes it and closes it before returning; failures are translated
into the backend's exception type.  Both facade styles compose one
executor per backend.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from .command import CommandType, bind_parameter, create_async_command, create_command
from .exceptions import DataAccessException
from .parameters import SqlParameter
from .reader import AsyncDataReader, DataReader


class SqlExecutor:
    def __init__(self, dialect: Any) -> None:
        self.dialect = dialect

    @property
    def tag(self) -> str:
        return f"[{self.dialect.tag}]"

    def translate(
        self,
        error: Exception,
        command_type: CommandType,
        command_text: str,
        parameters: Sequence[SqlParameter],
    ) -> DataAccessException:
        """Map ``error`` to the exception raised to the caller."""
        if isinstance(error, self.dialect.driver_errors):
            logging.error(
                f"{self.tag} command failed",
                extra={"command_type": command_type.label, "command_text": command_text},
            )
            return self.dialect.exception_class(
                self.dialect.error_message(error),
                command_text,
                command_type.label,
                [bind_parameter(p) for p in parameters],
                error,
            )
        return DataAccessException(str(error))

    def _trace(self, operation: str, command_type: CommandType, command_text: str, parameters) -> None:
        logging.debug(
            f"{self.tag} {operation}",
            extra={
                "command_type": command_type.label,
                "command_text": command_text,
                "parameter_count": len(parameters),
            },
        )

    # Synchronous operations

    def execute_reader(
        self, connection: Any, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> DataReader:
        self._trace("execute_reader", command_type, command_text, parameters)
        try:
            with create_command(connection, self.dialect, command_type, command_text, *parameters) as command:
                return command.execute_reader()
        except DataAccessException:
            raise
        except Exception as err:
            raise self.translate(err, command_type, command_text, parameters) from err

    def execute_non_query(
        self, connection: Any, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> int:
        self._trace("execute_non_query", command_type, command_text, parameters)
        try:
            with create_command(connection, self.dialect, command_type, command_text, *parameters) as command:
                return command.execute_non_query()
        except DataAccessException:
            raise
        except Exception as err:
            raise self.translate(err, command_type, command_text, parameters) from err

    def execute_scalar(
        self,
        connection: Any,
        command_type: CommandType,
        command_text: str,
        *parameters: SqlParameter,
        result_type: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """Return the first column of the first row, or ``None``.

        When ``result_type`` is given a non-null value is converted with
        it; a failed conversion is raised as ``DataAccessException``.
        """
        self._trace("execute_scalar", command_type, command_text, parameters)
        try:
            with create_command(connection, self.dialect, command_type, command_text, *parameters) as command:
                value = command.execute_scalar()
            if value is None or result_type is None:
                return value
            return result_type(value)
        except DataAccessException:
            raise
        except Exception as err:
            raise self.translate(err, command_type, command_text, parameters) from err

    # Asynchronous operations

    async def execute_reader_async(
        self, connection: Any, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> AsyncDataReader:
        self._trace("execute_reader_async", command_type, command_text, parameters)
        try:
            async with create_async_command(
                connection, self.dialect, command_type, command_text, *parameters
            ) as command:
                return await command.execute_reader()
        except DataAccessException:
            raise
        except Exception as err:
            raise self.translate(err, command_type, command_text, parameters) from err

    async def execute_non_query_async(
        self, connection: Any, command_type: CommandType, command_text: str, *parameters: SqlParameter
    ) -> int:
        self._trace("execute_non_query_async", command_type, command_text, parameters)
        try:
            async with create_async_command(
                connection, self.dialect, command_type, command_text, *parameters
            ) as command:
                return await command.execute_non_query()
        except DataAccessException:
            raise
        except Exception as err:
            raise self.translate(err, command_type, command_text, parameters) from err

    async def execute_scalar_async(
        self,
        connection: Any,
        command_type: CommandType,
        command_text: str,
        *parameters: SqlParameter,
        result_type: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        self._trace("execute_scalar_async", command_type, command_text, parameters)
        try:
            async with create_async_command(
                connection, self.dialect, command_type, command_text, *parameters
            ) as command:
                value = await command.execute_scalar()
            if value is None or result_type is None:
                return value
            return result_type(value)
        except DataAccessException:
            raise
        except Exception as err:
            raise self.translate(err, command_type, command_text, parameters) from err

    # Connections

    def translate_connection_error(self, error: Exception) -> DataAccessException:
        """Map a failure while opening or closing a connection."""
        if isinstance(error, DataAccessException):
            return error
        if not isinstance(error, ImportError) and isinstance(error, self.dialect.driver_errors):
            logging.error(f"{self.tag} connection failed")
            return self.dialect.exception_class(self.dialect.error_message(error), driver_error=error)
        return DataAccessException(str(error))
