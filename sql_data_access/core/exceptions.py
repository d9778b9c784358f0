"""
Exception types raised by the data-access helpers.

Driver failures are translated into a backend-specific exception that
keeps the command text, the command type label, a dump of the
parameters and the original driver error.  Every other failure is
surfaced as a plain ``DataAccessException``.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .parameters import SqlParameter


def format_parameters(parameters: Optional[Sequence[SqlParameter]]) -> Optional[str]:
    """Render parameters as ``name : value`` lines.

    Returns ``None`` (not an empty string) when there are no parameters.
    """
    if not parameters:
        return None
    lines = ["Parameters:", "Name : Value"]
    for parameter in parameters:
        lines.append(f"{parameter.name} : {parameter.value}")
    return "\n".join(lines) + "\n"


class DataAccessException(Exception):
    """Base class for every error raised by this package."""

    def __init__(
        self,
        message: str,
        command_text: Optional[str] = None,
        command_type: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.command_text = command_text
        self.command_type = command_type


class DataAccessConfigurationError(DataAccessException):
    """A required connection string is missing or not configured."""


class DataAccessStateError(DataAccessException):
    """An operation was invoked before the connection was opened."""


class _DriverDataAccessException(DataAccessException):
    message_template = "A Data Access Exception Occurred: {0}"

    def __init__(
        self,
        message: str,
        command_text: Optional[str] = None,
        command_type: Optional[str] = None,
        sql_parameters: Optional[Sequence[SqlParameter]] = None,
        driver_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(self.message_template.format(message), command_text, command_type)
        self.sql_parameters = format_parameters(sql_parameters)
        self.driver_error = driver_error


class SqlServerDataAccessException(_DriverDataAccessException):
    """A failure reported by the SQL Server driver (pyodbc or pymssql)."""

    message_template = "A SQL Server Data Access Exception Occurred: {0}"


class PostgreSqlDataAccessException(_DriverDataAccessException):
    """A failure reported by psycopg."""

    message_template = "A PostgreSQL Data Access Exception Occurred: {0}"
