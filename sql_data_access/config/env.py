"""
Environment configuration loader.

Values are read from the process environment after loading a ``.env``
file with python-dotenv.  Nothing here is required: a backend whose
connection string is unset is simply unavailable to the connection
factory and the ``sql-data-access-test-db`` command.

Supported variables:

* ``SQLSERVER_CONNECTION_STRING`` – read-write SQL Server connection.
* ``SQLSERVER_READONLY_CONNECTION_STRING`` – read-only SQL Server connection.
* ``POSTGRES_CONNECTION_STRING`` – read-write PostgreSQL connection.
* ``POSTGRES_READONLY_CONNECTION_STRING`` – read-only PostgreSQL connection.
* ``MSSQL_DRIVER`` – ``pyodbc`` (default) or ``pymssql``.
* ``MSSQL_ODBC_DRIVER`` – ODBC driver name used with pyodbc.
* ``LOG_LEVEL`` – level for the command line tools (default ``INFO``).

``env_lookup`` is the default key lookup for ``FromLookup`` connection
sources.  Hierarchical keys use ``:`` as separator and map to ``__`` in
variable names, so ``ConnectionStrings:Main`` is read from
``ConnectionStrings__Main`` (or its upper-case form).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass
class Config:
    """Holds environment configuration for the package."""

    SQLSERVER_CONNECTION_STRING: Optional[str] = None
    SQLSERVER_READONLY_CONNECTION_STRING: Optional[str] = None
    POSTGRES_CONNECTION_STRING: Optional[str] = None
    POSTGRES_READONLY_CONNECTION_STRING: Optional[str] = None
    MSSQL_DRIVER: str = "pyodbc"
    MSSQL_ODBC_DRIVER: str = "ODBC Driver 18 for SQL Server"
    LOG_LEVEL: str = "INFO"


def _optional(name: str) -> Optional[str]:
    value = os.environ.get(name)
    return value or None


def load_config() -> Config:
    """Load configuration from ``.env`` and environment variables.

    Raises:
        ValueError: If ``MSSQL_DRIVER`` names an unsupported driver.
    """
    load_dotenv()
    mssql_driver = os.environ.get("MSSQL_DRIVER", "pyodbc").strip().lower() or "pyodbc"
    if mssql_driver not in ("pyodbc", "pymssql"):
        raise ValueError(f"Environment variable MSSQL_DRIVER must be pyodbc or pymssql, got {mssql_driver!r}")
    return Config(
        SQLSERVER_CONNECTION_STRING=_optional("SQLSERVER_CONNECTION_STRING"),
        SQLSERVER_READONLY_CONNECTION_STRING=_optional("SQLSERVER_READONLY_CONNECTION_STRING"),
        POSTGRES_CONNECTION_STRING=_optional("POSTGRES_CONNECTION_STRING"),
        POSTGRES_READONLY_CONNECTION_STRING=_optional("POSTGRES_READONLY_CONNECTION_STRING"),
        MSSQL_DRIVER=mssql_driver,
        MSSQL_ODBC_DRIVER=os.environ.get("MSSQL_ODBC_DRIVER", "ODBC Driver 18 for SQL Server"),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )


def env_lookup(key: str) -> Optional[str]:
    """Look up a configuration key path in the environment.

    Returns ``None`` when the key is not set or is empty.
    """
    load_dotenv()
    name = key.replace(":", "__")
    for candidate in (key, name, name.upper()):
        value = os.environ.get(candidate)
        if value:
            return value
    return None
