"""
Thin data-access helpers over SQL Server and PostgreSQL drivers.

The package wraps a driver's connection, cursor and execution calls
behind two facade styles per backend:

* ``SqlServerDataAccess`` / ``PostgreSqlDataAccess`` keep one open
  connection and close any previously returned reader before the next
  command runs.
* ``SqlServerDataAccessBase`` / ``PostgreSqlDataAccessBase`` open
  connections on request and run each command against a connection the
  caller passes in.

Pooling, transactions and the wire protocol are left to the driver.
"""

from .config.connection import (  # noqa: F401
    ConnectionSettings,
    FromCredentials,
    FromLookup,
    FromStrings,
    SqlCredentials,
)
from .core.command import CommandType  # noqa: F401
from .core.exceptions import (  # noqa: F401
    DataAccessConfigurationError,
    DataAccessException,
    DataAccessStateError,
    PostgreSqlDataAccessException,
    SqlServerDataAccessException,
)
from .core.parameters import DB_NULL, ParameterDirection, SqlParameter  # noqa: F401
from .data_access.postgresql import PostgreSqlDataAccess, PostgreSqlDataAccessBase  # noqa: F401
from .data_access.sqlserver import SqlServerDataAccess, SqlServerDataAccessBase  # noqa: F401
