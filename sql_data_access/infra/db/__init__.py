"""
Driver adapters for SQL Server and PostgreSQL.

Each dialect renders commands for its driver, opens connections and
names the driver's exception root.  Driver modules are imported on
first use, so only the drivers actually used need to be installed.
"""

from .dialect import Dialect  # noqa: F401
from .mssql import SqlServerDialect  # noqa: F401
from .postgres import PostgreSqlDialect  # noqa: F401
