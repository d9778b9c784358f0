"""
SQL Server facades.

The driver defaults to pyodbc; pass ``dialect=SqlServerDialect("pymssql")``
to use pymssql instead.
"""

from __future__ import annotations

from ..infra.db.mssql import SqlServerDialect
from .base import DataAccessBase
from .managed import DataAccess


class SqlServerDataAccessBase(DataAccessBase):
    dialect_class = SqlServerDialect


class SqlServerDataAccess(DataAccess):
    dialect_class = SqlServerDialect
