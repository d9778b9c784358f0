"""
PostgreSQL facades (psycopg 3).
"""

from __future__ import annotations

from ..infra.db.postgres import PostgreSqlDialect
from .base import DataAccessBase
from .managed import DataAccess


class PostgreSqlDataAccessBase(DataAccessBase):
    dialect_class = PostgreSqlDialect


class PostgreSqlDataAccess(DataAccess):
    dialect_class = PostgreSqlDialect
