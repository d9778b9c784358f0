"""
Shared pytest fixtures.

The drivers are replaced with in-memory DB-API fakes: each connection
holds a queue of programmed outcomes (a ``FakeResult`` or an exception)
consumed one per ``execute`` call, and records every statement run.
"""

import types
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import pytest

from sql_data_access.infra.db.mssql import SqlServerDialect
from sql_data_access.infra.db.postgres import PostgreSqlDialect


class FakeDriverError(Exception):
    """Root of the fake driver's exceptions."""


@dataclass
class FakeResult:
    columns: Optional[Sequence[str]] = None
    rows: Sequence[Sequence[Any]] = ()
    rowcount: int = -1


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self.closed = False
        self.description = None
        self.rowcount = -1
        self._rows: List[Sequence[Any]] = []
        self._pending: List[FakeResult] = []

    def execute(self, sql, args=None):
        if self.connection.closed:
            raise FakeDriverError("connection is closed")
        self.connection.executed.append((sql, args))
        outcome = self.connection.outcomes.pop(0) if self.connection.outcomes else FakeResult(rowcount=0)
        if isinstance(outcome, BaseException):
            raise outcome
        # a list programs a batch with several results
        results = list(outcome) if isinstance(outcome, list) else [outcome]
        self._pending = results[1:]
        self._load(results[0])
        return self

    def _load(self, result):
        self.description = [(name, None, None, None, None, None, None) for name in result.columns] \
            if result.columns else None
        self.rowcount = result.rowcount
        self._rows = list(result.rows)

    def nextset(self):
        if not self._pending:
            return None
        self._load(self._pending.pop(0))
        return True

    def fetchone(self):
        if self.description is None:
            raise FakeDriverError("no results to fetch")
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        if self.description is None:
            raise FakeDriverError("no results to fetch")
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, args=(), kwargs=None):
        self.args = args
        self.kwargs = kwargs or {}
        self.closed = False
        self.close_calls = 0
        self.outcomes: List[Any] = []
        self.executed: List[Any] = []
        self.cursors: List[FakeCursor] = []

    def cursor(self):
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def close(self):
        self.close_calls += 1
        self.closed = True


class FakeAsyncCursor:
    def __init__(self, connection):
        self._cursor = FakeCursor(connection)

    @property
    def closed(self):
        return self._cursor.closed

    @property
    def description(self):
        return self._cursor.description

    @property
    def rowcount(self):
        return self._cursor.rowcount

    async def execute(self, sql, args=None):
        self._cursor.execute(sql, args)
        return self

    def nextset(self):
        return self._cursor.nextset()

    async def fetchone(self):
        return self._cursor.fetchone()

    async def fetchall(self):
        return self._cursor.fetchall()

    async def close(self):
        self._cursor.close()


class FakeAsyncConnection(FakeConnection):
    def cursor(self):
        cursor = FakeAsyncCursor(self)
        self.cursors.append(cursor)
        return cursor

    async def close(self):
        FakeConnection.close(self)


def make_driver(name: str, paramstyle: str) -> types.ModuleType:
    """Build a fake driver module recording the connections it opens."""
    module = types.ModuleType(name)
    module.paramstyle = paramstyle
    module.Error = FakeDriverError
    module.connections = []
    module.fail_connect = None

    def connect(*args, **kwargs):
        if module.fail_connect is not None:
            raise module.fail_connect
        connection = FakeConnection(args, kwargs)
        module.connections.append(connection)
        return connection

    class AsyncConnection:
        @staticmethod
        async def connect(*args, **kwargs):
            if module.fail_connect is not None:
                raise module.fail_connect
            connection = FakeAsyncConnection(args, kwargs)
            module.connections.append(connection)
            return connection

    module.connect = connect
    module.AsyncConnection = AsyncConnection
    return module


@pytest.fixture
def pyodbc_driver():
    return make_driver("pyodbc", "qmark")


@pytest.fixture
def pymssql_driver():
    return make_driver("pymssql", "pyformat")


@pytest.fixture
def psycopg_driver():
    return make_driver("psycopg", "pyformat")


@pytest.fixture
def sqlserver_dialect(pyodbc_driver):
    return SqlServerDialect(pyodbc_driver)


@pytest.fixture
def postgres_dialect(psycopg_driver):
    return PostgreSqlDialect(psycopg_driver)


@pytest.fixture
def fake_connection():
    return FakeConnection()
