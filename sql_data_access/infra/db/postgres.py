"""
PostgreSQL driver adapter built on psycopg 3.

psycopg provides both a blocking ``Connection`` and an asyncio
``AsyncConnection``, so the asynchronous operations here need no
thread offloading.  Connection strings may be libpq conninfo strings,
``postgresql://`` URLs or Npgsql-style pairs such as::

    Host=localhost;Port=5432;Database=app;Username=app;Password=secret

which are converted to psycopg keyword arguments.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence, Tuple

from ...core.exceptions import PostgreSqlDataAccessException
from ...core.parameters import SqlParameter
from .dialect import Dialect


# Npgsql keyword -> libpq keyword
_NPGSQL_KEYWORDS: Dict[str, str] = {
    'host': 'host',
    'server': 'host',
    'port': 'port',
    'database': 'dbname',
    'db': 'dbname',
    'username': 'user',
    'user name': 'user',
    'user id': 'user',
    'userid': 'user',
    'user': 'user',
    'password': 'password',
    'pwd': 'password',
    'ssl mode': 'sslmode',
    'sslmode': 'sslmode',
    'timeout': 'connect_timeout',
    'application name': 'application_name',
    'applicationname': 'application_name',
    'target session attributes': 'target_session_attrs',
}


def is_npgsql_connection_string(connection_string: str) -> bool:
    s = connection_string.strip()
    return "://" not in s and ";" in s


def parse_connection_string(connection_string: str) -> Tuple[str, Dict[str, Any]]:
    """Return the ``(conninfo, kwargs)`` pair to pass to ``psycopg.connect``.

    libpq strings and URLs are returned unchanged as ``conninfo``.
    Npgsql-style strings become keyword arguments; Npgsql-only settings
    (pooling and the like) have no libpq equivalent and are dropped.
    """
    s = (connection_string or "").strip()
    if not s:
        raise ValueError("Empty connection string")
    if not is_npgsql_connection_string(s):
        return s, {}
    kwargs: Dict[str, Any] = {}
    for part in s.split(";"):
        if '=' not in part:
            continue
        key, value = part.split('=', 1)
        key = key.strip().lower()
        mapped = _NPGSQL_KEYWORDS.get(key)
        if mapped is None:
            logging.debug("[postgres] ignoring connection setting", extra={"setting": key})
            continue
        value = value.strip()
        if mapped == 'sslmode':
            value = value.lower()
        kwargs[mapped] = value
    if 'host' not in kwargs:
        raise ValueError('No Host= found in connection string')
    return "", kwargs


class PostgreSqlDialect(Dialect):
    name = "PostgreSQL"
    tag = "postgres"
    default_driver = "psycopg"
    exception_class = PostgreSqlDataAccessException

    def render_procedure(self, command_text: str, parameters: Sequence[SqlParameter]) -> Tuple[str, Any]:
        arguments = self.procedure_arguments(parameters)
        named = ", ".join(f"{p.bare_name} => {self.placeholder(p.bare_name)}" for p in arguments)
        return f"CALL {command_text}({named})", self.collect_arguments(arguments)

    def render_table_direct(self, command_text: str, parameters: Sequence[SqlParameter]) -> Tuple[str, Any]:
        return f"SELECT * FROM {command_text}", None

    def connect(self, connection_string: str) -> Any:
        conninfo, kwargs = parse_connection_string(connection_string)
        logging.info(f"[{self.tag}] opening connection", extra={"host": kwargs.get('host')})
        return self.module.connect(conninfo, autocommit=True, **kwargs)

    async def connect_async(self, connection_string: str) -> Any:
        conninfo, kwargs = parse_connection_string(connection_string)
        logging.info(f"[{self.tag}] opening connection", extra={"host": kwargs.get('host')})
        return await self.module.AsyncConnection.connect(conninfo, autocommit=True, **kwargs)
