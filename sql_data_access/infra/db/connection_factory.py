"""
Data access factory.

Builds managed facades by alias from the environment configuration.
See ``sql_data_access.config.env`` for the variables involved.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from ...config import Config, load_config
from ...config.connection import FromStrings
from ...data_access.managed import DataAccess
from ...data_access.postgresql import PostgreSqlDataAccess
from ...data_access.sqlserver import SqlServerDataAccess
from .mssql import SqlServerDialect


def _sqlserver(config: Config) -> DataAccess:
    if not config.SQLSERVER_CONNECTION_STRING:
        raise ValueError("Environment variable SQLSERVER_CONNECTION_STRING is required")
    return SqlServerDataAccess(
        FromStrings(config.SQLSERVER_CONNECTION_STRING, config.SQLSERVER_READONLY_CONNECTION_STRING),
        dialect=SqlServerDialect(config.MSSQL_DRIVER, config.MSSQL_ODBC_DRIVER),
    )


def _postgres(config: Config) -> DataAccess:
    if not config.POSTGRES_CONNECTION_STRING:
        raise ValueError("Environment variable POSTGRES_CONNECTION_STRING is required")
    return PostgreSqlDataAccess(
        FromStrings(config.POSTGRES_CONNECTION_STRING, config.POSTGRES_READONLY_CONNECTION_STRING)
    )


# Registry mapping aliases to callables that build an unopened facade.
_registry: Dict[str, Callable[[Config], DataAccess]] = {
    'sqlserver': _sqlserver,
    'postgres': _postgres,
}


def configured_aliases(config: Optional[Config] = None) -> List[str]:
    """Aliases whose read-write connection string is set."""
    config = config or load_config()
    aliases = []
    if config.SQLSERVER_CONNECTION_STRING:
        aliases.append('sqlserver')
    if config.POSTGRES_CONNECTION_STRING:
        aliases.append('postgres')
    return aliases


def get_data_access(alias: str, config: Optional[Config] = None) -> DataAccess:
    """Build a facade for ``alias`` (``'sqlserver'`` or ``'postgres'``).

    The facade is returned unopened.

    Raises:
        KeyError: If the alias is not registered.
        ValueError: If the alias' connection string is not configured.
    """
    try:
        factory = _registry[alias]
    except KeyError:
        raise KeyError(f"No connection defined for alias: {alias}") from None
    return factory(config or load_config())
