"""
Connection string sources.

A facade can be built from one of three sources, each resolved once
into a ``ConnectionSettings`` pair:

* ``FromLookup(key)`` – a key path looked up in external configuration.
* ``FromCredentials(credentials)`` – a ``SqlCredentials`` record.
* ``FromStrings(connection_string, read_only_connection_string)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..core.exceptions import DataAccessConfigurationError
from .env import env_lookup


Lookup = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class SqlCredentials:
    connection_string: str
    read_only_connection_string: Optional[str] = None


@dataclass(frozen=True)
class FromLookup:
    key: str
    lookup: Optional[Lookup] = None


@dataclass(frozen=True)
class FromCredentials:
    credentials: SqlCredentials


@dataclass(frozen=True)
class FromStrings:
    connection_string: str
    read_only_connection_string: Optional[str] = None


ConnectionSource = Union[FromLookup, FromCredentials, FromStrings, SqlCredentials, str]


@dataclass(frozen=True)
class ConnectionSettings:
    connection_string: Optional[str]
    read_only_connection_string: Optional[str] = None

    def require_connection_string(self) -> str:
        if not self.connection_string or not self.connection_string.strip():
            raise DataAccessConfigurationError("The Connection String has not been specified.")
        return self.connection_string

    def require_read_only_connection_string(self) -> str:
        if not self.read_only_connection_string or not self.read_only_connection_string.strip():
            raise DataAccessConfigurationError(
                "Readonly Connection String is not configured. Provide read_only_connection_string "
                "through the connection source or use open_connection()."
            )
        return self.read_only_connection_string


def resolve_connection_settings(source: ConnectionSource) -> ConnectionSettings:
    """Resolve a connection source into a ``ConnectionSettings`` pair.

    Raises:
        DataAccessConfigurationError: If a lookup key resolves to nothing.
        TypeError: If ``source`` is not a supported source type.
    """
    if isinstance(source, ConnectionSettings):
        return source
    if isinstance(source, str):
        return ConnectionSettings(source)
    if isinstance(source, SqlCredentials):
        return ConnectionSettings(source.connection_string, source.read_only_connection_string)
    if isinstance(source, FromCredentials):
        return resolve_connection_settings(source.credentials)
    if isinstance(source, FromStrings):
        return ConnectionSettings(source.connection_string, source.read_only_connection_string)
    if isinstance(source, FromLookup):
        lookup = source.lookup or env_lookup
        value = lookup(source.key)
        if not value:
            raise DataAccessConfigurationError(
                f"Connection String could not be found from the specified path - {source.key}"
            )
        return ConnectionSettings(value)
    raise TypeError(f"Unsupported connection source: {type(source).__name__}")
