"""
Configuration: environment loading and connection string sources.

    from sql_data_access.config import load_config
    print(load_config().POSTGRES_CONNECTION_STRING)
"""

from .env import Config, env_lookup, load_config  # noqa: F401
from .connection import (  # noqa: F401
    ConnectionSettings,
    FromCredentials,
    FromLookup,
    FromStrings,
    SqlCredentials,
    resolve_connection_settings,
)
