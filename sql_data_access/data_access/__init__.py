"""
Facades combining connection handling with command execution.
"""

from .base import DataAccessBase  # noqa: F401
from .managed import DataAccess  # noqa: F401
