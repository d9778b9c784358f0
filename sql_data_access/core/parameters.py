"""
Command parameters.

A ``SqlParameter`` is a name, a value and a direction.  Values of
output-like parameters that were never supplied are bound as ``DB_NULL``
rather than ``None`` so that "not yet supplied" and "explicitly null"
stay distinguishable until the driver call.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional


class _DBNullType:
    """Singleton marker for an explicit database ``NULL``."""

    _instance: Optional["_DBNullType"] = None

    def __new__(cls) -> "_DBNullType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DBNull"

    def __str__(self) -> str:
        return ""

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_DBNullType, ())


DB_NULL = _DBNullType()


class ParameterDirection(enum.Enum):
    INPUT = "Input"
    OUTPUT = "Output"
    INPUT_OUTPUT = "InputOutput"
    RETURN_VALUE = "ReturnValue"


def is_output_like(direction: ParameterDirection) -> bool:
    """Return ``True`` for directions whose value the server supplies."""
    return direction in (ParameterDirection.OUTPUT, ParameterDirection.RETURN_VALUE)


@dataclass
class SqlParameter:
    """A named command parameter.

    ``name`` may carry the ``@`` (T-SQL) or ``:`` prefix; ``bare_name``
    strips it for placeholder binding.  ``db_type`` is informational and
    is not interpreted here.
    """

    name: str
    value: Any = None
    direction: ParameterDirection = ParameterDirection.INPUT
    db_type: Optional[str] = None

    @property
    def bare_name(self) -> str:
        return self.name.lstrip("@:")


def driver_value(value: Any) -> Any:
    """Translate a bound value into what DB-API drivers accept."""
    if value is DB_NULL:
        return None
    return value
