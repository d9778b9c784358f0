"""
Rendering of commands into driver SQL.

Command text uses ``@name`` parameter tokens for both backends.  A
dialect rewrites the tokens that name a bound parameter into the
driver's placeholder style (read from the DB-API ``paramstyle`` of the
driver module) and turns stored procedure and table-direct commands into
executable statements.
"""

from __future__ import annotations

import importlib
import re
from types import ModuleType
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

from ...core.command import CommandType
from ...core.exceptions import DataAccessException
from ...core.parameters import ParameterDirection, SqlParameter, driver_value


# ``@name`` not preceded by another ``@`` (system functions such as
# ``@@ROWCOUNT``) or a word character (e-mail addresses and the like).
PARAMETER_TOKEN = re.compile(r"(?<![@\w])@([A-Za-z_][A-Za-z0-9_]*)")


class Dialect:
    """Base class for a backend's driver adapter."""

    name = "SQL"
    tag = "sql"
    default_driver = ""
    exception_class: Type[DataAccessException] = DataAccessException

    def __init__(self, driver: Union[str, ModuleType, None] = None) -> None:
        self._driver = driver or self.default_driver
        self._module: Optional[ModuleType] = None

    @property
    def module(self) -> ModuleType:
        """The driver module, imported on first use."""
        if self._module is None:
            if isinstance(self._driver, str):
                self._module = importlib.import_module(self._driver)
            else:
                self._module = self._driver
        return self._module

    @property
    def driver_name(self) -> str:
        if isinstance(self._driver, str):
            return self._driver
        return self._driver.__name__

    @property
    def paramstyle(self) -> str:
        return getattr(self.module, "paramstyle", "pyformat")

    @property
    def driver_errors(self) -> Tuple[Type[BaseException], ...]:
        return (self.module.Error,)

    def error_message(self, error: BaseException) -> str:
        return str(error)

    # Rendering

    def placeholder(self, name: str) -> str:
        if self.paramstyle == "qmark":
            return "?"
        return f"%({name})s"

    def bind_values(self, parameters: Sequence[SqlParameter]) -> Dict[str, Any]:
        return {parameter.bare_name: driver_value(parameter.value) for parameter in parameters}

    def render(
        self, command_type: CommandType, command_text: str, parameters: Sequence[SqlParameter]
    ) -> Tuple[str, Any]:
        if command_type is CommandType.TEXT:
            return self.render_text(command_text, parameters)
        if command_type is CommandType.STORED_PROCEDURE:
            return self.render_procedure(command_text, parameters)
        if command_type is CommandType.TABLE_DIRECT:
            return self.render_table_direct(command_text, parameters)
        raise ValueError(f"Unsupported command type: {command_type!r}")

    def render_text(self, command_text: str, parameters: Sequence[SqlParameter]) -> Tuple[str, Any]:
        if not parameters:
            return command_text, None
        values = self.bind_values(parameters)
        if self.paramstyle == "qmark":
            ordered: List[Any] = []

            def positional(match: re.Match) -> str:
                name = match.group(1)
                if name not in values:
                    return match.group(0)
                ordered.append(values[name])
                return "?"

            return PARAMETER_TOKEN.sub(positional, command_text), ordered

        def named(match: re.Match) -> str:
            name = match.group(1)
            if name not in values:
                return match.group(0)
            return self.placeholder(name)

        # literal percent signs must be doubled once parameters are passed
        return PARAMETER_TOKEN.sub(named, command_text.replace("%", "%%")), values

    def procedure_arguments(self, parameters: Sequence[SqlParameter]) -> List[SqlParameter]:
        return [p for p in parameters if p.direction is not ParameterDirection.RETURN_VALUE]

    def collect_arguments(self, arguments: Sequence[SqlParameter]) -> Any:
        if not arguments:
            return None
        if self.paramstyle == "qmark":
            return [driver_value(p.value) for p in arguments]
        return self.bind_values(arguments)

    def render_procedure(self, command_text: str, parameters: Sequence[SqlParameter]) -> Tuple[str, Any]:
        raise NotImplementedError

    def render_table_direct(self, command_text: str, parameters: Sequence[SqlParameter]) -> Tuple[str, Any]:
        raise ValueError(f"{CommandType.TABLE_DIRECT.label} commands are not supported by {self.name}")

    # Connections

    def connect(self, connection_string: str) -> Any:
        raise NotImplementedError

    async def connect_async(self, connection_string: str) -> Any:
        raise NotImplementedError
