"""Synchronous driver adapter base."""

import contextlib
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from dbd.driver._common import DriverParameterConfig, ParameterStyle, ResultCursor, resolve_rowcount
from dbd.exceptions import ArgumentTypeError
from dbd.parameters.types import ParameterType
from dbd.utils.logging import get_logger

if TYPE_CHECKING:
    from dbd.parameters.binder import ParameterVector
    from dbd.parameters.types import PlaceholderScan

__all__ = ("DriverAdapterBase",)

logger = get_logger("driver")


class DriverAdapterBase(ABC):
    """Base class for the database collaborators used by the runner.

    Subclasses wrap one DB-API module. The base class renders the scanned
    query in the driver's native placeholder style, turns the parameter
    vector into driver values and runs statements.
    """

    name: ClassVar[str]
    parameter_config: ClassVar[DriverParameterConfig] = DriverParameterConfig()

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    @classmethod
    @abstractmethod
    def connect(cls, params: str) -> "DriverAdapterBase":
        """Open a connection from the driver specific parameter string."""

    @abstractmethod
    def escape(self, value: str) -> str:
        """Escape ``value`` for inclusion inside a quoted SQL literal."""

    @abstractmethod
    def handle_database_exceptions(self, sql: Optional[str] = None) -> "contextlib.AbstractContextManager[None]":
        """Wrap driver exceptions raised inside the block in :class:`ExecutionError`."""

    def compile(self, scan: "PlaceholderScan") -> str:
        """Render a scanned query with the driver's native placeholders.

        Args:
            scan: The placeholder scan of the query.

        Returns:
            SQL text ready for the driver.
        """
        pyformat = self.parameter_config.parameter_style is ParameterStyle.POSITIONAL_PYFORMAT
        marker = "%s" if pyformat else "?"
        percent = "%%" if pyformat else "%"
        edits = sorted(
            [(placeholder.start, placeholder.end, marker) for placeholder in scan.placeholders]
            + [(position, position + 2, percent) for position in scan.escaped_percents]
        )

        sql = scan.sql
        parts: list[str] = []
        cursor = 0
        for start, end, replacement in edits:
            segment = sql[cursor:start]
            parts.append(segment.replace("%", "%%") if pyformat else segment)
            parts.append(replacement)
            cursor = end
        tail = sql[cursor:]
        parts.append(tail.replace("%", "%%") if pyformat else tail)
        return "".join(parts)

    def prepare_parameters(self, vector: "ParameterVector") -> "list[Any]":
        """Convert the parameter vector into one driver value per placeholder.

        Raises:
            ArgumentTypeError: If an argument does not parse as its placeholder type.

        Returns:
            Driver values in placeholder order.
        """
        values: list[Any] = []
        for placeholder, data in vector.values():
            if data is None or placeholder.type is ParameterType.NULL:
                values.append(None)
                continue
            try:
                values.append(self.parameter_config.coerce(placeholder.type, data))
            except (ValueError, UnicodeDecodeError) as e:
                msg = (
                    f"Argument {placeholder.ordinal + 1} for '{placeholder.placeholder_text}' "
                    f"is not a valid {placeholder.type}: {e}"
                )
                raise ArgumentTypeError(msg, vector.scan.sql) from e
        return values

    def create_cursor(self) -> Any:
        return self.connection.cursor()

    def close_cursor(self, cursor: Any) -> None:
        with contextlib.suppress(Exception):
            cursor.close()

    def row_count(self, cursor: Any) -> int:
        return resolve_rowcount(cursor)

    def execute(self, sql: str, vector: "ParameterVector") -> int:
        """Run a statement that modifies data.

        Returns:
            The number of affected rows.
        """
        native_sql = self.compile(vector.scan)
        parameters = self.prepare_parameters(vector)
        cursor = None
        try:
            with self.handle_database_exceptions(sql):
                cursor = self.create_cursor()
                cursor.execute(native_sql, parameters)
                rows = self.row_count(cursor)
        finally:
            if cursor is not None:
                self.close_cursor(cursor)
        logger.debug("Query affected %d rows", rows)
        return rows

    def select(self, sql: str, vector: "ParameterVector") -> ResultCursor:
        """Run a statement that returns rows.

        Returns:
            A cursor over the result rows. Close it when done.
        """
        native_sql = self.compile(vector.scan)
        parameters = self.prepare_parameters(vector)
        cursor = None
        try:
            with self.handle_database_exceptions(sql):
                cursor = self.create_cursor()
                cursor.execute(native_sql, parameters)
                return ResultCursor(self, cursor, sql)
        except BaseException:
            if cursor is not None:
                self.close_cursor(cursor)
            raise

    def close(self) -> None:
        with self.handle_database_exceptions():
            self.connection.close()

    def __enter__(self) -> "DriverAdapterBase":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

