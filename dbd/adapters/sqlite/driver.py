import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING, ClassVar, Optional

from dbd.driver import DriverAdapterBase, DriverParameterConfig, ParameterStyle
from dbd.exceptions import ExecutionError

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("SqliteDriver", "sqlite_parameter_config")

sqlite_parameter_config = DriverParameterConfig(parameter_style=ParameterStyle.QMARK)


class SqliteDriver(DriverAdapterBase):
    """SQLite through the standard library ``sqlite3`` module.

    The parameter string is the database path, or a ``file:`` URI.
    """

    name: ClassVar[str] = "sqlite3"
    parameter_config: ClassVar[DriverParameterConfig] = sqlite_parameter_config

    @classmethod
    def connect(cls, params: str) -> "SqliteDriver":
        try:
            # autocommit, statements are never wrapped in a transaction
            connection = sqlite3.connect(params, isolation_level=None, uri=params.startswith("file:"))
        except sqlite3.Error as e:
            raise ExecutionError(f"Failed to open a connection to the database: {e}", driver=cls.name) from e
        return cls(connection)

    def escape(self, value: str) -> str:
        return value.replace("'", "''")

    @contextmanager
    def handle_database_exceptions(self, sql: Optional[str] = None) -> "Generator[None, None, None]":
        """Handle SQLite-specific exceptions and wrap them appropriately."""
        try:
            yield
        except (sqlite3.Error, OverflowError) as e:
            raise ExecutionError(str(e), sql=sql, driver=self.name) from e
