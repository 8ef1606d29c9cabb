from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Optional

import duckdb

from dbd.driver import DriverAdapterBase, DriverParameterConfig, ParameterStyle
from dbd.exceptions import ExecutionError

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("DuckDBDriver", "duckdb_parameter_config")

duckdb_parameter_config = DriverParameterConfig(parameter_style=ParameterStyle.QMARK)


class DuckDBDriver(DriverAdapterBase):
    """DuckDB. The parameter string is the database path, empty for in-memory."""

    name: ClassVar[str] = "duckdb"
    parameter_config: ClassVar[DriverParameterConfig] = duckdb_parameter_config

    @classmethod
    def connect(cls, params: str) -> "DuckDBDriver":
        try:
            connection = duckdb.connect(params or ":memory:")
        except duckdb.Error as e:
            raise ExecutionError(f"Failed to open a connection to the database: {e}", driver=cls.name) from e
        return cls(connection)

    def escape(self, value: str) -> str:
        return value.replace("'", "''")

    def row_count(self, cursor: Any) -> int:
        """DuckDB reports modified rows as a single ``Count`` result row."""
        try:
            result = cursor.fetchone()
        except duckdb.Error:
            return max(cursor.rowcount, 0) or 0
        if result and isinstance(result, tuple) and len(result) == 1:
            return int(result[0])
        return 0

    @contextmanager
    def handle_database_exceptions(self, sql: Optional[str] = None) -> "Generator[None, None, None]":
        """Handle DuckDB-specific exceptions and wrap them appropriately."""
        try:
            yield
        except duckdb.Error as e:
            raise ExecutionError(str(e), sql=sql, driver=self.name) from e
