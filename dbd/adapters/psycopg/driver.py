from contextlib import contextmanager
from typing import TYPE_CHECKING, ClassVar, Optional

import psycopg
from psycopg import pq

from dbd.driver import DriverAdapterBase, DriverParameterConfig, ParameterStyle
from dbd.exceptions import ExecutionError

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("PsycopgDriver", "psycopg_parameter_config")

psycopg_parameter_config = DriverParameterConfig(parameter_style=ParameterStyle.POSITIONAL_PYFORMAT)


class PsycopgDriver(DriverAdapterBase):
    """PostgreSQL through psycopg. The parameter string is a libpq conninfo."""

    name: ClassVar[str] = "pgsql"
    parameter_config: ClassVar[DriverParameterConfig] = psycopg_parameter_config

    @classmethod
    def connect(cls, params: str) -> "PsycopgDriver":
        try:
            connection = psycopg.connect(params, autocommit=True)
        except psycopg.Error as e:
            raise ExecutionError(f"Failed to open a connection to the database: {e}", driver=cls.name) from e
        return cls(connection)

    def escape(self, value: str) -> str:
        """Escape with libpq's ``PQescapeStringConn`` for this connection."""
        encoding = self.connection.info.encoding
        with self.handle_database_exceptions():
            escaped = pq.Escaping(self.connection.pgconn).escape_string(value.encode(encoding))
        return escaped.decode(encoding)

    @contextmanager
    def handle_database_exceptions(self, sql: Optional[str] = None) -> "Generator[None, None, None]":
        """Handle PostgreSQL psycopg-specific exceptions and wrap them appropriately."""
        try:
            yield
        except psycopg.Error as e:
            raise ExecutionError(str(e), sql=sql, driver=self.name) from e
