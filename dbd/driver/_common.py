"""Shared pieces for driver adapters."""

import re
from collections.abc import Callable, Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, Optional

from dbd.parameters.types import INTEGER_RANGES, ParameterType

if TYPE_CHECKING:
    from dbd.driver._sync import DriverAdapterBase

__all__ = (
    "DEFAULT_TYPE_COERCION_MAP",
    "DriverParameterConfig",
    "ParameterStyle",
    "ResultCursor",
    "TypeCoercion",
    "resolve_rowcount",
)

TypeCoercion = Callable[[bytes], Any]

_DECIMAL: Final = re.compile(r"[+-]?[0-9]+")


class ParameterStyle(str, Enum):
    """Native placeholder style of a DB-API driver."""

    QMARK = "qmark"
    POSITIONAL_PYFORMAT = "pyformat_positional"

    def __str__(self) -> str:
        return self.value


def _to_integer(parameter_type: ParameterType) -> TypeCoercion:
    low, high = INTEGER_RANGES[parameter_type]

    def coerce(data: bytes) -> int:
        text = data.decode("ascii")
        if not _DECIMAL.fullmatch(text):
            msg = f"invalid decimal integer {text!r}"
            raise ValueError(msg)
        value = int(text, 10)
        if not low <= value <= high:
            msg = f"{value} is out of range for {parameter_type} ({low} to {high})"
            raise ValueError(msg)
        return value

    return coerce


def _to_float(data: bytes) -> float:
    return float(data.decode("ascii").strip())


def _to_text(data: bytes) -> str:
    return data.decode("utf-8")


def _to_bytes(data: bytes) -> bytes:
    return bytes(data)


def _to_null(data: bytes) -> None:
    return None


DEFAULT_TYPE_COERCION_MAP: Final[dict[ParameterType, TypeCoercion]] = {
    **{parameter_type: _to_integer(parameter_type) for parameter_type in INTEGER_RANGES},
    ParameterType.FLOAT: _to_float,
    ParameterType.DOUBLE: _to_float,
    ParameterType.STRING: _to_text,
    ParameterType.TEXT: _to_text,
    ParameterType.TIME: _to_text,
    ParameterType.DATE: _to_text,
    ParameterType.DATETIME: _to_text,
    ParameterType.TIMESTAMP: _to_text,
    ParameterType.ZTIMESTAMP: _to_text,
    ParameterType.BLOB: _to_bytes,
    ParameterType.CLOB: _to_text,
    ParameterType.NULL: _to_null,
}


class DriverParameterConfig:
    """How a driver wants its placeholders and values."""

    __slots__ = ("parameter_style", "type_coercion_map")

    def __init__(
        self,
        parameter_style: ParameterStyle = ParameterStyle.QMARK,
        type_coercion_map: "Optional[dict[ParameterType, TypeCoercion]]" = None,
    ) -> None:
        self.parameter_style = parameter_style
        self.type_coercion_map = {**DEFAULT_TYPE_COERCION_MAP, **(type_coercion_map or {})}

    def coerce(self, parameter_type: ParameterType, data: bytes) -> Any:
        return self.type_coercion_map.get(parameter_type, _to_text)(data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(parameter_style={self.parameter_style!r})"


def resolve_rowcount(cursor: Any) -> int:
    """Resolve rowcount from a DB-API cursor.

    Args:
        cursor: Cursor with optional rowcount metadata.

    Returns:
        Positive rowcount value or 0 when unknown.
    """
    try:
        rowcount = cursor.rowcount
    except AttributeError:
        return 0

    if isinstance(rowcount, int) and rowcount > 0:
        return rowcount
    return 0


class ResultCursor:
    """Rows of one selection, fetched lazily in cursor order."""

    __slots__ = ("_adapter", "_cursor", "column_names", "sql")

    FETCH_SIZE: Final[int] = 256

    def __init__(self, adapter: "DriverAdapterBase", cursor: Any, sql: str) -> None:
        self._adapter = adapter
        self._cursor = cursor
        self.sql = sql
        self.column_names: list[str] = [column[0] for column in cursor.description or []]

    def __iter__(self) -> "Iterator[tuple[Any, ...]]":
        while True:
            with self._adapter.handle_database_exceptions(self.sql):
                rows = self._cursor.fetchmany(self.FETCH_SIZE)
            if not rows:
                return
            yield from (tuple(row) for row in rows)

    def close(self) -> None:
        self._adapter.close_cursor(self._cursor)

    def __enter__(self) -> "ResultCursor":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
