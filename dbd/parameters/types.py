"""Placeholder types produced by the query scanner."""

from enum import Enum
from typing import Final, Optional

__all__ = (
    "INTEGER_RANGES",
    "LARGE_OBJECT_TYPES",
    "ParameterType",
    "Placeholder",
    "PlaceholderScan",
)


class ParameterType(str, Enum):
    """Semantic type of a query placeholder."""

    TINY = "tiny"
    UTINY = "utiny"
    SHORT = "short"
    USHORT = "ushort"
    INT = "int"
    UINT = "uint"
    LONG = "long"
    ULONG = "ulong"
    LONGLONG = "longlong"
    ULONGLONG = "ulonglong"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    TEXT = "text"
    TIME = "time"
    DATE = "date"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    ZTIMESTAMP = "ztimestamp"
    BLOB = "blob"
    CLOB = "clob"
    NULL = "null"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


LARGE_OBJECT_TYPES: Final = frozenset({ParameterType.BLOB, ParameterType.CLOB})

# inclusive bounds
INTEGER_RANGES: Final[dict[ParameterType, tuple[int, int]]] = {
    ParameterType.TINY: (-(2**7), 2**7 - 1),
    ParameterType.UTINY: (0, 2**8 - 1),
    ParameterType.SHORT: (-(2**15), 2**15 - 1),
    ParameterType.USHORT: (0, 2**16 - 1),
    ParameterType.INT: (-(2**31), 2**31 - 1),
    ParameterType.UINT: (0, 2**32 - 1),
    ParameterType.LONG: (-(2**63), 2**63 - 1),
    ParameterType.ULONG: (0, 2**64 - 1),
    ParameterType.LONGLONG: (-(2**63), 2**63 - 1),
    ParameterType.ULONGLONG: (0, 2**64 - 1),
}


class Placeholder:
    """Immutable placeholder information."""

    __slots__ = ("end", "ordinal", "placeholder_text", "slot_count", "start", "type")

    def __init__(
        self, type: ParameterType, slot_count: int, ordinal: int, start: int, end: int, placeholder_text: str
    ) -> None:
        self.type = type
        self.slot_count = slot_count
        self.ordinal = ordinal
        self.start = start
        self.end = end
        self.placeholder_text = placeholder_text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (
            self.type == other.type
            and self.slot_count == other.slot_count
            and self.ordinal == other.ordinal
            and self.start == other.start
            and self.end == other.end
        )

    def __hash__(self) -> int:
        return hash((self.type, self.slot_count, self.ordinal, self.start, self.end))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(type={self.type!r}, slot_count={self.slot_count!r}, "
            f"ordinal={self.ordinal!r}, placeholder_text={self.placeholder_text!r}, "
            f"start={self.start!r}, end={self.end!r})"
        )


class PlaceholderScan:
    """Result of scanning one query string."""

    __slots__ = ("escaped_percents", "placeholders", "sql")

    def __init__(
        self, sql: str, placeholders: "tuple[Placeholder, ...]", escaped_percents: "Optional[tuple[int, ...]]" = None
    ) -> None:
        self.sql = sql
        self.placeholders = placeholders
        self.escaped_percents = escaped_percents or ()

    @property
    def argument_count(self) -> int:
        """Number of logical arguments the query expects."""
        return len(self.placeholders)

    @property
    def slot_count(self) -> int:
        """Number of positional slots the parameter vector needs."""
        return sum(placeholder.slot_count for placeholder in self.placeholders)

    @property
    def types(self) -> "list[ParameterType]":
        return [placeholder.type for placeholder in self.placeholders]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, placeholders={list(self.placeholders)!r})"
