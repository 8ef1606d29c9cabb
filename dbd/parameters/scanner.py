"""printf-style placeholder scanning.

Queries carry APR DBD style placeholders such as ``%d``, ``%lld`` or
``%pDb``. The scanner walks the raw query once, left to right, and reports
the type and slot count of every placeholder. It never touches a driver.
"""

import string
from typing import Final, Optional

from mypy_extensions import mypyc_attr

from dbd.parameters.layout import DEFAULT_SLOT_LAYOUT, SlotLayout
from dbd.parameters.types import ParameterType, Placeholder, PlaceholderScan
from dbd.utils.logging import get_logger

__all__ = ("PLACEHOLDER_SUFFIXES", "PlaceholderScanner", "scan_placeholders")

logger = get_logger("parameters.scanner")

PLACEHOLDER_SUFFIXES: Final[dict[str, ParameterType]] = {
    "d": ParameterType.INT,
    "u": ParameterType.UINT,
    "f": ParameterType.FLOAT,
    "hd": ParameterType.SHORT,
    "hu": ParameterType.USHORT,
    "hhd": ParameterType.TINY,
    "hhu": ParameterType.UTINY,
    "ld": ParameterType.LONG,
    "lu": ParameterType.ULONG,
    "lf": ParameterType.DOUBLE,
    "lld": ParameterType.LONGLONG,
    "llu": ParameterType.ULONGLONG,
    "pDt": ParameterType.TEXT,
    "pDi": ParameterType.TIME,
    "pDd": ParameterType.DATE,
    "pDa": ParameterType.DATETIME,
    "pDs": ParameterType.TIMESTAMP,
    "pDz": ParameterType.ZTIMESTAMP,
    "pDb": ParameterType.BLOB,
    "pDc": ParameterType.CLOB,
    "pDn": ParameterType.NULL,
}

_SUFFIX_LENGTHS: Final = tuple(sorted({len(suffix) for suffix in PLACEHOLDER_SUFFIXES}, reverse=True))
_LETTERS: Final = frozenset(string.ascii_letters)


def scan_placeholders(sql: str, layout: Optional[SlotLayout] = None) -> PlaceholderScan:
    """Scan a query string for printf-style placeholders.

    A ``%`` followed by a letter starts a placeholder. ``%%`` is an escaped
    percent sign and is skipped as a pair. Unknown letters are accepted and
    bind as strings.

    Args:
        sql: The raw query text.
        layout: Slot layout used to size each placeholder. Defaults to the
            large object layout.

    Returns:
        The ordered placeholders found in ``sql``.
    """
    layout = layout or DEFAULT_SLOT_LAYOUT
    placeholders: list[Placeholder] = []
    escaped_percents: list[int] = []
    index = 0
    length = len(sql)

    while index < length:
        if sql[index] != "%":
            index += 1
            continue

        following = sql[index + 1 : index + 2]
        if following == "%":
            escaped_percents.append(index)
            index += 2
            continue
        if following not in _LETTERS:
            index += 1
            continue

        parameter_type = ParameterType.STRING
        consumed = 1
        for size in _SUFFIX_LENGTHS:
            suffix = sql[index + 1 : index + 1 + size]
            if len(suffix) == size and suffix in PLACEHOLDER_SUFFIXES:
                parameter_type = PLACEHOLDER_SUFFIXES[suffix]
                consumed = size
                break

        end = index + 1 + consumed
        placeholders.append(
            Placeholder(
                type=parameter_type,
                slot_count=layout.slot_count(parameter_type),
                ordinal=len(placeholders),
                start=index,
                end=end,
                placeholder_text=sql[index:end],
            )
        )
        index = end

    return PlaceholderScan(sql, tuple(placeholders), tuple(escaped_percents))


@mypyc_attr(allow_interpreted_subclasses=False)
class PlaceholderScanner:
    """Scans queries and remembers the result per query text.

    Selection mode scans every query of a run; table mode builds the same
    query shape over and over, so repeated text is served from the cache.
    """

    __slots__ = ("_cache", "layout")

    def __init__(self, layout: Optional[SlotLayout] = None) -> None:
        self.layout = layout or DEFAULT_SLOT_LAYOUT
        self._cache: dict[str, PlaceholderScan] = {}

    def scan(self, sql: str) -> PlaceholderScan:
        """Scan ``sql``, reusing an earlier result for identical text.

        Returns:
            The placeholder scan for ``sql``.
        """
        if sql in self._cache:
            return self._cache[sql]
        result = scan_placeholders(sql, self.layout)
        logger.debug(
            "Scanned %d placeholders (%d slots) in query %r", result.argument_count, result.slot_count, sql
        )
        self._cache[sql] = result
        return result
