"""Tests for printf-style placeholder scanning."""

import pytest

from dbd.parameters import PlaceholderScanner, ParameterType, scan_placeholders
from dbd.parameters.layout import SlotLayout

SPECIFIERS = [
    ("%d", ParameterType.INT),
    ("%u", ParameterType.UINT),
    ("%f", ParameterType.FLOAT),
    ("%hd", ParameterType.SHORT),
    ("%hu", ParameterType.USHORT),
    ("%hhd", ParameterType.TINY),
    ("%hhu", ParameterType.UTINY),
    ("%ld", ParameterType.LONG),
    ("%lu", ParameterType.ULONG),
    ("%lf", ParameterType.DOUBLE),
    ("%lld", ParameterType.LONGLONG),
    ("%llu", ParameterType.ULONGLONG),
    ("%pDt", ParameterType.TEXT),
    ("%pDi", ParameterType.TIME),
    ("%pDd", ParameterType.DATE),
    ("%pDa", ParameterType.DATETIME),
    ("%pDs", ParameterType.TIMESTAMP),
    ("%pDz", ParameterType.ZTIMESTAMP),
    ("%pDb", ParameterType.BLOB),
    ("%pDc", ParameterType.CLOB),
    ("%pDn", ParameterType.NULL),
]


@pytest.mark.parametrize(("specifier", "expected_type"), SPECIFIERS)
def test_specifier_consumes_exact_text(specifier: str, expected_type: ParameterType) -> None:
    sql = f"select * from t where a = {specifier} and b = 1"
    scan = scan_placeholders(sql)

    assert scan.argument_count == 1
    placeholder = scan.placeholders[0]
    assert placeholder.type is expected_type
    assert placeholder.placeholder_text == specifier
    assert sql[placeholder.start : placeholder.end] == specifier
    assert sql[placeholder.end :] == " and b = 1"


@pytest.mark.parametrize(("specifier", "expected_type"), SPECIFIERS)
def test_slot_count_per_type(specifier: str, expected_type: ParameterType) -> None:
    placeholder = scan_placeholders(specifier).placeholders[0]
    expected = 4 if expected_type in (ParameterType.BLOB, ParameterType.CLOB) else 1
    assert placeholder.slot_count == expected


def test_escaped_percent_is_not_a_placeholder() -> None:
    scan = scan_placeholders("select '100%%' from t")
    assert scan.argument_count == 0
    assert scan.escaped_percents == (11,)


def test_escaped_percent_is_not_rescanned() -> None:
    # "%%d" is an escaped percent followed by a literal "d"
    scan = scan_placeholders("select '%%d'")
    assert scan.argument_count == 0


def test_escaped_percent_before_placeholder() -> None:
    scan = scan_placeholders("%%%d")
    assert scan.argument_count == 1
    assert scan.placeholders[0].start == 2
    assert scan.placeholders[0].type is ParameterType.INT


def test_placeholders_in_order() -> None:
    scan = scan_placeholders("insert into t values (%s, %lld, %pDb, %pDn)")
    assert scan.types == [ParameterType.STRING, ParameterType.LONGLONG, ParameterType.BLOB, ParameterType.NULL]
    assert [placeholder.ordinal for placeholder in scan.placeholders] == [0, 1, 2, 3]
    assert scan.argument_count == 4
    assert scan.slot_count == 7


@pytest.mark.parametrize(
    ("sql", "consumed"),
    [
        ("%s", "%s"),
        ("%x", "%x"),
        ("%hx", "%h"),
        ("%hhx", "%h"),
        ("%lx", "%l"),
        ("%llx", "%l"),
        ("%pX", "%p"),
        ("%pDx", "%p"),
        ("%dx", "%d"),
    ],
)
def test_unknown_specifier_binds_as_string(sql: str, consumed: str) -> None:
    scan = scan_placeholders(sql)
    assert scan.argument_count == 1
    placeholder = scan.placeholders[0]
    assert placeholder.placeholder_text == consumed
    if consumed != "%d":
        assert placeholder.type is ParameterType.STRING


@pytest.mark.parametrize("sql", ["select 5 % 3", "select 1 %", "select '%1'", "%-", ""])
def test_percent_without_letter_is_literal(sql: str) -> None:
    assert scan_placeholders(sql).argument_count == 0


def test_adjacent_placeholders() -> None:
    scan = scan_placeholders("%d%u%f")
    assert scan.types == [ParameterType.INT, ParameterType.UINT, ParameterType.FLOAT]


def test_custom_layout_sizes_slots() -> None:
    scan = scan_placeholders("%pDb %pDc", SlotLayout())
    assert [placeholder.slot_count for placeholder in scan.placeholders] == [1, 1]


def test_scanner_caches_by_query_text() -> None:
    scanner = PlaceholderScanner()
    first = scanner.scan("select %d")
    assert scanner.scan("select %d") is first
    assert scanner.scan("select %u") is not first
