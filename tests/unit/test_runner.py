"""Tests for the execution modes."""

import io
from collections.abc import Generator
from pathlib import Path
from unittest.mock import Mock

import pytest

from dbd.adapters.sqlite import SqliteDriver
from dbd.arguments import ArgumentSource
from dbd.config import RunMode, RunnerConfig
from dbd.exceptions import ArgumentCountMismatchError, ExecutionError, ImproperConfigurationError
from dbd.formatting import ResultWriter
from dbd.runner import QueryRunner, RunOutcome


@pytest.fixture
def driver(sqlite_database: Path) -> Generator[SqliteDriver, None, None]:
    with SqliteDriver.connect(str(sqlite_database)) as connected:
        yield connected


def make_runner(
    driver: SqliteDriver, mode: RunMode, *sources: ArgumentSource, **settings: object
) -> "tuple[QueryRunner, io.BytesIO]":
    stream = io.BytesIO()
    config = RunnerConfig(mode=mode, driver="sqlite3", params="", **settings)  # type: ignore[arg-type]
    writer = ResultWriter(stream, config.column_separator, config.line_separator, config.encoding)
    return QueryRunner(config, driver, writer, sources), stream


def test_escape_mode_joins_values(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.ESCAPE)
    assert runner.run(["john';drop table users", "o'brien"]) is RunOutcome.SUCCESS
    assert stream.getvalue() == b"john'';drop table users\to''brien\n"


def test_escape_mode_without_values(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.ESCAPE)
    runner.run([])
    assert stream.getvalue() == b"\n"


def test_select_with_header(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.SELECT, header=True)
    runner.run(["select id, name from users order by id"])
    assert stream.getvalue() == b"id\tname\n1\tjohn\n2\tjane\n"


def test_select_with_arguments(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.SELECT, ArgumentSource.literal("2"))
    runner.run(["select name from users where id = %d"])
    assert stream.getvalue() == b"jane\n"


def test_select_several_queries_form_one_stream(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.SELECT, header=True, line_separator=";", end_of_line=False)
    runner.run(["select name from users where id = 1", "select id from users where id = 2"])
    assert stream.getvalue() == b"name;john;id;2"


def test_select_reuses_literal_arguments_per_query(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.SELECT, ArgumentSource.literal("1"))
    runner.run(["select name from users where id = %d", "select id from users where id = %d"])
    assert stream.getvalue() == b"john\n1\n"


def test_select_null_cell_is_empty(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.SELECT, column_separator=",")
    runner.run(["select id, data from users where id = 1"])
    assert stream.getvalue() == b"1,\n"


def test_select_no_rows_is_success(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.SELECT)
    assert runner.run(["select * from users where id = 99"]) is RunOutcome.SUCCESS
    assert stream.getvalue() == b"\n"


def test_select_encoding(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.SELECT, encoding="base64")
    runner.run(["select name from users where id = 1"])
    assert stream.getvalue() == b"am9obg==\n"


def test_table_mode(driver: SqliteDriver) -> None:
    driver.connection.execute("create table roles (name text)")
    driver.connection.execute("insert into roles values ('admin')")
    runner, stream = make_runner(driver, RunMode.TABLE, header=True)
    runner.run(["users", "roles"])
    assert stream.getvalue() == b"id\tname\tdata\n1\tjohn\t\n2\tjane\t\nname\nadmin\n"


def test_table_mode_escapes_name(driver: SqliteDriver) -> None:
    runner, _ = make_runner(driver, RunMode.TABLE)
    with pytest.raises(ExecutionError, match="select \\* from users'' where"):
        runner.run(["users' where"])


def test_query_mode_reports_rows(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.QUERY, ArgumentSource.literal("jim"), ArgumentSource.literal("1"))
    assert runner.run(["update users set name = %s where id = %d"]) is RunOutcome.SUCCESS
    assert stream.getvalue() == b"1\n"
    assert driver.connection.execute("select name from users where id = 1").fetchone() == ("jim",)


def test_query_mode_no_rows_affected(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.QUERY, ArgumentSource.literal("99"))
    assert runner.run(["delete from users where id = %d"]) is RunOutcome.NO_ROWS_AFFECTED
    assert stream.getvalue() == b"0\n"


@pytest.mark.parametrize("queries", [[], ["delete from users", "delete from users"]])
def test_query_mode_needs_one_query(driver: SqliteDriver, queries: "list[str]") -> None:
    runner, stream = make_runner(driver, RunMode.QUERY)
    with pytest.raises(ImproperConfigurationError, match="One query needs to be specified."):
        runner.run(queries)
    assert stream.getvalue() == b""


def test_count_mismatch_stops_before_execution() -> None:
    driver = Mock(spec=SqliteDriver)
    runner, stream = make_runner(driver, RunMode.SELECT)
    with pytest.raises(ArgumentCountMismatchError):
        runner.run(["select * from users where id = %d"])
    driver.select.assert_not_called()
    assert stream.getvalue() == b""


def test_failure_stops_remaining_queries(driver: SqliteDriver) -> None:
    runner, stream = make_runner(driver, RunMode.SELECT)
    with pytest.raises(ExecutionError):
        runner.run(["select name from users where id = 1", "select * from missing", "select 1"])
    assert stream.getvalue() == b"john"
