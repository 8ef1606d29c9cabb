import pytest

from dbd.exceptions import (
    ArgumentCountMismatchError,
    ArgumentReadError,
    ArgumentTypeError,
    DBDError,
    EncodingError,
    ExecutionError,
    ImproperConfigurationError,
    MissingDependencyError,
    OutputError,
    UnsupportedEncodingError,
)


@pytest.mark.parametrize(
    ("error", "exit_code"),
    [
        (ImproperConfigurationError("no driver"), 1),
        (ArgumentCountMismatchError(1, 0, "select %s"), 1),
        (ArgumentTypeError("bad", "select %d"), 1),
        (UnsupportedEncodingError("hex"), 1),
        (ArgumentReadError("in.txt", OSError("denied")), 2),
        (ExecutionError("boom", "select 1", "sqlite3"), 2),
        (EncodingError("bad"), 2),
        (OutputError("closed"), 2),
        (MissingDependencyError("duckdb"), 2),
    ],
)
def test_exit_codes(error: DBDError, exit_code: int) -> None:
    assert isinstance(error, DBDError)
    assert error.exit_code == exit_code


def test_parameter_error_appends_query() -> None:
    assert str(ArgumentTypeError("bad value", "select %d")) == "bad value\nSQL: select %d"
    assert str(ArgumentTypeError("bad value")) == "bad value"


def test_execution_error_message() -> None:
    assert str(ExecutionError("no such table: t", "select * from t", "sqlite3")) == (
        "Database query 'select * from t' failed (using sqlite3): no such table: t"
    )
    assert str(ExecutionError("unable to open", driver="sqlite3")) == (
        "Database operation failed (using sqlite3): unable to open"
    )
    assert str(ExecutionError("plain")) == "plain"


def test_argument_read_error_message() -> None:
    cause = FileNotFoundError("missing.txt")
    assert str(ArgumentReadError("missing.txt", cause)) == "Could not read argument 'missing.txt': missing.txt"
    assert str(ArgumentReadError("missing.txt", cause, sql="select %s")).startswith(
        "Database query 'select %s' failed while reading 'missing.txt'"
    )


def test_missing_dependency_is_import_error() -> None:
    error = MissingDependencyError("psycopg", "psycopg")
    assert isinstance(error, ImportError)
    assert "pip install dbd[psycopg]" in str(error)


def test_repr() -> None:
    assert repr(OutputError("closed")) == "OutputError - closed"
    assert repr(OutputError()) == "OutputError"
