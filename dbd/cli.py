"""The ``dbd`` command line."""

import contextlib
from typing import TYPE_CHECKING, Any, Final, Optional

import rich_click as click
from click import get_binary_stream
from rich.console import Console
from rich.markup import escape as escape_markup

from dbd.arguments import ArgumentKind, ArgumentSource, FileHandleCache
from dbd.config import (
    DEFAULT_END_OF_COLUMN,
    DEFAULT_END_OF_LINE,
    DRIVER_ENV,
    PARAMS_ENV,
    RunMode,
    RunnerConfig,
)
from dbd.driver import get_driver
from dbd.exceptions import EXIT_CALLER_ERROR, DBDError, OutputError
from dbd.formatting import DEFAULT_ENCODING, Encoding, ResultWriter
from dbd.runner import QueryRunner, RunOutcome
from dbd.utils.logging import configure_logging, get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ("DBDCommand", "DBDUsageError", "dbd_command", "scan_argument_order")

logger = get_logger("cli")

ARGUMENT_ORDER_KEY: Final = "dbd.argument_order"

_LONG_ARGUMENT_OPTIONS: Final = {"--argument": ArgumentKind.LITERAL, "--file-argument": ArgumentKind.FILE}
_SHORT_ARGUMENT_OPTIONS: Final = {"a": ArgumentKind.LITERAL, "f": ArgumentKind.FILE}
_LONG_VALUE_OPTIONS: Final = frozenset({
    "--file-out",
    "--driver",
    "--params",
    "--end-of-column",
    "--end-of-line",
    "--encoding",
    "--log-level",
    "--log-format",
})
_SHORT_VALUE_OPTIONS: Final = frozenset("odpclx")


class DBDUsageError(click.UsageError):
    """Usage errors are caller errors."""

    exit_code = EXIT_CALLER_ERROR


def scan_argument_order(args: "Sequence[str]") -> "list[tuple[ArgumentKind, Optional[str]]]":
    """Recover the command line order of ``-a``, ``-f`` and ``-z``.

    Click groups repeated options by name, which loses how the three
    argument options interleave. Placeholders bind positionally, so the
    order is read from the raw arguments here.

    Args:
        args: Raw command line arguments, without the program name.

    Returns:
        ``(kind, value)`` pairs in command line order; NULL entries carry no value.
    """
    order: list[tuple[ArgumentKind, Optional[str]]] = []
    tokens = iter(args)
    for token in tokens:
        if token == "--":
            break
        if token.startswith("--"):
            name, eq, value = token.partition("=")
            if name in _LONG_ARGUMENT_OPTIONS:
                order.append((_LONG_ARGUMENT_OPTIONS[name], value if eq else next(tokens, None)))
            elif name == "--null-argument":
                order.append((ArgumentKind.NULL, None))
            elif name in _LONG_VALUE_OPTIONS and not eq:
                next(tokens, None)
            continue
        if not token.startswith("-") or token == "-":
            continue
        for index, letter in enumerate(token[1:], start=1):
            rest = token[index + 1 :]
            if letter in _SHORT_ARGUMENT_OPTIONS:
                order.append((_SHORT_ARGUMENT_OPTIONS[letter], rest or next(tokens, None)))
                break
            if letter == "z":
                order.append((ArgumentKind.NULL, None))
            elif letter in _SHORT_VALUE_OPTIONS:
                if not rest:
                    next(tokens, None)
                break
    return order


class DBDCommand(click.RichCommand):
    """Command that remembers argument order and reports usage errors as caller errors."""

    def parse_args(self, ctx: "click.Context", args: "list[str]") -> "list[str]":
        ctx.meta[ARGUMENT_ORDER_KEY] = scan_argument_order(args)
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = EXIT_CALLER_ERROR
            raise


def build_argument_sources(
    ctx: "click.Context",
    handles: FileHandleCache,
    literals: "Sequence[str]",
    files: "Sequence[str]",
    nulls: int,
) -> "list[ArgumentSource]":
    """Create argument sources in command line order.

    Raises:
        DBDUsageError: If the recorded order disagrees with the parsed options.
        ArgumentReadError: If an argument file cannot be opened.

    Returns:
        One source per ``-a``, ``-f`` or ``-z`` occurrence.
    """
    order = ctx.meta.get(ARGUMENT_ORDER_KEY, [])
    recorded_literals = [value for kind, value in order if kind is ArgumentKind.LITERAL]
    recorded_files = [value for kind, value in order if kind is ArgumentKind.FILE]
    recorded_nulls = sum(1 for kind, _ in order if kind is ArgumentKind.NULL)
    if recorded_literals != list(literals) or recorded_files != list(files) or recorded_nulls != nulls:
        msg = "Could not determine the order of the query arguments."
        raise DBDUsageError(msg, ctx)

    sources: list[ArgumentSource] = []
    for kind, value in order:
        if kind is ArgumentKind.LITERAL:
            sources.append(ArgumentSource.literal(value or ""))
        elif kind is ArgumentKind.FILE:
            sources.append(ArgumentSource.file(handles.open(value or "")))
        else:
            sources.append(ArgumentSource.null())
    return sources


def run_invocation(config: RunnerConfig, sources: "Sequence[ArgumentSource]", values: "Sequence[str]") -> RunOutcome:
    """Connect, run the configured mode and write its output.

    Raises:
        OutputError: If the output file cannot be opened.

    Returns:
        The outcome of the run.
    """
    config.validate()
    driver_type = get_driver(config.driver or "")

    with contextlib.ExitStack() as stack:
        if config.output:
            try:
                stream = stack.enter_context(open(config.output, "wb"))  # noqa: SIM115
            except OSError as e:
                msg = f"Could not open '{config.output}': {e}"
                raise OutputError(msg) from e
        else:
            stream = get_binary_stream("stdout")

        driver = stack.enter_context(driver_type.connect(config.params or ""))
        logger.debug("Connected using %s", driver_type.name)
        writer = ResultWriter(stream, config.column_separator, config.line_separator, config.encoding)
        return QueryRunner(config, driver, writer, sources).run(values)


@click.command(
    cls=DBDCommand,
    name="dbd",
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog="Example: dbd -d sqlite3 -p /tmp/database.sqlite3 -a 1 -s 'select * from users where id = %s'",
)
@click.option("-e", "--escape", is_flag=True, help="Escape the arguments against the given database.")
@click.option("-t", "--table", is_flag=True, help="Select all rows of the named tables.")
@click.option("-s", "--select", is_flag=True, help="Run select queries. Expected to return database rows.")
@click.option("-q", "--query", is_flag=True, help="Run one query. Expected to return the number of rows affected.")
@click.option("-d", "--driver", envvar=DRIVER_ENV, help=f"Database driver to use. Defaults to {DRIVER_ENV}.")
@click.option("-p", "--params", envvar=PARAMS_ENV, help=f"Connection parameter string. Defaults to {PARAMS_ENV}.")
@click.option("-a", "--argument", multiple=True, help="Pass an argument to a prepared statement.")
@click.option(
    "-f",
    "--file-argument",
    multiple=True,
    help="Pass a file containing an argument to a prepared statement. '-' for stdin.",
)
@click.option("-z", "--null-argument", count=True, help="Pass a NULL argument to a prepared statement.")
@click.option("-o", "--file-out", type=click.Path(dir_okay=False), help="File to write to. Defaults to stdout.")
@click.option(
    "-c",
    "--end-of-column",
    default=DEFAULT_END_OF_COLUMN,
    show_default=repr(DEFAULT_END_OF_COLUMN),
    help="Separator between columns.",
)
@click.option(
    "-l",
    "--end-of-line",
    default=DEFAULT_END_OF_LINE,
    show_default=repr(DEFAULT_END_OF_LINE),
    help="Separator between lines.",
)
@click.option("-n", "--no-end-of-line", is_flag=True, help="No separator on the last line.")
@click.option("--header", is_flag=True, help="Output a header on the first line.")
@click.option(
    "-x",
    "--encoding",
    default=DEFAULT_ENCODING.value,
    show_default=True,
    help="Encoding to use. One of 'none', 'base64', 'base64url', 'echo'.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Diagnostic log level.",
)
@click.option(
    "--log-format",
    type=click.Choice(["simple", "structured"]),
    default="simple",
    show_default=True,
    help="Diagnostic log format.",
)
@click.version_option(None, "-v", "--version", package_name="dbd", prog_name="dbd")
@click.argument("values", nargs=-1)
@click.pass_context
def dbd_command(
    ctx: "click.Context",
    escape: bool,
    table: bool,
    select: bool,
    query: bool,
    driver: Optional[str],
    params: Optional[str],
    argument: "tuple[str, ...]",
    file_argument: "tuple[str, ...]",
    null_argument: int,
    file_out: Optional[str],
    end_of_column: str,
    end_of_line: str,
    no_end_of_line: bool,
    header: bool,
    encoding: str,
    log_level: str,
    log_format: str,
    values: "tuple[str, ...]",
) -> None:
    """Database helper tool.

    Queries a SQL database with the formatting of the results controlled by
    the caller. VALUES are table names, queries or strings to escape,
    depending on the mode. Query arguments bind positionally to printf-style
    placeholders such as %s, %d or %pDb.
    """
    configure_logging(log_level, log_format)

    modes = [mode for mode, selected in zip(RunMode, (escape, table, select, query)) if selected]
    if not modes:
        msg = "One of --escape, --table, --select, or --query must be specified."
        raise DBDUsageError(msg, ctx)
    if len(modes) > 1:
        msg = "Only one of --escape, --table, --select, or --query may be specified."
        raise DBDUsageError(msg, ctx)

    console = Console(stderr=True)
    handles = FileHandleCache(stdin=get_binary_stream("stdin"))
    try:
        config = RunnerConfig(
            mode=modes[0],
            driver=driver,
            params=params,
            column_separator=end_of_column,
            line_separator=end_of_line,
            end_of_line=not no_end_of_line,
            header=header,
            encoding=Encoding.from_name(encoding),
            output=file_out,
        )
        sources = build_argument_sources(ctx, handles, argument, file_argument, null_argument)
        outcome = run_invocation(config, sources, values)
    except DBDError as e:
        console.print(f"[red]DBD: {escape_markup(str(e))}[/]", soft_wrap=True)
        ctx.exit(e.exit_code)
    finally:
        handles.close()

    if outcome is RunOutcome.NO_ROWS_AFFECTED:
        ctx.exit(EXIT_CALLER_ERROR)


def main(*args: Any, **kwargs: Any) -> Any:
    """Console script entry point."""
    return dbd_command.main(*args, prog_name="dbd", **kwargs)
