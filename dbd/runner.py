"""Execution modes: escape, mutation and selection."""

import logging
import os
from enum import Enum
from typing import TYPE_CHECKING, Optional

from dbd.config import RunMode
from dbd.exceptions import ImproperConfigurationError
from dbd.parameters.binder import ParameterBinder
from dbd.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dbd.arguments import ArgumentSource
    from dbd.config import RunnerConfig
    from dbd.driver import DriverAdapterBase
    from dbd.formatting import ResultWriter

__all__ = ("TABLE_QUERY", "QueryRunner", "RunOutcome")

logger = get_logger("runner")

TABLE_QUERY = "select * from {table}"


class RunOutcome(str, Enum):
    """Non-failing results of a run."""

    SUCCESS = "success"
    NO_ROWS_AFFECTED = "no_rows_affected"


class QueryRunner:
    """Runs one invocation against an open driver.

    Every failure propagates and ends the run; nothing is retried and no
    query is skipped.
    """

    def __init__(
        self,
        config: "RunnerConfig",
        driver: "DriverAdapterBase",
        writer: "ResultWriter",
        sources: "Optional[Sequence[ArgumentSource]]" = None,
        binder: "Optional[ParameterBinder]" = None,
    ) -> None:
        self.config = config
        self.driver = driver
        self.writer = writer
        self.sources = list(sources or ())
        self.binder = binder or ParameterBinder()

    def run(self, values: "Sequence[str]") -> RunOutcome:
        """Run the configured mode over the positional values.

        Args:
            values: Escape inputs, table names or queries, depending on the mode.

        Returns:
            The outcome of the run.
        """
        mode = self.config.mode
        if mode is RunMode.ESCAPE:
            return self.run_escape(values)
        if mode is RunMode.QUERY:
            return self.run_query(values)
        return self.run_select(values, table=mode is RunMode.TABLE)

    def run_escape(self, values: "Sequence[str]") -> RunOutcome:
        """Escape each value with the driver and write them as one line."""
        escaped = [os.fsencode(self.driver.escape(value)) for value in values]
        self.writer.write_line(escaped)
        self.writer.finish(self.config.end_of_line)
        return RunOutcome.SUCCESS

    def run_query(self, queries: "Sequence[str]") -> RunOutcome:
        """Run a single modifying query and write the affected row count.

        Raises:
            ImproperConfigurationError: Unless exactly one query is given.

        Returns:
            ``NO_ROWS_AFFECTED`` when the query changed nothing.
        """
        if len(queries) != 1:
            msg = "One query needs to be specified."
            raise ImproperConfigurationError(msg)

        sql = queries[0]
        vector = self.binder.bind(sql, self.sources)
        rows = self.driver.execute(sql, vector)
        log_with_context(logger, logging.DEBUG, "Query finished", sql=sql, rows=rows)

        self.writer.write_line([str(rows).encode("ascii")])
        self.writer.finish(self.config.end_of_line)
        return RunOutcome.SUCCESS if rows else RunOutcome.NO_ROWS_AFFECTED

    def run_select(self, queries: "Sequence[str]", table: bool = False) -> RunOutcome:
        """Run selections one after the other and stream their rows.

        Args:
            queries: Queries, or table names when ``table`` is set.
            table: Select every row of each named table.

        Returns:
            ``SUCCESS``.
        """
        for value in queries:
            sql = TABLE_QUERY.format(table=self.driver.escape(value)) if table else value
            vector = self.binder.bind(sql, self.sources)
            rows = 0
            with self.driver.select(sql, vector) as cursor:
                if self.config.header:
                    self.writer.write_header(cursor.column_names)
                for row in cursor:
                    self.writer.write_row(row)
                    rows += 1
            log_with_context(logger, logging.DEBUG, "Selection finished", sql=sql, rows=rows)

        self.writer.finish(self.config.end_of_line)
        return RunOutcome.SUCCESS

