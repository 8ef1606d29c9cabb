"""Lookup of driver adapters by the names used on the command line."""

from typing import TYPE_CHECKING, Final

from dbd.exceptions import ImproperConfigurationError, MissingDependencyError
from dbd.utils.module_loader import import_string

if TYPE_CHECKING:
    from dbd.driver._sync import DriverAdapterBase

__all__ = ("DRIVERS", "get_driver")

# name -> (adapter class path, distribution providing the DB-API module)
DRIVERS: Final[dict[str, tuple[str, str]]] = {
    "sqlite3": ("dbd.adapters.sqlite.driver.SqliteDriver", "sqlite3"),
    "pgsql": ("dbd.adapters.psycopg.driver.PsycopgDriver", "psycopg"),
    "duckdb": ("dbd.adapters.duckdb.driver.DuckDBDriver", "duckdb"),
}


def get_driver(name: str) -> "type[DriverAdapterBase]":
    """Get the adapter class registered under ``name``.

    Args:
        name: Driver name, for example ``sqlite3`` or ``pgsql``.

    Raises:
        ImproperConfigurationError: If no driver is registered under ``name``.
        MissingDependencyError: If the driver's library is not installed.

    Returns:
        The adapter class.
    """
    try:
        dotted_path, package = DRIVERS[name]
    except KeyError as e:
        msg = f"No driver for '{name}'. Available drivers: {', '.join(sorted(DRIVERS))}."
        raise ImproperConfigurationError(msg) from e

    try:
        return import_string(dotted_path)  # type: ignore[no-any-return]
    except ImportError as e:
        raise MissingDependencyError(package=package) from e
