from dbd.adapters.duckdb.driver import DuckDBDriver, duckdb_parameter_config

__all__ = ("DuckDBDriver", "duckdb_parameter_config")
