from dbd.adapters.sqlite.driver import SqliteDriver, sqlite_parameter_config

__all__ = ("SqliteDriver", "sqlite_parameter_config")
