from dbd.adapters.psycopg.driver import PsycopgDriver, psycopg_parameter_config

__all__ = ("PsycopgDriver", "psycopg_parameter_config")
