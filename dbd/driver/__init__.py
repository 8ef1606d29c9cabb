"""Driver adapter base classes and registry."""

from dbd.driver._common import DriverParameterConfig, ParameterStyle, ResultCursor, resolve_rowcount
from dbd.driver._sync import DriverAdapterBase
from dbd.driver.registry import DRIVERS, get_driver

__all__ = (
    "DRIVERS",
    "DriverAdapterBase",
    "DriverParameterConfig",
    "ParameterStyle",
    "ResultCursor",
    "get_driver",
    "resolve_rowcount",
)
