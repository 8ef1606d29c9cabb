"""dbd: bind command line arguments to SQL queries and stream delimited results."""

from dbd import exceptions
from dbd.__metadata__ import __version__
from dbd.arguments import ArgumentKind, ArgumentResolver, ArgumentSource, FileHandleCache, ResolvedArgument
from dbd.exceptions import (
    ArgumentCountMismatchError,
    ArgumentReadError,
    ArgumentTypeError,
    DBDError,
    ExecutionError,
    ImproperConfigurationError,
    UnsupportedEncodingError,
)
from dbd.parameters import ParameterBinder, ParameterType, ParameterVector, PlaceholderScanner, scan_placeholders

__all__ = (
    "ArgumentCountMismatchError",
    "ArgumentKind",
    "ArgumentReadError",
    "ArgumentResolver",
    "ArgumentSource",
    "ArgumentTypeError",
    "DBDError",
    "ExecutionError",
    "FileHandleCache",
    "ImproperConfigurationError",
    "ParameterBinder",
    "ParameterType",
    "ParameterVector",
    "PlaceholderScanner",
    "ResolvedArgument",
    "UnsupportedEncodingError",
    "__version__",
    "exceptions",
    "scan_placeholders",
)
