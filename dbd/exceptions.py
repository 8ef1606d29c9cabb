from typing import Any, ClassVar, Optional

__all__ = (
    "ArgumentCountMismatchError",
    "ArgumentReadError",
    "ArgumentTypeError",
    "DBDError",
    "EncodingError",
    "ExecutionError",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "OutputError",
    "ParameterError",
    "UnsupportedEncodingError",
)

EXIT_CALLER_ERROR = 1
EXIT_FAILURE = 2


class DBDError(Exception):
    """Base exception class from which all dbd exceptions inherit."""

    detail: str
    exit_code: ClassVar[int] = EXIT_FAILURE

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``DBDError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(DBDError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a driver depends on a library that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install dbd[{install_package or package}]' to install dbd with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(DBDError):
    """Improper Configuration error.

    Raised when the driver or its connection parameters are missing or unknown.
    """

    exit_code = EXIT_CALLER_ERROR


# -- Parameter Errors --
class ParameterError(DBDError):
    """Base class for parameter-related errors."""

    sql: Optional[str]
    exit_code = EXIT_CALLER_ERROR

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ArgumentCountMismatchError(ParameterError):
    """Raised when the number of placeholders and supplied arguments disagree."""

    def __init__(self, expected: int, provided: int, sql: str) -> None:
        super().__init__(f"Database query '{sql}' expects {expected} arguments, {provided} provided.")
        self.expected = expected
        self.provided = provided
        self.sql = sql


class ArgumentTypeError(ParameterError):
    """Raised when an argument cannot be converted to its placeholder type."""


class ArgumentReadError(ParameterError):
    """Raised when a file backed argument cannot be opened or read."""

    exit_code = EXIT_FAILURE

    def __init__(self, path: str, cause: BaseException, sql: Optional[str] = None) -> None:
        message = f"Could not read argument '{path}': {cause}"
        if sql:
            message = f"Database query '{sql}' failed while reading '{path}': {cause}"
        super().__init__(message)
        self.path = path
        self.cause = cause
        self.sql = sql


# -- Execution Errors --
class ExecutionError(DBDError):
    """Driver reported failure during prepare, bind, execute or fetch."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None, driver: Optional[str] = None) -> None:
        detail_message = message
        using = f" (using {driver})" if driver else ""
        if sql:
            detail_message = f"Database query '{sql}' failed{using}: {message}"
        elif driver:
            detail_message = f"Database operation failed{using}: {message}"
        super().__init__(detail=detail_message)
        self.sql = sql
        self.driver = driver


# -- Output Errors --
class EncodingError(DBDError):
    """Encoding of an output value failed."""


class UnsupportedEncodingError(EncodingError):
    """The requested output encoding is not recognised."""

    exit_code = EXIT_CALLER_ERROR

    def __init__(self, name: str) -> None:
        super().__init__(f"Encoding '{name}' must be one of 'none', 'base64', 'base64url', 'echo'.")
        self.name = name


class OutputError(DBDError):
    """Writing to the output destination failed."""
