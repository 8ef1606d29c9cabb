"""Invocation settings."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Optional

from dbd.exceptions import ImproperConfigurationError
from dbd.formatting import DEFAULT_ENCODING, Encoding

__all__ = (
    "DEFAULT_END_OF_COLUMN",
    "DEFAULT_END_OF_LINE",
    "DRIVER_ENV",
    "PARAMS_ENV",
    "RunMode",
    "RunnerConfig",
)

DRIVER_ENV: Final = "DBD_DRIVER"
PARAMS_ENV: Final = "DBD_PARAMS"
DEFAULT_END_OF_COLUMN: Final = "\t"
DEFAULT_END_OF_LINE: Final = "\n"


class RunMode(str, Enum):
    """What the positional values of an invocation are."""

    ESCAPE = "escape"
    TABLE = "table"
    SELECT = "select"
    QUERY = "query"

    def __str__(self) -> str:
        return self.value


@dataclass
class RunnerConfig:
    """Settings for one invocation of the runner."""

    mode: RunMode
    driver: Optional[str] = None
    params: Optional[str] = None
    column_separator: str = DEFAULT_END_OF_COLUMN
    line_separator: str = DEFAULT_END_OF_LINE
    end_of_line: bool = True
    header: bool = False
    encoding: Encoding = field(default=DEFAULT_ENCODING)
    output: Optional[str] = None

    def __post_init__(self) -> None:
        self.mode = RunMode(self.mode)
        self.encoding = Encoding.from_name(self.encoding)

    def validate(self) -> None:
        """Check the connection settings before anything is opened.

        Raises:
            ImproperConfigurationError: If the driver or its parameters are missing.
        """
        if not self.driver:
            msg = f"--driver must be specified, or set in {DRIVER_ENV}."
            raise ImproperConfigurationError(msg)
        if self.params is None:
            msg = f"--params must be specified, or set in {PARAMS_ENV}."
            raise ImproperConfigurationError(msg)
