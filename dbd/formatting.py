"""Cell encodings and delimited output."""

import base64
import os
from enum import Enum
from typing import IO, TYPE_CHECKING, Any, Final

from dbd.exceptions import EncodingError, OutputError, UnsupportedEncodingError

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ("DEFAULT_ENCODING", "Encoding", "ResultWriter", "encode_value", "escape_echo", "to_bytes")


class Encoding(str, Enum):
    """Transform applied to every header name and cell before it is written."""

    NONE = "none"
    ECHO = "echo"
    BASE64 = "base64"
    BASE64URL = "base64url"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: "str | Encoding") -> "Encoding":
        """Look up an encoding by name.

        Raises:
            UnsupportedEncodingError: If ``name`` is not a known encoding.

        Returns:
            The matching encoding.
        """
        try:
            return cls(name)
        except ValueError as e:
            raise UnsupportedEncodingError(str(name)) from e


DEFAULT_ENCODING: Final = Encoding.ECHO

_ECHO_ESCAPES: Final[dict[int, bytes]] = {
    0x07: b"\\a",
    0x08: b"\\b",
    0x0C: b"\\f",
    0x0A: b"\\n",
    0x0D: b"\\r",
    0x09: b"\\t",
    0x0B: b"\\v",
    0x5C: b"\\\\",
    0x22: b'\\"',
}


def escape_echo(data: bytes) -> bytes:
    """Escape ``data`` the way ``echo -e`` reads it back.

    Control characters get their C escape, quotes and backslashes are
    backslashed, and any other byte outside printable ASCII becomes
    ``\\xHH``.
    """
    escaped = bytearray()
    for byte in data:
        if byte in _ECHO_ESCAPES:
            escaped += _ECHO_ESCAPES[byte]
        elif 0x20 <= byte < 0x7F:
            escaped.append(byte)
        else:
            escaped += b"\\x%02x" % byte
    return bytes(escaped)


def encode_value(data: bytes, encoding: Encoding) -> bytes:
    """Apply ``encoding`` to one value.

    Args:
        data: Raw value bytes.
        encoding: The output encoding.

    Raises:
        EncodingError: If the transform fails.

    Returns:
        The encoded bytes.
    """
    try:
        if encoding is Encoding.NONE:
            return data
        if encoding is Encoding.ECHO:
            return escape_echo(data)
        if encoding is Encoding.BASE64:
            return base64.b64encode(data)
        if encoding is Encoding.BASE64URL:
            return base64.urlsafe_b64encode(data)
    except (TypeError, ValueError) as e:
        msg = f"Could not {encoding} escape data: {e}"
        raise EncodingError(msg) from e
    raise UnsupportedEncodingError(str(encoding))


def to_bytes(value: Any) -> bytes:
    """Render a database value as bytes. NULL renders as nothing."""
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    return str(value).encode("utf-8")


class ResultWriter:
    """Writes lines of separated values to a binary stream.

    The first line is written bare. Every later line, header or row, is
    preceded by the line separator, so results of several queries run on
    one writer form a single continuous stream.
    """

    __slots__ = ("column_separator", "encoding", "line_separator", "lines_written", "stream")

    def __init__(
        self,
        stream: "IO[bytes]",
        column_separator: str = "\t",
        line_separator: str = "\n",
        encoding: Encoding = DEFAULT_ENCODING,
    ) -> None:
        self.stream = stream
        self.column_separator = os.fsencode(column_separator)
        self.line_separator = os.fsencode(line_separator)
        self.encoding = encoding
        self.lines_written = 0

    def _write(self, data: bytes, what: str) -> None:
        try:
            self.stream.write(data)
        except OSError as e:
            msg = f"Failed while writing {what}: {e}"
            raise OutputError(msg) from e

    def write_line(self, values: "Iterable[bytes]") -> None:
        """Write already encoded values as one line."""
        if self.lines_written:
            self._write(self.line_separator, "end of line")
        for index, value in enumerate(values):
            if index:
                self._write(self.column_separator, "end of column")
            self._write(value, "entry")
        self.lines_written += 1

    def write_header(self, names: "Iterable[str]") -> None:
        self.write_line(encode_value(to_bytes(name), self.encoding) for name in names)

    def write_row(self, cells: "Iterable[Any]") -> None:
        self.write_line(encode_value(to_bytes(cell), self.encoding) for cell in cells)

    def finish(self, end_of_line: bool = True) -> None:
        """Terminate the output and flush it.

        Args:
            end_of_line: Write a trailing line separator.
        """
        if end_of_line:
            self._write(self.line_separator, "end of line")
        try:
            self.stream.flush()
        except OSError as e:
            msg = f"Failed while flushing output: {e}"
            raise OutputError(msg) from e
