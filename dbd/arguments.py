"""Argument sources and their resolution into bytes.

An argument is given on the command line as a literal value, as a file
(``-`` for standard input) or as an explicit NULL. Literals resolve to the
same bytes every time. Files are streams: they are read to the end once,
and resolving them again only sees what is left, which is normally
nothing.
"""

import os
import sys
from enum import Enum
from typing import IO, TYPE_CHECKING, Final, Optional

from dbd.exceptions import ArgumentReadError
from dbd.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = (
    "STDIN_MARKER",
    "ArgumentKind",
    "ArgumentResolver",
    "ArgumentSource",
    "ArgumentStream",
    "FileHandleCache",
    "ResolvedArgument",
)

logger = get_logger("arguments")

STDIN_MARKER: Final = "-"
INITIAL_READ_SIZE: Final = 1024


class ArgumentKind(str, Enum):
    """Where an argument value comes from."""

    LITERAL = "literal"
    FILE = "file"
    NULL = "null"


class ArgumentStream:
    """Single consumption view over an opened binary handle.

    Several arguments naming the same path share one stream, so the second
    of them observes only the bytes the first left unread.
    """

    __slots__ = ("_handle", "_owned", "exhausted", "path")

    def __init__(self, handle: "IO[bytes]", path: str, owned: bool = True) -> None:
        self._handle = handle
        self._owned = owned
        self.path = path
        self.exhausted = False

    def read_all(self) -> bytes:
        """Read the stream to its end.

        The read size starts small and doubles each time a read fills it.

        Raises:
            ArgumentReadError: If the underlying read fails.

        Returns:
            Every byte left in the stream.
        """
        buffer = bytearray()
        size = INITIAL_READ_SIZE
        try:
            while True:
                chunk = self._handle.read(size)
                if not chunk:
                    break
                buffer += chunk
                if len(chunk) == size:
                    size *= 2
        except OSError as e:
            raise ArgumentReadError(self.path, e) from e
        self.exhausted = True
        return bytes(buffer)

    def close(self) -> None:
        if self._owned:
            self._handle.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, exhausted={self.exhausted!r})"


class FileHandleCache:
    """Path to stream mapping owned by one invocation.

    Files are opened on first reference and stay open until :meth:`close`.
    """

    def __init__(self, stdin: "Optional[IO[bytes]]" = None) -> None:
        self._stdin = stdin
        self._streams: dict[str, ArgumentStream] = {}

    def open(self, path: str) -> ArgumentStream:
        """Return the shared stream for ``path``, opening it if needed.

        Args:
            path: File path, or ``-`` for standard input.

        Raises:
            ArgumentReadError: If the file cannot be opened.

        Returns:
            The stream shared by every argument naming ``path``.
        """
        if path in self._streams:
            return self._streams[path]

        if path == STDIN_MARKER:
            stream = ArgumentStream(self._stdin or sys.stdin.buffer, path, owned=False)
        else:
            try:
                handle = open(path, "rb")  # noqa: SIM115
            except OSError as e:
                raise ArgumentReadError(path, e) from e
            stream = ArgumentStream(handle, path)
            logger.debug("Opened argument file %s", path)

        self._streams[path] = stream
        return stream

    def __contains__(self, path: object) -> bool:
        return path in self._streams

    def __iter__(self) -> "Iterator[ArgumentStream]":
        return iter(self._streams.values())

    def close(self) -> None:
        for stream in self._streams.values():
            stream.close()
        self._streams.clear()


class ArgumentSource:
    """One caller supplied parameter, in command line order."""

    __slots__ = ("kind", "literal_value", "stream")

    def __init__(
        self, kind: ArgumentKind, literal_value: Optional[str] = None, stream: Optional[ArgumentStream] = None
    ) -> None:
        if kind is ArgumentKind.LITERAL and (literal_value is None or stream is not None):
            msg = "A literal argument needs a value and no stream"
            raise ValueError(msg)
        if kind is ArgumentKind.FILE and (stream is None or literal_value is not None):
            msg = "A file argument needs a stream and no value"
            raise ValueError(msg)
        if kind is ArgumentKind.NULL and (stream is not None or literal_value is not None):
            msg = "A NULL argument carries neither value nor stream"
            raise ValueError(msg)
        self.kind = kind
        self.literal_value = literal_value
        self.stream = stream

    @classmethod
    def literal(cls, value: str) -> "ArgumentSource":
        return cls(ArgumentKind.LITERAL, literal_value=value)

    @classmethod
    def file(cls, stream: ArgumentStream) -> "ArgumentSource":
        return cls(ArgumentKind.FILE, stream=stream)

    @classmethod
    def null(cls) -> "ArgumentSource":
        return cls(ArgumentKind.NULL)

    @property
    def description(self) -> str:
        """Short text naming the source in diagnostics."""
        if self.kind is ArgumentKind.FILE and self.stream is not None:
            return self.stream.path
        if self.kind is ArgumentKind.LITERAL:
            return repr(self.literal_value)
        return "NULL"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, source={self.description})"


class ResolvedArgument:
    """Bytes produced from an argument source."""

    __slots__ = ("data", "exhausted")

    def __init__(self, data: Optional[bytes], exhausted: bool = False) -> None:
        self.data = data
        self.exhausted = exhausted

    @property
    def length(self) -> int:
        return 0 if self.data is None else len(self.data)

    @property
    def is_null(self) -> bool:
        return self.data is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.data == other.data and self.exhausted == other.exhausted

    def __hash__(self) -> int:
        return hash((self.data, self.exhausted))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(length={self.length!r}, exhausted={self.exhausted!r})"


class ArgumentResolver:
    """Turns argument sources into resolved bytes."""

    __slots__ = ()

    def resolve(self, source: ArgumentSource) -> ResolvedArgument:
        """Resolve one argument source.

        Args:
            source: The source to resolve.

        Raises:
            ArgumentReadError: If a file backed source cannot be read.

        Returns:
            The resolved argument. Streams come back marked ``exhausted``.
        """
        if source.kind is ArgumentKind.LITERAL:
            return ResolvedArgument(os.fsencode(source.literal_value or ""))
        if source.kind is ArgumentKind.NULL:
            return ResolvedArgument(None)

        stream = source.stream
        if stream is None:  # pragma: no cover
            msg = "File argument without a stream"
            raise ValueError(msg)
        was_exhausted = stream.exhausted
        data = stream.read_all()
        if was_exhausted:
            logger.debug("Argument %s was already consumed, %d bytes remained", stream.path, len(data))
        return ResolvedArgument(data, exhausted=True)
