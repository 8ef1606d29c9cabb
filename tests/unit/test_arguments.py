"""Tests for argument sources and their resolution."""

import io
from pathlib import Path

import pytest

from dbd.arguments import (
    ArgumentKind,
    ArgumentResolver,
    ArgumentSource,
    ArgumentStream,
    FileHandleCache,
    ResolvedArgument,
)
from dbd.exceptions import ArgumentReadError


class FailingReader(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        raise OSError("device not ready")


def test_literal_is_idempotent() -> None:
    resolver = ArgumentResolver()
    source = ArgumentSource.literal("john")

    first = resolver.resolve(source)
    second = resolver.resolve(source)

    assert first == second
    assert first.data == b"john"
    assert first.length == 4
    assert not first.exhausted


def test_literal_keeps_non_ascii_bytes() -> None:
    resolved = ArgumentResolver().resolve(ArgumentSource.literal("café"))
    assert resolved.data == "café".encode()


def test_null_has_no_data() -> None:
    resolved = ArgumentResolver().resolve(ArgumentSource.null())
    assert resolved.is_null
    assert resolved.data is None
    assert resolved.length == 0


def test_file_is_read_completely(tmp_path: Path) -> None:
    payload = bytes(range(256)) * 40
    path = tmp_path / "payload.bin"
    path.write_bytes(payload)

    handles = FileHandleCache()
    try:
        resolved = ArgumentResolver().resolve(ArgumentSource.file(handles.open(str(path))))
    finally:
        handles.close()

    assert resolved.data == payload
    assert resolved.length == len(payload)
    assert resolved.exhausted


def test_file_second_resolution_sees_end_of_data(tmp_path: Path) -> None:
    path = tmp_path / "value.txt"
    path.write_bytes(b"hello")
    handles = FileHandleCache()
    source = ArgumentSource.file(handles.open(str(path)))
    resolver = ArgumentResolver()

    assert resolver.resolve(source).data == b"hello"
    again = resolver.resolve(source)
    assert again.data == b""
    assert again.exhausted
    handles.close()


def test_same_path_shares_one_stream(tmp_path: Path) -> None:
    path = tmp_path / "value.txt"
    path.write_bytes(b"shared")
    handles = FileHandleCache()

    first = ArgumentSource.file(handles.open(str(path)))
    second = ArgumentSource.file(handles.open(str(path)))
    assert first.stream is second.stream

    resolver = ArgumentResolver()
    assert resolver.resolve(first).data == b"shared"
    assert resolver.resolve(second).data == b""
    handles.close()


def test_stdin_marker_uses_given_stream() -> None:
    handles = FileHandleCache(stdin=io.BytesIO(b"from stdin"))
    stream = handles.open("-")
    assert "-" in handles
    assert ArgumentResolver().resolve(ArgumentSource.file(stream)).data == b"from stdin"
    handles.close()


def test_missing_file_raises_read_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.txt"
    with pytest.raises(ArgumentReadError) as exc_info:
        FileHandleCache().open(str(missing))
    assert exc_info.value.path == str(missing)
    assert isinstance(exc_info.value.cause, FileNotFoundError)


def test_read_failure_raises_read_error() -> None:
    stream = ArgumentStream(FailingReader(), "broken")  # type: ignore[arg-type]
    with pytest.raises(ArgumentReadError, match="device not ready"):
        ArgumentResolver().resolve(ArgumentSource.file(stream))


def test_source_invariants() -> None:
    stream = ArgumentStream(io.BytesIO(b""), "empty")
    with pytest.raises(ValueError):
        ArgumentSource(ArgumentKind.LITERAL)
    with pytest.raises(ValueError):
        ArgumentSource(ArgumentKind.FILE, literal_value="x", stream=stream)
    with pytest.raises(ValueError):
        ArgumentSource(ArgumentKind.NULL, literal_value="x")


def test_source_description() -> None:
    assert ArgumentSource.null().description == "NULL"
    assert ArgumentSource.literal("a").description == "'a'"
    assert ArgumentSource.file(ArgumentStream(io.BytesIO(), "in.txt")).description == "in.txt"


def test_cache_close_leaves_stdin_open() -> None:
    stdin = io.BytesIO(b"")
    handles = FileHandleCache(stdin=stdin)
    handles.open("-")
    handles.close()
    assert not stdin.closed


def test_resolved_argument_equality() -> None:
    assert ResolvedArgument(b"a") == ResolvedArgument(b"a")
    assert ResolvedArgument(b"a") != ResolvedArgument(b"a", exhausted=True)
