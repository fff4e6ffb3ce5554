import io

import pytest

from repoget.core.input_stream import (
    ArgumentStream, StdinStream, open_target_stream
)
from repoget.infrastructure.error_handler import NoTargetError


class FakeTTY(io.StringIO):
    def isatty(self):
        return True


class UndecodableReader:
    def readline(self):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


def test_argument_stream_yields_in_order():
    stream = ArgumentStream(["a", "b"])
    assert stream.advance() == "a"
    assert stream.advance() == "b"
    assert stream.advance() is None
    assert stream.advance() is None
    assert stream.error is None


def test_argument_stream_empty():
    assert list(ArgumentStream([])) == []


def test_argument_stream_is_consumed_once():
    stream = ArgumentStream(["a", "b"])
    assert list(stream) == ["a", "b"]
    assert list(stream) == []


def test_stdin_stream_one_target_per_line():
    stream = StdinStream(io.StringIO("x/a\r\nx/b\nx/c"))
    assert list(stream) == ["x/a", "x/b", "x/c"]
    assert stream.error is None


def test_stdin_stream_keeps_blank_lines_as_targets():
    stream = StdinStream(io.StringIO("x/a\n\n  x/b  \n"))
    assert stream.advance() == "x/a"
    assert stream.advance() == ""
    assert stream.advance() == "  x/b  "
    assert stream.advance() is None


def test_stdin_stream_reports_read_error_at_end():
    stream = StdinStream(UndecodableReader())
    assert stream.advance() is None
    assert isinstance(stream.error, UnicodeDecodeError)
    assert stream.advance() is None


def test_open_prefers_arguments():
    stream = open_target_stream(["x/a"], stdin=FakeTTY())
    assert isinstance(stream, ArgumentStream)


def test_open_refuses_terminal_without_arguments():
    with pytest.raises(NoTargetError, match="no target args specified"):
        open_target_stream([], stdin=FakeTTY())


def test_open_reads_piped_stdin():
    stream = open_target_stream([], stdin=io.StringIO("x/a\n"))
    assert isinstance(stream, StdinStream)
    assert list(stream) == ["x/a"]
