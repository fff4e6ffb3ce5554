"""
Sources of targets: explicit arguments or line-delimited standard input.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence, TextIO

from ..infrastructure.error_handler import NoTargetError


class TargetStream(ABC):
    """
    Forward-only sequence of targets, consumed at most once.

    ``advance`` returns the next target or None at end of stream. A read
    failure ends the stream early and is reported by ``error`` afterwards.
    """

    @abstractmethod
    def advance(self) -> Optional[str]:
        ...

    @property
    def error(self) -> Optional[BaseException]:
        return None

    def __iter__(self) -> Iterator[str]:
        while True:
            target = self.advance()
            if target is None:
                return
            yield target


class ArgumentStream(TargetStream):
    """Targets given on the command line."""

    def __init__(self, args: Sequence[str]):
        self._args = list(args)
        self._index = 0

    def advance(self) -> Optional[str]:
        if self._index >= len(self._args):
            return None
        target = self._args[self._index]
        self._index += 1
        return target


class StdinStream(TargetStream):
    """One target per line of a text reader, line ending removed."""

    def __init__(self, reader: TextIO):
        self._reader = reader
        self._error: Optional[BaseException] = None
        self._done = False

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def advance(self) -> Optional[str]:
        while not self._done:
            try:
                line = self._reader.readline()
            except (OSError, UnicodeDecodeError) as e:
                self._error = e
                self._done = True
                return None

            if not line:
                self._done = True
                return None

            return line.rstrip("\r\n")
        return None


def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


def open_target_stream(
    args: Sequence[str],
    stdin: Optional[TextIO] = None
) -> TargetStream:
    """
    Pick the target source.

    Explicit arguments win. Without them, targets are read from ``stdin``
    unless it is a terminal, in which case there is nothing to read.

    Raises:
        NoTargetError: If there are no arguments and stdin is a terminal
    """
    if args:
        return ArgumentStream(args)

    stdin = sys.stdin if stdin is None else stdin
    if _is_terminal(stdin):
        raise NoTargetError(
            "no target args specified. see `repoget get --help` for more details"
        )
    return StdinStream(stdin)


__all__ = [
    "TargetStream",
    "ArgumentStream",
    "StdinStream",
    "open_target_stream",
]
