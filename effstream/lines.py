"""
Line-oriented IO.

The actual reading and writing is done by small collaborators: a
``LineReader`` reports the next line or ``None`` at end of input, a
``LineWriter`` writes one line and reports a closed output pipe as
``WriteOutcome.BROKEN_PIPE`` instead of raising. The stream producers and
sinks below call them once per element, inside the ``IO`` effect system.
"""

from __future__ import annotations

import ast
import errno
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TextIO, TypeVar

from effstream.effects.io import IO
from effstream.errors import StreamTypeError
from effstream.producers import reread
from effstream.transform import map, read
from effstream.types import Done, Emit, Left, Of, Right, Stream, Suspended

logger = logging.getLogger(__name__)

R = TypeVar("R")


class WriteOutcome(Enum):
    WRITTEN = "written"
    BROKEN_PIPE = "broken_pipe"


class LineReader(Protocol):
    def read_line(self) -> str | None:
        """Return the next line without its newline, or ``None`` at end of input."""
        ...


class LineWriter(Protocol):
    def write_line(self, text: str) -> WriteOutcome:
        """Write ``text`` followed by a newline."""
        ...


@dataclass
class HandleLineReader:
    """Reads lines from a text handle; ``None`` means ``sys.stdin`` at read time."""

    handle: TextIO | None = None

    def read_line(self) -> str | None:
        handle = self.handle if self.handle is not None else sys.stdin
        line = handle.readline()
        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        return line


@dataclass
class HandleLineWriter:
    """Writes lines to a text handle; ``None`` means ``sys.stdout`` at write time."""

    handle: TextIO | None = None

    def write_line(self, text: str) -> WriteOutcome:
        handle = self.handle if self.handle is not None else sys.stdout
        try:
            handle.write(f"{text}\n")
            handle.flush()
        except BrokenPipeError:
            return WriteOutcome.BROKEN_PIPE
        return WriteOutcome.WRITTEN


# ---------------------------------------------------------------------------
# producers
# ---------------------------------------------------------------------------


def from_reader(reader: LineReader) -> Stream[str, None]:
    """Stream lines from ``reader`` until it reports end of input."""

    return reread(IO, lambda source: IO.perform(source.read_line), reader)


def from_handle(handle: TextIO) -> Stream[str, None]:
    return from_reader(HandleLineReader(handle))


def stdin_lines() -> Stream[str, None]:
    """Stream lines from standard input."""

    return from_reader(HandleLineReader())


def read_lines(parser: Callable[[str], Any] = ast.literal_eval) -> Stream[Any, None]:
    """Stream parsed values from standard input, skipping lines that do not parse."""

    return read(IO, stdin_lines(), parser)


# ---------------------------------------------------------------------------
# sinks
# ---------------------------------------------------------------------------


def _write_lines(writer: LineWriter, stream: Stream[str, Any], on_broken_pipe: Callable[[], Any]) -> Any:
    def go(current: Stream[str, Any]) -> Any:
        if isinstance(current, Done):
            return IO.pure(Right(current.result))
        if isinstance(current, Suspended):
            return IO.map(current.action, Left)
        if isinstance(current, Emit):
            layer = current.layer
            if not isinstance(layer, Of):
                raise TypeError(f"line sinks expect element layers; got {type(layer).__name__}")
            text, rest = layer.head, layer.rest

            def written(outcome: WriteOutcome) -> Any:
                if outcome is WriteOutcome.BROKEN_PIPE:
                    return Right(on_broken_pipe())
                return Left(rest())

            return IO.map(IO.perform(lambda: writer.write_line(text)), written)
        raise StreamTypeError("line sink", current)

    return IO.tail_rec(go, stream)


def _raise_broken_pipe() -> Any:
    raise BrokenPipeError(errno.EPIPE, "output pipe closed")


def _stop_quietly() -> None:
    logger.debug("output pipe closed; ending stream")


def to_writer(writer: LineWriter, stream: Stream[str, R]) -> Any:
    """Write every line to ``writer``; an IO action of the stream's result."""

    return _write_lines(writer, stream, _raise_broken_pipe)


def to_handle(handle: TextIO, stream: Stream[str, R]) -> Any:
    return to_writer(HandleLineWriter(handle), stream)


def print_(stream: Stream[Any, R]) -> Any:
    """Write ``str`` of every element to standard output; an IO action of the result."""

    return to_writer(HandleLineWriter(), map(IO, str, stream))


def stdout_lines(stream: Stream[str, Any], writer: LineWriter | None = None) -> Any:
    """
    Write every line to standard output.

    A closed output pipe ends the stream quietly: the consumer going away is
    a normal way for a pipeline to finish. Any other write error propagates.
    """

    target = writer if writer is not None else HandleLineWriter()
    return IO.map(_write_lines(target, stream, _stop_quietly), lambda _: None)


def stdout_lines_with_result(stream: Stream[str, R], writer: LineWriter | None = None) -> Any:
    """Write every line to standard output and keep the result; a closed pipe raises."""

    target = writer if writer is not None else HandleLineWriter()
    return to_writer(target, stream)


__all__ = [
    "HandleLineReader",
    "HandleLineWriter",
    "LineReader",
    "LineWriter",
    "WriteOutcome",
    "from_handle",
    "from_reader",
    "print_",
    "read_lines",
    "stdin_lines",
    "stdout_lines",
    "stdout_lines_with_result",
    "to_handle",
    "to_writer",
]
