"""Zipping two streams in lockstep."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from effstream.errors import StreamTypeError
from effstream.types import Done, Emit, Of, Stream, Suspended
from effstream.utils import require_callable

if TYPE_CHECKING:
    from effstream.effects.base import Effects

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
R = TypeVar("R")


def zip_with(
    fx: Effects,
    f: Callable[[A, B], C],
    left: Stream[A, R],
    right: Stream[B, R],
) -> Stream[C, R]:
    """
    Combine two streams element by element with ``f``.

    The zipped stream ends as soon as either side ends, with that side's
    result. At every step the left stream is inspected first: its effects run
    before the right stream's, and when both would end at the same step the
    left result wins.
    """

    require_callable(f, "zip function")

    def loop(first: Stream[A, R], second: Stream[B, R]) -> Stream[C, R]:
        if isinstance(first, Done):
            return first
        if isinstance(first, Suspended):
            return Suspended(fx.map(first.action, lambda following: loop(following, second)))
        if not isinstance(first, Emit):
            raise StreamTypeError("zip_with", first)
        if isinstance(second, Done):
            return second
        if isinstance(second, Suspended):
            return Suspended(fx.map(second.action, lambda following: loop(first, following)))
        if not isinstance(second, Emit):
            raise StreamTypeError("zip_with", second)
        a, b = first.layer, second.layer
        if not isinstance(a, Of) or not isinstance(b, Of):
            raise TypeError("zip_with expects element layers on both sides")
        return Emit(Of(f(a.head, b.head), lambda: loop(a.rest(), b.rest())))

    return loop(left, right)


def zip(fx: Effects, left: Stream[A, R], right: Stream[B, R]) -> Stream[tuple[A, B], R]:
    """Pair up the elements of two streams; see ``zip_with`` for termination."""

    return zip_with(fx, _pair, left, right)


def _pair(a: Any, b: Any) -> tuple[Any, Any]:
    return (a, b)


__all__ = ["zip", "zip_with"]
