"""
Sequence core: constructors, single-step inspection, unfolding and sequencing.

Everything else in effstream is written in terms of the case analysis these
functions perform on ``Done`` / ``Suspended`` / ``Emit``.
"""

from __future__ import annotations

import builtins
from collections.abc import Callable, Iterable, Sequence
from functools import lru_cache
from typing import TYPE_CHECKING, Any, TypeVar

from effstream.errors import StreamTypeError
from effstream.types import Done, Either, Emit, Layer, Left, Of, Right, Stream, Suspended
from effstream.utils import checked, require_callable

if TYPE_CHECKING:
    from effstream.effects.base import Effects

A = TypeVar("A")
R = TypeVar("R")
S = TypeVar("S")
U = TypeVar("U")

_UNIT: Done[None] = Done(None)


# ---------------------------------------------------------------------------
# constructors
# ---------------------------------------------------------------------------


def done(result: R = None) -> Stream[Any, R]:
    return Done(result)


def suspend(action: Any) -> Stream[Any, Any]:
    """Wrap an action whose value is the continuation stream."""

    return Suspended(action)


def yield_(value: A) -> Stream[A, None]:
    """A singleton stream."""

    return Emit(Of(value, lambda: _UNIT))


def cons(value: A, stream: Stream[A, R]) -> Stream[A, R]:
    """Prepend one element; ``cons(a, s)`` behaves as ``yield_(a)`` followed by ``s``."""

    if not isinstance(stream, Stream):
        raise StreamTypeError("cons tail", stream)
    return Emit(Of(value, lambda: stream))


def each(items: Iterable[A]) -> Stream[A, None]:
    """
    Stream the elements of a container.

    Sequences are indexed, so every traversal starts over from the first
    element. Other iterables are pulled one item at a time and memoized, so a
    second traversal sees the same items instead of an exhausted iterator.

    ``each`` takes no effect system, so it cannot suspend: the first item of
    an iterator is pulled when ``each`` is called, and every later item when
    the layer before it is forced. For an iterator whose pulls have side
    effects, use ``unfoldr`` with ``IO.perform`` so nothing is pulled until
    the stream is driven.
    """

    if isinstance(items, Sequence):
        size = len(items)

        def indexed(index: int) -> Stream[A, None]:
            if index >= size:
                return _UNIT
            return Emit(Of(items[index], lambda: indexed(index + 1)))

        return indexed(0)

    iterator = iter(items)

    def pull() -> Stream[A, None]:
        try:
            head = builtins.next(iterator)
        except StopIteration:
            return _UNIT
        return Emit(Of(head, lru_cache(maxsize=None)(pull)))

    return pull()


def effect(fx: Effects, action: Any) -> Stream[Any, Any]:
    """Lift an action into a stream with no elements whose result is the action's value."""

    return Suspended(fx.map(action, Done))


# ---------------------------------------------------------------------------
# sequencing
# ---------------------------------------------------------------------------


def then(fx: Effects, stream: Stream[A, R], f: Callable[[R], Stream[A, U]]) -> Stream[A, U]:
    """
    Continue ``stream`` with ``f(result)`` once it is done.

    All layers of both streams are kept, in the order they are encountered.
    """

    require_callable(f, "continuation")

    def loop(current: Stream[A, R]) -> Stream[A, U]:
        if isinstance(current, Done):
            result = current.result
            return checked("then continuation", lambda: f(result))
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            return Emit(current.layer.fmap(fx, loop))
        raise StreamTypeError("then", current)

    return loop(stream)


def append(fx: Effects, first: Stream[A, Any], second: Stream[A, R]) -> Stream[A, R]:
    """Run ``first`` to its end, discard its result and continue with ``second``."""

    return then(fx, first, lambda _: second)


def map_result(fx: Effects, f: Callable[[R], U], stream: Stream[A, R]) -> Stream[A, U]:
    """Rewrite the final result only; layers and effects are untouched."""

    require_callable(f, "mapper")
    return then(fx, stream, lambda result: Done(f(result)))


# ---------------------------------------------------------------------------
# single-step inspection
# ---------------------------------------------------------------------------


def inspect(fx: Effects, stream: Stream[Any, R]) -> Any:
    """
    Run suspended layers until the stream either ends or emits.

    Returns an action whose value is ``Left(result)`` or ``Right(layer)``.
    """

    def step(current: Stream[Any, R]) -> Any:
        if isinstance(current, Done):
            return fx.pure(Right(Left(current.result)))
        if isinstance(current, Emit):
            return fx.pure(Right(Right(current.layer)))
        if isinstance(current, Suspended):
            return fx.map(current.action, _continue)
        raise StreamTypeError("inspect", current)

    return fx.tail_rec(step, stream)


def next(fx: Effects, stream: Stream[A, R]) -> Any:
    """
    Peel one element off ``stream``.

    Returns an action whose value is ``Left(result)`` if the stream is
    exhausted, or ``Right((head, rest))`` otherwise. Calling this repeatedly is
    enough to feed any other consumer.
    """

    def unpack(outcome: Either[Layer[Any]]) -> Either[Any]:
        if isinstance(outcome, Left):
            return outcome
        layer = outcome.value
        if not isinstance(layer, Of):
            raise TypeError(f"next expects element layers; got {type(layer).__name__}")
        return Right(layer.lazily())

    return fx.map(inspect(fx, stream), unpack)


def uncons(fx: Effects, stream: Stream[A, Any]) -> Any:
    """Like ``next`` but drops the result: an action of ``(head, rest)`` or ``None``."""

    return fx.map(next(fx, stream), lambda outcome: outcome.either(lambda _: None, lambda pair: pair))


# ---------------------------------------------------------------------------
# unfolding
# ---------------------------------------------------------------------------


def unfold(fx: Effects, step: Callable[[S], Any], seed: S) -> Stream[Any, Any]:
    """
    Build a stream of any layer shape from a seed.

    ``step(seed)`` returns an action of ``Left(result)`` or ``Right(layer)``
    where the layer's continuation is the next seed.
    """

    require_callable(step, "unfold step")

    def loop(current: S) -> Stream[Any, Any]:
        return Suspended(fx.map(step(current), grow))

    def grow(outcome: Either[Layer[Any]]) -> Stream[Any, Any]:
        if isinstance(outcome, Left):
            return Done(outcome.value)
        return Emit(outcome.value.fmap(fx, loop))

    return loop(seed)


def unfoldr(fx: Effects, step: Callable[[S], Any], seed: S) -> Stream[Any, Any]:
    """
    Build an element stream from a seed.

    ``step(seed)`` returns an action of ``Left(result)`` to stop or
    ``Right((element, next_seed))`` to emit. This is the entry point for
    pulling from any external incremental source.
    """

    require_callable(step, "unfoldr step")

    def loop(current: S) -> Stream[Any, Any]:
        return Suspended(fx.map(step(current), grow))

    def grow(outcome: Either[tuple[Any, S]]) -> Stream[Any, Any]:
        if isinstance(outcome, Left):
            return Done(outcome.value)
        head, following = outcome.value
        return Emit(Of(head, lambda: loop(following)))

    return loop(seed)


def _continue(stream: Stream[Any, Any]) -> Left:
    return Left(stream)


__all__ = [
    "append",
    "cons",
    "done",
    "each",
    "effect",
    "inspect",
    "map_result",
    "next",
    "suspend",
    "then",
    "uncons",
    "unfold",
    "unfoldr",
    "yield_",
]
