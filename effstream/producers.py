"""Producers: streams built from values, functions and actions."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from effstream.types import Done, Emit, Of, Stream, Suspended
from effstream.utils import require_callable

if TYPE_CHECKING:
    from effstream.effects.base import Effects

A = TypeVar("A")
S = TypeVar("S")

_UNIT: Done[None] = Done(None)


def repeat(value: A) -> Stream[A, Any]:
    """Repeat an element forever."""

    def loop() -> Stream[A, Any]:
        return Emit(Of(value, loop))

    return loop()


def repeat_m(fx: Effects, action: Any) -> Stream[Any, Any]:
    """Run an action forever, streaming its results."""

    def loop() -> Stream[Any, Any]:
        return Suspended(fx.map(action, lambda value: Emit(Of(value, loop))))

    return loop()


def replicate(count: int, value: A) -> Stream[A, None]:
    """Stream ``value`` ``count`` times."""

    def loop(remaining: int) -> Stream[A, None]:
        if remaining <= 0:
            return _UNIT
        return Emit(Of(value, lambda: loop(remaining - 1)))

    return loop(count)


def replicate_m(fx: Effects, count: int, action: Any) -> Stream[Any, None]:
    """Run ``action`` ``count`` times, streaming the results."""

    def loop(remaining: int) -> Stream[Any, None]:
        if remaining <= 0:
            return _UNIT
        return Suspended(
            fx.map(action, lambda value: Emit(Of(value, lambda: loop(remaining - 1))))
        )

    return loop(count)


def iterate(f: Callable[[A], A], seed: A) -> Stream[A, Any]:
    """Stream ``seed``, ``f(seed)``, ``f(f(seed))``, ... forever."""

    require_callable(f, "iterate function")

    def loop(current: A) -> Stream[A, Any]:
        return Emit(Of(current, lambda: loop(f(current))))

    return loop(seed)


def iterate_m(fx: Effects, f: Callable[[A], Any], start: Any) -> Stream[A, Any]:
    """Monadic ``iterate``: ``start`` is an action, ``f`` maps a value to the next action."""

    require_callable(f, "iterate_m function")

    def loop(action: Any) -> Stream[A, Any]:
        return Suspended(fx.map(action, lambda value: Emit(Of(value, lambda: loop(f(value))))))

    return loop(start)


def enum_from(start: Any) -> Stream[Any, Any]:
    """Count up from ``start`` by one, forever."""

    return iterate(lambda n: n + 1, start)


def enum_from_to(start: Any, stop: Any) -> Stream[Any, None]:
    """Count up from ``start`` by one while the value is ``<= stop``."""

    def loop(current: Any) -> Stream[Any, None]:
        if current > stop:
            return _UNIT
        return Emit(Of(current, lambda: loop(current + 1)))

    return loop(start)


def enum_from_step_n(start: Any, step: Any, count: int) -> Stream[Any, None]:
    """Stream ``count`` values starting at ``start`` spaced by ``step``."""

    def loop(current: Any, remaining: int) -> Stream[Any, None]:
        if remaining <= 0:
            return _UNIT
        return Emit(Of(current, lambda: loop(current + step, remaining - 1)))

    return loop(start, count)


def reread(fx: Effects, read: Callable[[S], Any], source: S) -> Stream[Any, None]:
    """
    Read from ``source`` until the read reports ``None``.

    ``read(source)`` returns an action whose value is the next item or
    ``None`` at the end. Useful for queues, cursors and similar devices.
    """

    require_callable(read, "reread function")

    def loop() -> Stream[Any, None]:
        return Suspended(fx.map(read(source), received))

    def received(item: Any) -> Stream[Any, None]:
        if item is None:
            return _UNIT
        return Emit(Of(item, loop))

    return loop()


__all__ = [
    "enum_from",
    "enum_from_step_n",
    "enum_from_to",
    "iterate",
    "iterate_m",
    "repeat",
    "repeat_m",
    "replicate",
    "replicate_m",
    "reread",
]
