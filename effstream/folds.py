"""
Folds and consumers.

Every consumer drives its stream with ``Effects.tail_rec`` and walks runs of
pure element layers in a plain loop, so neither the accumulator nor the
Python stack grows with the length of the stream. The ``*_with_result``
variants pair the folded value with the stream's own result; the others
discard it.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from effstream.effects.identity import IDENTITY
from effstream.errors import StreamTypeError
from effstream.types import Done, Emit, Left, Of, Right, Stream, Suspended
from effstream.utils import require_callable

if TYPE_CHECKING:
    from effstream.effects.base import Effects

A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")
X = TypeVar("X")


def _element(stream: Emit[A, Any], where: str) -> Of[A]:
    layer = stream.layer
    if not isinstance(layer, Of):
        raise TypeError(f"{where} expects element layers; got {type(layer).__name__}")
    return layer


def _identity(value: A) -> A:
    return value


def _fold(
    fx: Effects,
    step: Callable[[X, A], X],
    begin: X,
    finish: Callable[[X], B],
    stream: Stream[A, Any],
    keep_result: bool,
) -> Any:
    require_callable(step, "fold step")
    require_callable(finish, "fold finish")

    def go(state: tuple[Stream[A, Any], X]) -> Any:
        current, acc = state
        while True:
            if isinstance(current, Done):
                folded = finish(acc)
                return fx.pure(Right((folded, current.result) if keep_result else folded))
            if isinstance(current, Suspended):
                held = acc
                return fx.map(current.action, lambda following: Left((following, held)))
            if not isinstance(current, Emit):
                raise StreamTypeError("fold", current)
            layer = _element(current, "fold")
            acc = step(acc, layer.head)
            current = layer.rest()

    return fx.tail_rec(go, (stream, begin))


def fold(
    fx: Effects,
    step: Callable[[X, A], X],
    begin: X,
    finish: Callable[[X], B],
    stream: Stream[A, Any],
) -> Any:
    """Strict left fold; an action of ``finish(accumulator)``."""

    return _fold(fx, step, begin, finish, stream, keep_result=False)


def fold_with_result(
    fx: Effects,
    step: Callable[[X, A], X],
    begin: X,
    finish: Callable[[X], B],
    stream: Stream[A, R],
) -> Any:
    """Strict left fold; an action of ``(finish(accumulator), result)``."""

    return _fold(fx, step, begin, finish, stream, keep_result=True)


def _fold_m(
    fx: Effects,
    step: Callable[[X, A], Any],
    begin: Any,
    finish: Callable[[X], Any],
    stream: Stream[A, Any],
    keep_result: bool,
) -> Any:
    require_callable(step, "fold_m step")
    require_callable(finish, "fold_m finish")

    def go(state: tuple[Stream[A, Any], X]) -> Any:
        current, acc = state
        if isinstance(current, Done):
            result = current.result
            if keep_result:
                return fx.map(finish(acc), lambda folded: Right((folded, result)))
            return fx.map(finish(acc), Right)
        if isinstance(current, Suspended):
            return fx.map(current.action, lambda following: Left((following, acc)))
        if isinstance(current, Emit):
            layer = _element(current, "fold_m")
            rest = layer.rest
            return fx.map(step(acc, layer.head), lambda updated: Left((rest(), updated)))
        raise StreamTypeError("fold_m", current)

    return fx.bind(begin, lambda acc: fx.tail_rec(go, (stream, acc)))


def fold_m(
    fx: Effects,
    step: Callable[[X, A], Any],
    begin: Any,
    finish: Callable[[X], Any],
    stream: Stream[A, Any],
) -> Any:
    """Strict monadic left fold: ``begin``, ``step`` and ``finish`` all return actions."""

    return _fold_m(fx, step, begin, finish, stream, keep_result=False)


def fold_m_with_result(
    fx: Effects,
    step: Callable[[X, A], Any],
    begin: Any,
    finish: Callable[[X], Any],
    stream: Stream[A, R],
) -> Any:
    """Strict monadic left fold that also keeps the stream's result."""

    return _fold_m(fx, step, begin, finish, stream, keep_result=True)


def sum(fx: Effects, stream: Stream[Any, Any]) -> Any:
    return fold(fx, operator.add, 0, _identity, stream)


def sum_with_result(fx: Effects, stream: Stream[Any, R]) -> Any:
    return fold_with_result(fx, operator.add, 0, _identity, stream)


def product(fx: Effects, stream: Stream[Any, Any]) -> Any:
    return fold(fx, operator.mul, 1, _identity, stream)


def product_with_result(fx: Effects, stream: Stream[Any, R]) -> Any:
    return fold_with_result(fx, operator.mul, 1, _identity, stream)


# Elements are collected as nested (head, previous) cells so that a rerun of
# the same action never shares a mutable list with an earlier run.
def _push(cells: Any, head: Any) -> tuple[Any, Any]:
    return (head, cells)


def _unwind(cells: Any) -> list[Any]:
    items: list[Any] = []
    while cells is not None:
        head, cells = cells
        items.append(head)
    items.reverse()
    return items


def to_list_m(fx: Effects, stream: Stream[A, Any]) -> Any:
    """Collect every element; an action of a list. Only for finite streams."""

    return fold(fx, _push, None, _unwind, stream)


def to_list_m_with_result(fx: Effects, stream: Stream[A, R]) -> Any:
    """Collect every element; an action of ``(list, result)``."""

    return fold_with_result(fx, _push, None, _unwind, stream)


def to_list(stream: Stream[A, Any]) -> list[A]:
    """Collect the elements of a pure stream directly into a list."""

    return IDENTITY.run(to_list_m(IDENTITY, stream))


def foldr_m(fx: Effects, step: Callable[[A, Callable[[], Any]], Any], stream: Stream[A, R]) -> Any:
    """
    Right fold.

    ``step(element, rest)`` returns an action; ``rest()`` builds the action
    for the remainder of the fold. Calling ``rest()`` from inside a bind keeps
    the fold lazy and stack-safe; calling it eagerly walks the whole stream
    first.
    """

    require_callable(step, "foldr_m step")

    def loop(current: Stream[A, R]) -> Any:
        if isinstance(current, Done):
            return fx.pure(current.result)
        if isinstance(current, Suspended):
            return fx.bind(current.action, loop)
        if isinstance(current, Emit):
            layer = _element(current, "foldr_m")
            rest = layer.rest
            return step(layer.head, lambda: loop(rest()))
        raise StreamTypeError("foldr_m", current)

    return loop(stream)


def drain(fx: Effects, stream: Stream[Any, R]) -> Any:
    """Run all of the stream's effects, ignore its elements; an action of the result."""

    def go(current: Stream[Any, R]) -> Any:
        while True:
            if isinstance(current, Done):
                return fx.pure(Right(current.result))
            if isinstance(current, Suspended):
                return fx.map(current.action, Left)
            if not isinstance(current, Emit):
                raise StreamTypeError("drain", current)
            current = _element(current, "drain").rest()

    return fx.tail_rec(go, stream)


def map_m_(fx: Effects, f: Callable[[A], Any], stream: Stream[A, R]) -> Any:
    """Run the action ``f(element)`` for every element; an action of the result."""

    require_callable(f, "map_m_ function")

    def go(current: Stream[A, R]) -> Any:
        if isinstance(current, Done):
            return fx.pure(Right(current.result))
        if isinstance(current, Suspended):
            return fx.map(current.action, Left)
        if isinstance(current, Emit):
            layer = _element(current, "map_m_")
            rest = layer.rest
            return fx.map(f(layer.head), lambda _: Left(rest()))
        raise StreamTypeError("map_m_", current)

    return fx.tail_rec(go, stream)


__all__ = [
    "drain",
    "fold",
    "fold_m",
    "fold_m_with_result",
    "fold_with_result",
    "foldr_m",
    "map_m_",
    "product",
    "product_with_result",
    "sum",
    "sum_with_result",
    "to_list",
    "to_list_m",
    "to_list_m_with_result",
]
