"""
Stream transformers.

Each transformer is a small loop over the three stream states. Layers are
re-emitted with a deferred continuation, suspended layers are re-suspended
with the loop mapped over their action, and layers that produce no output
(rejected by ``filter``, skipped by ``drop``, ...) are skipped in a ``while``
loop so long runs of them do not grow the Python stack.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from effstream.core import each, then
from effstream.errors import StreamTypeError
from effstream.types import Done, Emit, Of, Stream, Suspended
from effstream.utils import checked, require_callable

if TYPE_CHECKING:
    from effstream.effects.base import Effects

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")
X = TypeVar("X")

_UNIT: Done[None] = Done(None)


def _end(_: Any) -> Done[None]:
    return _UNIT


def _element(stream: Emit[A, Any], where: str) -> Of[A]:
    layer = stream.layer
    if not isinstance(layer, Of):
        raise TypeError(f"{where} expects element layers; got {type(layer).__name__}")
    return layer


def map(fx: Effects, f: Callable[[A], B], stream: Stream[A, R]) -> Stream[B, R]:
    """Apply ``f`` to every element."""

    require_callable(f, "mapper")

    def loop(current: Stream[A, R]) -> Stream[B, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            layer = _element(current, "map")
            rest = layer.rest
            return Emit(Of(f(layer.head), lambda: loop(rest())))
        raise StreamTypeError("map", current)

    return loop(stream)


def map_m(fx: Effects, f: Callable[[A], Any], stream: Stream[A, R]) -> Stream[Any, R]:
    """Replace every element with the value of the action ``f(element)``."""

    require_callable(f, "map_m function")

    def loop(current: Stream[A, R]) -> Stream[Any, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            layer = _element(current, "map_m")
            rest = layer.rest
            return Suspended(fx.map(f(layer.head), lambda value: Emit(Of(value, lambda: loop(rest())))))
        raise StreamTypeError("map_m", current)

    return loop(stream)


def sequence(fx: Effects, stream: Stream[Any, R]) -> Stream[Any, R]:
    """
    Run a stream of actions, streaming their values.

    Each element's action runs when the element is reached, interleaved with
    the stream's own effects; nothing is accumulated.
    """

    return map_m(fx, lambda action: action, stream)


def filter(fx: Effects, predicate: Callable[[A], bool], stream: Stream[A, R]) -> Stream[A, R]:
    """Drop the elements that fail ``predicate``."""

    require_callable(predicate, "predicate")

    def loop(current: Stream[A, R]) -> Stream[A, R]:
        while True:
            if isinstance(current, Done):
                return current
            if isinstance(current, Suspended):
                return Suspended(fx.map(current.action, loop))
            if not isinstance(current, Emit):
                raise StreamTypeError("filter", current)
            layer = _element(current, "filter")
            if predicate(layer.head):
                rest = layer.rest
                return Emit(Of(layer.head, lambda: loop(rest())))
            current = layer.rest()

    return loop(stream)


def filter_m(fx: Effects, predicate: Callable[[A], Any], stream: Stream[A, R]) -> Stream[A, R]:
    """Drop the elements for which the action ``predicate(element)`` yields a falsy value."""

    require_callable(predicate, "predicate")

    def loop(current: Stream[A, R]) -> Stream[A, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            layer = _element(current, "filter_m")
            head, rest = layer.head, layer.rest

            def decide(keep: Any) -> Stream[A, R]:
                if keep:
                    return Emit(Of(head, lambda: loop(rest())))
                return loop(rest())

            return Suspended(fx.map(predicate(head), decide))
        raise StreamTypeError("filter_m", current)

    return loop(stream)


def for_(fx: Effects, stream: Stream[A, R], body: Callable[[A], Stream[Any, Any]]) -> Stream[Any, R]:
    """
    Replace every element with the stream ``body(element)``.

    The sub-streams may use any layer shape; their results are discarded and
    the outer result is kept.
    """

    require_callable(body, "for_ body")

    def loop(current: Stream[A, R]) -> Stream[Any, R]:
        while True:
            if isinstance(current, Done):
                return current
            if isinstance(current, Suspended):
                return Suspended(fx.map(current.action, loop))
            if not isinstance(current, Emit):
                raise StreamTypeError("for_", current)
            layer = _element(current, "for_")
            head, rest = layer.head, layer.rest
            inner = checked("for_ body", lambda: body(head))
            if isinstance(inner, Done):
                current = rest()
                continue
            return then(fx, inner, lambda _: loop(rest()))

    return loop(stream)


def chain(fx: Effects, f: Callable[[A], Any], stream: Stream[A, R]) -> Stream[A, R]:
    """Run the action ``f(element)`` before passing each element on unchanged."""

    require_callable(f, "chain function")

    def loop(current: Stream[A, R]) -> Stream[A, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            layer = _element(current, "chain")
            head, rest = layer.head, layer.rest
            return Suspended(fx.map(f(head), lambda _: Emit(Of(head, lambda: loop(rest())))))
        raise StreamTypeError("chain", current)

    return loop(stream)


def concat(fx: Effects, stream: Stream[Iterable[A], R]) -> Stream[A, R]:
    """Flatten a stream of finite containers into a stream of their elements."""

    return for_(fx, stream, each)


def map_foldable(fx: Effects, f: Callable[[A], Iterable[B]], stream: Stream[A, R]) -> Stream[B, R]:
    """Replace every element with the elements of the container ``f(element)``."""

    require_callable(f, "map_foldable function")
    return for_(fx, stream, lambda head: each(f(head)))


def read(
    fx: Effects,
    stream: Stream[str, R],
    parser: Callable[[str], Any] = ast.literal_eval,
) -> Stream[Any, R]:
    """
    Parse every string with ``parser``.

    Strings the parser rejects (``ValueError``, ``TypeError`` or
    ``SyntaxError``) are skipped; this is the intended policy, not an error.
    """

    require_callable(parser, "parser")

    def parse(text: str) -> Stream[Any, None]:
        try:
            value = parser(text)
        except (ValueError, TypeError, SyntaxError) as exc:
            logger.debug("read: skipping unparseable element %r (%s)", text, exc)
            return _UNIT
        return Emit(Of(value, lambda: _UNIT))

    return for_(fx, stream, parse)


def show(fx: Effects, stream: Stream[Any, R]) -> Stream[str, R]:
    """Render every element with ``repr``."""

    return map(fx, repr, stream)


def scan(
    fx: Effects,
    step: Callable[[X, A], X],
    begin: X,
    finish: Callable[[X], B],
    stream: Stream[A, R],
) -> Stream[B, R]:
    """
    Strict left scan.

    Emits ``finish(begin)`` first and then ``finish`` of every successive
    accumulator: ``N`` inputs give ``N + 1`` outputs.
    """

    require_callable(step, "scan step")
    require_callable(finish, "scan finish")

    def emit(acc: X, pending: Callable[[], Stream[A, R]]) -> Stream[B, R]:
        return Emit(Of(finish(acc), lambda: advance(acc, pending())))

    def advance(acc: X, current: Stream[A, R]) -> Stream[B, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, lambda following: advance(acc, following)))
        if isinstance(current, Emit):
            layer = _element(current, "scan")
            return emit(step(acc, layer.head), layer.rest)
        raise StreamTypeError("scan", current)

    return emit(begin, lambda: stream)


def scan_m(
    fx: Effects,
    step: Callable[[X, A], Any],
    begin: Any,
    finish: Callable[[X], Any],
    stream: Stream[A, R],
) -> Stream[Any, R]:
    """
    Strict monadic left scan.

    ``begin`` is an action producing the first accumulator, ``step`` and
    ``finish`` return actions. The effects of ``step`` and ``finish`` are
    interleaved with the stream's own effects in order.
    """

    require_callable(step, "scan_m step")
    require_callable(finish, "scan_m finish")

    def emit(acc: X, pending: Callable[[], Stream[A, R]]) -> Stream[Any, R]:
        return Suspended(
            fx.map(finish(acc), lambda value: Emit(Of(value, lambda: advance(acc, pending()))))
        )

    def advance(acc: X, current: Stream[A, R]) -> Stream[Any, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, lambda following: advance(acc, following)))
        if isinstance(current, Emit):
            layer = _element(current, "scan_m")
            rest = layer.rest
            return Suspended(fx.map(step(acc, layer.head), lambda updated: emit(updated, rest)))
        raise StreamTypeError("scan_m", current)

    return Suspended(fx.map(begin, lambda acc: emit(acc, lambda: stream)))


def take(fx: Effects, count: int, stream: Stream[Any, Any]) -> Stream[Any, None]:
    """
    End the stream after ``count`` layers of any shape. Nothing past the
    last taken layer is forced.

    The original result is lost; ``split_at`` keeps it.
    """

    def loop(remaining: int, current: Stream[Any, Any]) -> Stream[Any, None]:
        if remaining <= 0:
            return _UNIT
        if isinstance(current, Done):
            return _UNIT
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, lambda following: loop(remaining, following)))
        if isinstance(current, Emit):
            if remaining == 1:
                return Emit(current.layer.fmap_unforced(fx, _end))
            return Emit(current.layer.fmap(fx, lambda following: loop(remaining - 1, following)))
        raise StreamTypeError("take", current)

    return loop(count, stream)


def take_while(fx: Effects, predicate: Callable[[A], bool], stream: Stream[A, Any]) -> Stream[A, None]:
    """
    End the stream at the first element that fails ``predicate``.

    The original result is lost; ``span`` keeps it.
    """

    require_callable(predicate, "predicate")

    def loop(current: Stream[A, Any]) -> Stream[A, None]:
        if isinstance(current, Done):
            return _UNIT
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            layer = _element(current, "take_while")
            if not predicate(layer.head):
                return _UNIT
            rest = layer.rest
            return Emit(Of(layer.head, lambda: loop(rest())))
        raise StreamTypeError("take_while", current)

    return loop(stream)


def drop(fx: Effects, count: int, stream: Stream[A, R]) -> Stream[A, R]:
    """Skip the first ``count`` elements; effects between them still run."""

    def loop(remaining: int, current: Stream[A, R]) -> Stream[A, R]:
        while remaining > 0:
            if isinstance(current, Done):
                return current
            if isinstance(current, Suspended):
                left = remaining
                return Suspended(fx.map(current.action, lambda following: loop(left, following)))
            if not isinstance(current, Emit):
                raise StreamTypeError("drop", current)
            current = _element(current, "drop").rest()
            remaining -= 1
        return current

    return loop(count, stream)


def drop_while(fx: Effects, predicate: Callable[[A], bool], stream: Stream[A, R]) -> Stream[A, R]:
    """Skip elements until one fails ``predicate``; effects between them still run."""

    require_callable(predicate, "predicate")

    def loop(current: Stream[A, R]) -> Stream[A, R]:
        while True:
            if isinstance(current, Done):
                return current
            if isinstance(current, Suspended):
                return Suspended(fx.map(current.action, loop))
            if not isinstance(current, Emit):
                raise StreamTypeError("drop_while", current)
            layer = _element(current, "drop_while")
            if not predicate(layer.head):
                return current
            current = layer.rest()

    return loop(stream)


__all__ = [
    "chain",
    "concat",
    "drop",
    "drop_while",
    "filter",
    "filter_m",
    "for_",
    "map",
    "map_foldable",
    "map_m",
    "read",
    "scan",
    "scan_m",
    "sequence",
    "show",
    "take",
    "take_while",
]
