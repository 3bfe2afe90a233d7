"""
Resumable splitting and streams of streams.

``split_at``, ``span`` and ``break_`` never lose information: the prefix they
stream ends with the untouched remainder as its result, so driving the
remainder afterwards continues exactly where the prefix stopped, without
re-running any effect.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from effstream.core import map_result, then
from effstream.errors import StreamTypeError
from effstream.types import Done, Emit, Layer, Nested, Of, Stream, Suspended
from effstream.utils import require_callable

if TYPE_CHECKING:
    from effstream.effects.base import Effects

A = TypeVar("A")
R = TypeVar("R")


def split_at(fx: Effects, count: int, stream: Stream[A, R]) -> Stream[A, Stream[A, R]]:
    """
    Stream the first ``count`` layers; the result is the rest of the stream.

    The rest is handed over unforced: nothing past the prefix runs until the
    rest itself is driven.
    """

    def loop(remaining: int, current: Stream[A, R]) -> Stream[A, Stream[A, R]]:
        if remaining <= 0 or isinstance(current, Done):
            return Done(current)
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, lambda following: loop(remaining, following)))
        if isinstance(current, Emit):
            if remaining == 1:
                return Emit(current.layer.fmap_unforced(fx, Done))
            return Emit(current.layer.fmap(fx, lambda following: loop(remaining - 1, following)))
        raise StreamTypeError("split_at", current)

    return loop(count, stream)


def span(fx: Effects, predicate: Callable[[A], bool], stream: Stream[A, R]) -> Stream[A, Stream[A, R]]:
    """Stream elements while ``predicate`` holds; the result is the rest, starting at the first failure."""

    require_callable(predicate, "predicate")

    def loop(current: Stream[A, R]) -> Stream[A, Stream[A, R]]:
        if isinstance(current, Done):
            return Done(current)
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            layer = current.layer
            if not isinstance(layer, Of):
                raise TypeError(f"span expects element layers; got {type(layer).__name__}")
            if not predicate(layer.head):
                return Done(current)
            rest = layer.rest
            return Emit(Of(layer.head, lambda: loop(rest())))
        raise StreamTypeError("span", current)

    return loop(stream)


def break_(fx: Effects, predicate: Callable[[A], bool], stream: Stream[A, R]) -> Stream[A, Stream[A, R]]:
    """Stream elements until one satisfies ``predicate``; the result is the rest, starting there."""

    require_callable(predicate, "predicate")
    return span(fx, lambda head: not predicate(head), stream)


def chunks_of(fx: Effects, size: int, stream: Stream[A, R]) -> Stream[Any, R]:
    """
    Group the layers of ``stream`` into sub-streams of ``size`` layers.

    Each emitted layer is ``Nested(inner)``; ``inner`` streams one group and
    its result is the stream of the remaining groups.
    """

    if size < 1:
        raise ValueError(f"chunks_of size must be at least 1; got {size}")

    def loop(current: Stream[A, R]) -> Stream[Any, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            return Emit(Nested(map_result(fx, loop, split_at(fx, size, current))))
        raise StreamTypeError("chunks_of", current)

    return loop(stream)


def concats(fx: Effects, stream: Stream[Any, R]) -> Stream[Any, R]:
    """Flatten a stream of streams back into one stream."""

    def loop(current: Stream[Any, R]) -> Stream[Any, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            layer = current.layer
            if not isinstance(layer, Nested):
                raise TypeError(f"concats expects nested layers; got {type(layer).__name__}")
            return then(fx, layer.stream, loop)
        raise StreamTypeError("concats", current)

    return loop(stream)


def maps(fx: Effects, phi: Callable[[Layer[Any]], Layer[Any]], stream: Stream[Any, R]) -> Stream[Any, R]:
    """Transform every layer with ``phi``, which must leave the layer's continuation alone."""

    require_callable(phi, "layer transform")

    def loop(current: Stream[Any, R]) -> Stream[Any, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            return Emit(phi(current.layer.fmap(fx, loop)))
        raise StreamTypeError("maps", current)

    return loop(stream)


def maps_to_elements(fx: Effects, phi: Callable[[Layer[Any]], Any], stream: Stream[Any, R]) -> Stream[Any, R]:
    """
    Collapse every layer into a single element.

    ``phi(layer)`` returns an action of ``(element, continuation)``; with
    nested layers this is exactly what the ``*_with_result`` folds produce::

        maps_to_elements(fx, lambda group: sum_with_result(fx, group.stream), chunks)
    """

    require_callable(phi, "layer fold")

    def loop(current: Stream[Any, R]) -> Stream[Any, R]:
        if isinstance(current, Done):
            return current
        if isinstance(current, Suspended):
            return Suspended(fx.map(current.action, loop))
        if isinstance(current, Emit):
            return Suspended(fx.map(phi(current.layer.fmap(fx, loop)), _emit_pair))
        raise StreamTypeError("maps_to_elements", current)

    return loop(stream)


def _emit_pair(pair: tuple[Any, Stream[Any, Any]]) -> Stream[Any, Any]:
    head, rest = pair
    if not isinstance(rest, Stream):
        raise StreamTypeError("maps_to_elements layer fold", rest)
    return Emit(Of(head, lambda: rest))


__all__ = [
    "break_",
    "chunks_of",
    "concats",
    "maps",
    "maps_to_elements",
    "span",
    "split_at",
]
