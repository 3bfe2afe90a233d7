"""
Core types for effstream.

A ``Stream`` is a closed sum of three states:

* ``Done(result)`` - the stream is finished and carries its result.
* ``Suspended(action)`` - an effect must run before the stream can continue;
  running ``action`` produces the continuation ``Stream``.
* ``Emit(layer)`` - one layer of the stream is available. For element streams
  the layer is ``Of(head, rest)``; for streams of streams it is
  ``Nested(inner)``.

Continuations are explicit: ``Of.rest`` is a zero-argument callable, so
nothing past the current layer is computed until a consumer asks for it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar, cast

if TYPE_CHECKING:
    from effstream.effects.base import Effects

A = TypeVar("A")
A_co = TypeVar("A_co", covariant=True)
B = TypeVar("B")
R = TypeVar("R")
R_co = TypeVar("R_co", covariant=True)
S = TypeVar("S")
T_co = TypeVar("T_co", covariant=True)
U = TypeVar("U")


# =========================================================
# Either
# =========================================================
class Either(Generic[T_co]):
    """Sum type used by unfold steps and by single-step inspection."""

    __slots__ = ()

    def is_left(self) -> bool:
        """Return ``True`` for the terminating (``Left``) case."""

        return isinstance(self, Left)

    def is_right(self) -> bool:
        """Return ``True`` for the continuing (``Right``) case."""

        return isinstance(self, Right)

    def map(self, f: Callable[[Any], U]) -> Either[U]:
        """Apply ``f`` to a ``Right`` value; leave ``Left`` untouched."""

        if isinstance(self, Right):
            return Right(f(self.value))
        return cast(Either[U], self)

    def either(self, on_left: Callable[[Any], U], on_right: Callable[[Any], U]) -> U:
        """Eliminate the sum with one function per case."""

        if isinstance(self, Left):
            return on_left(self.value)
        return on_right(cast(Right[Any], self).value)


@dataclass(frozen=True)
class Left(Either[NoReturn]):
    """Terminating case; ``value`` is usually a stream result."""

    value: Any


@dataclass(frozen=True)
class Right(Either[T_co], Generic[T_co]):
    """Continuing case."""

    value: T_co


# =========================================================
# Layers
# =========================================================
class Layer(ABC, Generic[S]):
    """One unit of "more stream exists here", holding its continuation(s)."""

    __slots__ = ()

    @abstractmethod
    def fmap(self, fx: Effects, f: Callable[[Any], Any]) -> Layer[Any]:
        """Return the same layer with ``f`` applied to its continuation, lazily."""

    @abstractmethod
    def fmap_unforced(self, fx: Effects, f: Callable[[Any], Any]) -> Layer[Any]:
        """Like ``fmap``, but ``f`` may return without the continuation ever being forced."""


@dataclass(frozen=True)
class Of(Layer[A_co], Generic[A_co]):
    """Strict element layer: an evaluated head and a deferred continuation."""

    head: A_co
    rest: Callable[[], Stream[Any, Any]]

    def fmap(self, fx: Effects, f: Callable[[Any], Any]) -> Of[A_co]:
        rest = self.rest
        return Of(self.head, lambda: f(rest()))

    def fmap_unforced(self, fx: Effects, f: Callable[[Any], Any]) -> Of[A_co]:
        rest = self.rest
        return Of(self.head, lambda: f(Suspended(fx.map(fx.pure(None), lambda _: rest()))))

    def lazily(self) -> tuple[A_co, Stream[Any, Any]]:
        """Force the continuation and return a plain ``(head, rest)`` pair."""

        return self.head, self.rest()


@dataclass(frozen=True)
class Nested(Layer[Any]):
    """Stream-of-streams layer; the inner stream's result is the outer continuation."""

    stream: Stream[Any, Any]

    def fmap(self, fx: Effects, f: Callable[[Any], Any]) -> Nested:
        from effstream.core import map_result

        return Nested(map_result(fx, f, self.stream))

    def fmap_unforced(self, fx: Effects, f: Callable[[Any], Any]) -> Nested:
        # the continuation is the inner result, only known once the inner stream is done
        return self.fmap(fx, f)


def strictly(pair: tuple[A, Stream[A, R]]) -> Of[A]:
    """Build an element layer from an already computed ``(head, rest)`` pair."""

    head, rest = pair
    return Of(head, lambda: rest)


# =========================================================
# Stream
# =========================================================
class Stream(Generic[A_co, R_co]):
    """Runtime base class for the three stream states."""

    __slots__ = ()

    def is_done(self) -> bool:
        return isinstance(self, Done)

    def is_suspended(self) -> bool:
        return isinstance(self, Suspended)

    def is_emit(self) -> bool:
        return isinstance(self, Emit)


@dataclass(frozen=True)
class Done(Stream[NoReturn, R_co], Generic[R_co]):
    """Terminal state."""

    result: R_co


@dataclass(frozen=True)
class Suspended(Stream[A_co, R_co], Generic[A_co, R_co]):
    """An effect-system action whose value is the continuation stream."""

    action: Any


@dataclass(frozen=True)
class Emit(Stream[A_co, R_co], Generic[A_co, R_co]):
    """One layer of output."""

    layer: Layer[Any]


__all__ = [
    "Done",
    "Either",
    "Emit",
    "Layer",
    "Left",
    "Nested",
    "Of",
    "Right",
    "Stream",
    "Suspended",
    "strictly",
]
