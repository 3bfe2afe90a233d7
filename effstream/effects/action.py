"""
Deferred actions and the machine that runs them.

Actions are descriptions built from four nodes:

* ``Pure(value)`` - a value, no effect.
* ``Delay(thunk)`` - call ``thunk()`` when run (a side effect).
* ``Tell(entry)`` - append ``entry`` to the log of the current run.
* ``FlatMap(source, binder)`` - run ``source``, then the action ``binder`` returns.

``interpret`` executes a description with an explicit continuation stack, so
neither deep left-nested nor deep right-nested ``FlatMap`` chains consume
Python stack.
"""

from __future__ import annotations

import logging
from abc import ABC
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from effstream.effects.base import Effects
from effstream.errors import EffectTypeError
from effstream.types import Left, Right
from effstream.utils import DEBUG_STREAMS

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class Action(ABC, Generic[T]):
    """Runtime base class for deferred actions."""

    __slots__ = ()

    def map(self, f: Callable[[T], U]) -> Action[U]:
        """Map a function over this action's value."""

        if not callable(f):
            raise TypeError("mapper must be callable")
        return FlatMap(self, lambda value: Pure(f(value)))

    def flat_map(self, f: Callable[[T], Action[U]]) -> Action[U]:
        """Monadic bind operation."""

        if not callable(f):
            raise TypeError("binder must be callable returning an Action")
        return FlatMap(self, f)

    def then(self, following: Action[U]) -> Action[U]:
        """Run this action for its effect, then ``following``."""

        return FlatMap(self, lambda _: following)


@dataclass(frozen=True)
class Pure(Action[T]):
    value: T


@dataclass(frozen=True)
class Delay(Action[T]):
    """Side effect performed by calling ``thunk`` with no arguments."""

    thunk: Callable[[], T]


@dataclass(frozen=True)
class Tell(Action[None]):
    entry: Any


@dataclass(frozen=True)
class FlatMap(Action[T]):
    source: Action[Any]
    binder: Callable[[Any], Action[T]]


def interpret(action: Action[T], on_tell: Callable[[Any], None] | None = None) -> T:
    """Run ``action`` to completion and return its value."""

    control: Any = action
    kontinuation: list[Callable[[Any], Any]] = []

    while True:
        if isinstance(control, FlatMap):
            kontinuation.append(control.binder)
            control = control.source
            continue

        if isinstance(control, Pure):
            value = control.value
        elif isinstance(control, Delay):
            if DEBUG_STREAMS:
                logger.debug("perform: %r", control.thunk)
            value = control.thunk()
        elif isinstance(control, Tell):
            if on_tell is None:
                raise TypeError("Tell can only run under a writer; use WRITER.run_writer()")
            on_tell(control.entry)
            value = None
        else:
            raise EffectTypeError(control)

        if not kontinuation:
            return value
        control = kontinuation.pop()(value)


class DeferredEffects(Effects[Action[Any]]):
    """Effect capability whose actions are ``Action`` descriptions."""

    name = "deferred"

    def pure(self, value: T) -> Action[T]:
        return Pure(value)

    def bind(self, action: Action[Any], f: Callable[[Any], Action[U]]) -> Action[U]:
        if not isinstance(action, Action):
            raise EffectTypeError(action)
        return FlatMap(action, f)

    def map(self, action: Action[Any], f: Callable[[Any], U]) -> Action[U]:
        if not isinstance(action, Action):
            raise EffectTypeError(action)
        return FlatMap(action, lambda value: Pure(f(value)))

    def tail_rec(self, step: Callable[[Any], Action[Any]], seed: Any) -> Action[Any]:
        """Loop ``step`` inside the machine; ``step`` is first called when the action runs."""

        def go(current: Any) -> Action[Any]:
            return FlatMap(step(current), continue_with)

        def continue_with(outcome: Any) -> Action[Any]:
            if isinstance(outcome, Left):
                return go(outcome.value)
            if isinstance(outcome, Right):
                return Pure(outcome.value)
            raise TypeError(
                f"tail_rec step must produce Left or Right; got {type(outcome).__name__}"
            )

        return FlatMap(Pure(seed), go)

    def run(self, action: Action[T]) -> T:
        return interpret(action)


__all__ = [
    "Action",
    "DeferredEffects",
    "Delay",
    "FlatMap",
    "Pure",
    "Tell",
    "interpret",
]
