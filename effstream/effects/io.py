"""IO effect system."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from effstream.effects.action import Action, DeferredEffects, Delay, Pure
from effstream.utils import require_callable

T = TypeVar("T")


class IOEffects(DeferredEffects):
    """Effect system for side-effecting actions, run in order by ``interpret``."""

    name = "io"

    def perform(self, thunk: Callable[[], T]) -> Action[T]:
        """Defer ``thunk``; it runs once each time the action is run."""

        require_callable(thunk, "IO thunk")
        return Delay(thunk)

    def unit(self) -> Action[None]:
        return Pure(None)


IO = IOEffects()


def perform(thunk: Callable[[], Any]) -> Action[Any]:
    return IO.perform(thunk)


__all__ = ["IO", "IOEffects", "perform"]
