"""Writer effect system - pure actions that accumulate a log."""

from __future__ import annotations

from typing import Any, TypeVar

from effstream.effects.action import Action, DeferredEffects, Tell, interpret

T = TypeVar("T")


class WriterEffects(DeferredEffects):
    """
    Effect system whose only effect is appending to a log.

    Entries are recorded in the order the actions run, which makes this
    capability convenient for observing effect ordering without side effects.
    """

    name = "writer"

    def tell(self, entry: Any) -> Action[None]:
        return Tell(entry)

    def run(self, action: Action[T]) -> T:
        value, _ = self.run_writer(action)
        return value

    def run_writer(self, action: Action[T]) -> tuple[T, list[Any]]:
        """Run ``action`` and return its value with the entries it logged."""

        log: list[Any] = []
        value = interpret(action, on_tell=log.append)
        return value, log


WRITER = WriterEffects()

__all__ = ["WRITER", "WriterEffects"]
