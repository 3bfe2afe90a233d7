"""
Effect capability interface.

Every stream operation that has to sequence effects receives an ``Effects``
instance explicitly. The capability knows how to build a pure action, how to
chain two actions, how to loop without growing the Python stack, and how to
execute an action at the top level.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from effstream.types import Either, Left, Right

Action = TypeVar("Action")
S = TypeVar("S")
T = TypeVar("T")
U = TypeVar("U")


class Effects(ABC, Generic[Action]):
    """Monad dictionary for one effect system."""

    name: str = "<effects>"

    @abstractmethod
    def pure(self, value: T) -> Any:
        """Return an action that produces ``value`` without effects."""

    @abstractmethod
    def bind(self, action: Any, f: Callable[[Any], Any]) -> Any:
        """Run ``action`` then the action returned by ``f`` applied to its value."""

    @abstractmethod
    def run(self, action: Any) -> Any:
        """Execute ``action`` and return its value."""

    def map(self, action: Any, f: Callable[[Any], U]) -> Any:
        """Apply a pure function to the value of ``action``."""

        return self.bind(action, lambda value: self.pure(f(value)))

    def then(self, first: Any, second: Callable[[], Any]) -> Any:
        """Run ``first`` for its effect, then the action built by ``second``."""

        return self.bind(first, lambda _: second())

    def tail_rec(self, step: Callable[[S], Any], seed: S) -> Any:
        """
        Loop ``step`` from ``seed`` until it produces ``Right(result)``.

        ``step`` returns an action whose value is ``Left(next_seed)`` to keep
        going or ``Right(result)`` to stop. The default goes through ``bind``;
        ``DeferredEffects`` overrides it so no step runs before the action does.
        """

        def continue_with(outcome: Either[Any]) -> Any:
            if isinstance(outcome, Left):
                return self.tail_rec(step, outcome.value)
            if isinstance(outcome, Right):
                return self.pure(outcome.value)
            raise TypeError(
                f"tail_rec step must produce Left or Right; got {type(outcome).__name__}"
            )

        return self.bind(step(seed), continue_with)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


__all__ = ["Effects"]
