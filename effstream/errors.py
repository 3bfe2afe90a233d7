from __future__ import annotations

from typing import Any


class StreamTypeError(TypeError):
    """Raised when a continuation or binder produces something that is not a Stream."""

    def __init__(self, where: str, value: Any) -> None:
        self.where = where
        self.value = value
        super().__init__(
            f"{where} must produce a Stream; got {type(value).__name__}\n"
            "Hint: wrap plain results with `done(value)` and single elements with `yield_(value)`"
        )


class EffectTypeError(TypeError):
    """Raised when a binder returns something that is not an Action."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"binder must return an Action; got {type(value).__name__}\n"
            "Hint: use `fx.pure(value)` for plain values or `perform(fn)` for side effects"
        )


__all__ = ["EffectTypeError", "StreamTypeError"]
