"""Pure effect system - streams that only compute."""

from __future__ import annotations

from effstream.effects.action import DeferredEffects


class IdentityEffects(DeferredEffects):
    """
    Effect system with no effects of its own.

    Actions are still deferred descriptions so that suspended layers of a
    pure stream are computed on demand and in constant stack.
    """

    name = "identity"


IDENTITY = IdentityEffects()

__all__ = ["IDENTITY", "IdentityEffects"]
