"""Effect capabilities that streams are driven with."""

from effstream.effects.action import (
    Action,
    DeferredEffects,
    Delay,
    FlatMap,
    Pure,
    Tell,
    interpret,
)
from effstream.effects.base import Effects
from effstream.effects.identity import IDENTITY, IdentityEffects
from effstream.effects.io import IO, IOEffects, perform
from effstream.effects.writer import WRITER, WriterEffects

__all__ = [
    "Action",
    "DeferredEffects",
    "Delay",
    "Effects",
    "FlatMap",
    "IDENTITY",
    "IO",
    "IOEffects",
    "IdentityEffects",
    "Pure",
    "Tell",
    "WRITER",
    "WriterEffects",
    "interpret",
    "perform",
]
