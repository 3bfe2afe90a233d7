"""
Utility functions for the effstream library.
"""

import os
from collections.abc import Callable
from typing import Any

from effstream.errors import StreamTypeError

# Environment variable to control debug mode
DEBUG_STREAMS = os.environ.get("EFFSTREAM_DEBUG", "").lower() in ("1", "true", "yes")


def require_callable(value: Any, role: str) -> None:
    """Reject a non-callable argument before any stream is built."""

    if not callable(value):
        raise TypeError(f"{role} must be callable; got {type(value).__name__}")


def checked(where: str, thunk: Callable[[], Any]) -> Any:
    """Run ``thunk`` and verify that it produced a Stream."""

    from effstream.types import Stream

    value = thunk()
    if not isinstance(value, Stream):
        raise StreamTypeError(where, value)
    return value


__all__ = [
    "DEBUG_STREAMS",
    "checked",
    "require_callable",
]
