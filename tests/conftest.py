"""
Pytest configuration for effstream tests.

Provides a parameterized ``fx`` fixture so that combinator tests run under
every bundled effect system, plus helpers for building streams whose effects
are observable.
"""

from collections.abc import Callable, Iterable
from typing import Any

import pytest

import effstream as S
from effstream import IDENTITY, IO, WRITER, Effects, Left, Right, Stream


@pytest.fixture(params=[IDENTITY, IO, WRITER], ids=lambda fx: fx.name)
def fx(request: pytest.FixtureRequest) -> Effects:
    return request.param


@pytest.fixture
def collect() -> Callable[[Effects, Stream[Any, Any]], tuple[list[Any], Any]]:
    """Drive a stream to the end and return ``(elements, result)``."""

    def run(fx: Effects, stream: Stream[Any, Any]) -> tuple[list[Any], Any]:
        return fx.run(S.to_list_m_with_result(fx, stream))

    return run


class Recorder:
    """Counts and records IO side effects in the order they run."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def note(self, event: Any) -> Any:
        return IO.perform(lambda: self.events.append(event))

    def counted(self, items: Iterable[Any], result: Any = None) -> Stream[Any, Any]:
        """An IO stream of ``items``; every pull (including the final one) is one recorded effect."""

        values = list(items)

        def step(index: int) -> Any:
            def pull() -> Any:
                if index >= len(values):
                    self.events.append(("end", result))
                    return Left(result)
                self.events.append(("pull", values[index]))
                return Right((values[index], index + 1))

            return IO.perform(pull)

        return S.unfoldr(IO, step, 0)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


def logged(tag: str, items: Iterable[Any]) -> Stream[Any, Any]:
    """A WRITER stream that logs ``"<tag> <item>"`` before each element and ``"<tag> end"`` last."""

    values = list(items)

    def step(index: int) -> Any:
        if index >= len(values):
            return WRITER.then(WRITER.tell(f"{tag} end"), lambda: WRITER.pure(Left(tag)))
        value = values[index]
        return WRITER.then(
            WRITER.tell(f"{tag} {value}"), lambda: WRITER.pure(Right((value, index + 1)))
        )

    return S.unfoldr(WRITER, step, 0)


@pytest.fixture
def writer_stream() -> Callable[[str, Iterable[Any]], Stream[Any, Any]]:
    return logged
