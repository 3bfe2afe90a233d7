"""Tests for constructors, sequencing, single-step inspection and unfolding."""

from __future__ import annotations

from typing import Any

import pytest

import effstream as S
from effstream import IDENTITY, IO, Done, Left, Of, Right, StreamTypeError


# ============================================================================
# Constructors
# ============================================================================


def test_yield_is_singleton(fx, collect):
    assert collect(fx, S.yield_("x")) == (["x"], None)


def test_done_carries_result(fx, collect):
    assert collect(fx, S.done(42)) == ([], 42)


def test_cons_prepends(fx, collect):
    assert collect(fx, S.cons(0, S.then(fx, S.each([1, 2]), lambda _: S.done("r")))) == ([0, 1, 2], "r")


def test_cons_rejects_non_stream_tail():
    with pytest.raises(StreamTypeError, match="cons tail"):
        S.cons(1, [2, 3])  # type: ignore[arg-type]


def test_each_list_can_be_traversed_twice():
    stream = S.each([1, 2, 3])

    assert S.to_list(stream) == [1, 2, 3]
    assert S.to_list(stream) == [1, 2, 3]


def test_each_iterator_is_memoized():
    pulled = []

    def numbers():
        for n in range(3):
            pulled.append(n)
            yield n

    stream = S.each(numbers())
    assert pulled == [0]

    assert S.to_list(stream) == [0, 1, 2]
    assert S.to_list(stream) == [0, 1, 2]
    assert pulled == [0, 1, 2]


def test_iterator_behind_unfoldr_is_pulled_only_when_driven():
    pulled = []

    def numbers():
        for n in range(5):
            pulled.append(n)
            yield n

    def step(source) -> Any:
        def pull() -> Any:
            item = next(source, None)
            return Left(None) if item is None else Right((item, source))

        return IO.perform(pull)

    stream = S.unfoldr(IO, step, numbers())
    assert pulled == []

    assert IO.run(S.to_list_m(IO, S.take(IO, 2, stream))) == [0, 1]
    assert pulled == [0, 1]


def test_effect_lifts_action_to_result(recorder):
    stream = S.effect(IO, IO.perform(lambda: recorder.events.append("ran") or 42))

    assert recorder.events == []
    assert IO.run(S.drain(IO, stream)) == 42
    assert recorder.events == ["ran"]


def test_suspend_wraps_continuation_action(fx, collect):
    stream = S.suspend(fx.pure(S.yield_(1)))
    assert collect(fx, stream) == ([1], None)


# ============================================================================
# Sequencing
# ============================================================================


def test_then_passes_result_to_continuation(fx, collect):
    first = S.then(fx, S.each([1, 2]), lambda _: S.done(10))
    both = S.then(fx, first, lambda result: S.cons(result, S.done(result + 1)))

    assert collect(fx, both) == ([1, 2, 10], 11)


def test_then_rejects_non_stream_continuation():
    with pytest.raises(StreamTypeError, match="then continuation"):
        S.to_list(S.then(IDENTITY, S.each([1]), lambda result: result))


def test_append_keeps_second_result(fx, collect):
    first = S.then(fx, S.each([1]), lambda _: S.done("dropped"))
    second = S.then(fx, S.each([2]), lambda _: S.done("kept"))

    assert collect(fx, S.append(fx, first, second)) == ([1, 2], "kept")


def test_append_runs_effects_in_order(recorder):
    stream = S.append(IO, recorder.counted(["a"]), recorder.counted(["b"]))

    assert IO.run(S.to_list_m(IO, stream)) == ["a", "b"]
    assert recorder.events == [("pull", "a"), ("end", None), ("pull", "b"), ("end", None)]


def test_map_result_leaves_elements(fx, collect):
    stream = S.map_result(fx, lambda r: r * 2, S.then(fx, S.each("ab"), lambda _: S.done(4)))
    assert collect(fx, stream) == (["a", "b"], 8)


# ============================================================================
# Single-step inspection
# ============================================================================


def test_inspect_done():
    assert IDENTITY.run(S.inspect(IDENTITY, S.done(3))) == Left(3)


def test_inspect_runs_suspensions_until_a_layer(recorder):
    outcome = IO.run(S.inspect(IO, recorder.counted(["a", "b"])))

    assert outcome.is_right()
    assert isinstance(outcome.value, Of)
    assert outcome.value.head == "a"
    assert recorder.events == [("pull", "a")]


def test_next_walks_a_stream():
    outcome = IDENTITY.run(S.next(IDENTITY, S.each([1, 2])))
    head, rest = outcome.value
    assert head == 1

    outcome = IDENTITY.run(S.next(IDENTITY, rest))
    head, rest = outcome.value
    assert head == 2

    assert IDENTITY.run(S.next(IDENTITY, rest)) == Left(None)


def test_next_does_not_rerun_consumed_effects(recorder):
    stream = recorder.counted([1, 2, 3], result="r")
    seen = []
    while True:
        outcome = IO.run(S.next(IO, stream))
        if outcome.is_left():
            break
        head, stream = outcome.value
        seen.append(head)

    assert seen == [1, 2, 3]
    assert outcome == Left("r")
    assert recorder.events == [("pull", 1), ("pull", 2), ("pull", 3), ("end", "r")]


def test_next_rejects_nested_layers():
    chunks = S.chunks_of(IDENTITY, 2, S.each([1, 2, 3]))

    with pytest.raises(TypeError, match="element layers"):
        IDENTITY.run(S.next(IDENTITY, chunks))


def test_uncons():
    head, rest = IDENTITY.run(S.uncons(IDENTITY, S.each("xy")))
    assert head == "x"
    assert S.to_list(rest) == ["y"]

    assert IDENTITY.run(S.uncons(IDENTITY, S.then(IDENTITY, S.each([]), lambda _: S.done("r")))) is None


# ============================================================================
# Unfolding
# ============================================================================


def test_unfoldr_builds_elements(fx, collect):
    def step(n: int) -> Any:
        return fx.pure(Left(f"stopped at {n}") if n >= 3 else Right((n * n, n + 1)))

    assert collect(fx, S.unfoldr(fx, step, 0)) == ([0, 1, 4], "stopped at 3")


def test_unfoldr_pulls_nothing_until_driven(recorder):
    stream = recorder.counted([1, 2])

    assert recorder.events == []
    assert IO.run(S.drain(IO, stream)) is None
    assert len(recorder.events) == 3


def test_unfold_layer_continuation_is_next_seed(fx, collect):
    def step(n: int) -> Any:
        if n >= 3:
            return fx.pure(Left("stop"))
        following = n + 1
        return fx.pure(Right(Of(n, lambda: following)))

    assert collect(fx, S.unfold(fx, step, 0)) == ([0, 1, 2], "stop")


def test_unfoldr_requires_callable_step():
    with pytest.raises(TypeError, match="unfoldr step must be callable"):
        S.unfoldr(IDENTITY, None, 0)  # type: ignore[arg-type]


def test_done_stream_from_constructor_is_done():
    assert isinstance(S.done(), Done)
    assert S.done().result is None
