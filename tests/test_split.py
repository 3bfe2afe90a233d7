"""Tests for resumable splitting and streams of streams."""

from __future__ import annotations

import pytest

import effstream as S
from effstream import IDENTITY, IO, Of, Stream


def _with_result(fx, items, result="r"):
    return S.then(fx, S.each(items), lambda _: S.done(result))


# ============================================================================
# Splitting
# ============================================================================


def test_split_at_returns_remainder(fx, collect):
    prefix, rest = collect(fx, S.split_at(fx, 2, _with_result(fx, [1, 2, 3, 4])))

    assert prefix == [1, 2]
    assert collect(fx, rest) == ([3, 4], "r")


def test_split_at_beyond_end(fx, collect):
    prefix, rest = collect(fx, S.split_at(fx, 10, _with_result(fx, [1])))

    assert prefix == [1]
    assert collect(fx, rest) == ([], "r")


def test_split_at_resumes_without_rerunning_effects(recorder):
    prefix, rest = IO.run(S.to_list_m_with_result(IO, S.split_at(IO, 2, recorder.counted([1, 2, 3, 4]))))
    assert prefix == [1, 2]
    assert recorder.events == [("pull", 1), ("pull", 2)]

    assert IO.run(S.to_list_m(IO, rest)) == [3, 4]
    assert recorder.events == [("pull", 1), ("pull", 2), ("pull", 3), ("pull", 4), ("end", None)]


def test_span(fx, collect):
    prefix, rest = collect(fx, S.span(fx, lambda n: n < 3, _with_result(fx, [1, 2, 3, 1])))

    assert prefix == [1, 2]
    assert collect(fx, rest) == ([3, 1], "r")


def test_break(fx, collect):
    prefix, rest = collect(fx, S.break_(fx, lambda n: n >= 3, _with_result(fx, [1, 2, 3, 1])))

    assert prefix == [1, 2]
    assert collect(fx, rest) == ([3, 1], "r")


def test_span_over_whole_stream(fx, collect):
    prefix, rest = collect(fx, S.span(fx, lambda n: True, _with_result(fx, [1, 2])))

    assert prefix == [1, 2]
    assert collect(fx, rest) == ([], "r")


# ============================================================================
# Grouping
# ============================================================================


def _group_sums(fx, stream):
    return S.maps_to_elements(fx, lambda group: S.sum_with_result(fx, group.stream), stream)


def test_chunks_of_folded_per_group(fx, collect):
    chunks = S.chunks_of(fx, 2, _with_result(fx, [1, 2, 3, 4, 5]))
    assert collect(fx, _group_sums(fx, chunks)) == ([3, 7, 5], "r")


def test_chunks_of_empty_stream(fx, collect):
    chunks = S.chunks_of(fx, 3, _with_result(fx, []))
    assert collect(fx, _group_sums(fx, chunks)) == ([], "r")


def test_chunks_of_rejects_non_positive_size():
    with pytest.raises(ValueError, match="at least 1"):
        S.chunks_of(IDENTITY, 0, S.each([1]))


def test_chunks_of_many_groups():
    sums = _group_sums(IDENTITY, S.chunks_of(IDENTITY, 3, S.each(range(3_000))))
    result = S.to_list(sums)

    assert len(result) == 1_000
    assert result[0] == 0 + 1 + 2
    assert result[-1] == 2_997 + 2_998 + 2_999


def test_chunks_of_runs_each_effect_once(recorder):
    chunks = S.chunks_of(IO, 2, recorder.counted([1, 2, 3]))

    assert IO.run(S.to_list_m(IO, _group_sums(IO, chunks))) == [3, 3]
    assert recorder.events == [("pull", 1), ("pull", 2), ("pull", 3), ("end", None)]


def test_concats_undoes_chunks_of(fx, collect):
    chunks = S.chunks_of(fx, 2, _with_result(fx, [1, 2, 3, 4, 5]))
    assert collect(fx, S.concats(fx, chunks)) == ([1, 2, 3, 4, 5], "r")


def test_concats_rejects_element_layers():
    with pytest.raises(TypeError, match="nested layers"):
        S.to_list(S.concats(IDENTITY, S.each([1])))


def test_maps_rewrites_layers(fx, collect):
    stream = S.maps(fx, lambda layer: Of(layer.head * 10, layer.rest), _with_result(fx, [1, 2]))
    assert collect(fx, stream) == ([10, 20], "r")


def test_maps_to_elements_checks_continuation():
    chunks = S.chunks_of(IDENTITY, 2, S.each([1, 2]))
    broken = S.maps_to_elements(IDENTITY, lambda group: IDENTITY.pure((0, "not a stream")), chunks)

    with pytest.raises(TypeError, match="must produce a Stream"):
        S.to_list(broken)


def test_split_at_concrete():
    prefix, rest = IDENTITY.run(S.to_list_m_with_result(IDENTITY, S.split_at(IDENTITY, 2, S.each([1, 2, 3]))))

    assert prefix == [1, 2]
    assert S.to_list(rest) == [3]


@pytest.mark.parametrize("count", [0, 1, 3, 5, 8])
def test_prefix_then_remainder_reproduces_stream(fx, collect, count):
    original = _with_result(fx, [1, 2, 3, 4, 5])
    rejoined = S.then(fx, S.split_at(fx, count, original), lambda rest: rest)

    assert collect(fx, rejoined) == collect(fx, original) == ([1, 2, 3, 4, 5], "r")


def test_split_at_prefix_ends_on_infinite_input(fx, collect):
    stream = S.filter(fx, lambda n: n < 1, S.enum_from(0))
    prefix, rest = collect(fx, S.split_at(fx, 1, stream))

    assert prefix == [0]
    assert isinstance(rest, Stream)


def test_split_at_remainder_resumes_infinite_input():
    prefix, rest = IDENTITY.run(S.to_list_m_with_result(IDENTITY, S.split_at(IDENTITY, 2, S.enum_from(0))))

    assert prefix == [0, 1]
    assert S.to_list(S.take(IDENTITY, 3, rest)) == [2, 3, 4]


def test_split_at_leaves_remainder_uncomputed():
    seen = []

    def record(n: int) -> int:
        seen.append(n)
        return n

    stream = S.map(IDENTITY, record, S.each([1, 2, 3]))
    prefix, rest = IDENTITY.run(S.to_list_m_with_result(IDENTITY, S.split_at(IDENTITY, 2, stream)))

    assert prefix == [1, 2]
    assert seen == [1, 2]
    assert S.to_list(rest) == [3]
    assert seen == [1, 2, 3]
