import asyncio
import logging

import pytest

from pipekit import (
    ContractViolation,
    Done,
    Trace,
    Yielded,
    advance,
    afold,
    afold_m,
    afold_m_returning,
    anext_step,
    arun_effect,
    ato_list,
    await_,
    emit,
    fold,
    fold_m,
    fold_m_returning,
    fold_returning,
    lift,
    next_step,
    run_effect,
    to_list,
    to_list_returning,
    yield_,
)
from pipekit import prelude as P
from fakes import PullLog


def test_fold_is_a_strict_left_fold() -> None:
    source = P.each(["a", "b", "c"])
    result = fold(lambda acc, v: f"({acc}+{v})", "0", lambda acc: acc.upper(), source)
    assert result == "(((0+A)+B)+C)"


def test_fold_returning_keeps_source_result() -> None:
    source = P.each([1, 2, 3]).map(lambda _: "end")
    assert fold_returning(lambda acc, v: acc + v, 0, str, source) == ("6", "end")


def test_fold_of_empty_source_is_done_of_begin() -> None:
    assert fold(lambda acc, v: acc + v, 10, lambda acc: acc * 2, Done("r")) == 20


def test_fold_m_runs_begin_first_and_done_last() -> None:
    log: list[str] = []

    def begin() -> int:
        log.append("begin")
        return 0

    def step(acc: int, v: int) -> int:
        log.append(f"step {v}")
        return acc + v

    def done(acc: int) -> str:
        log.append("done")
        return f"total={acc}"

    source = lift(lambda: log.append("source starts")) >> P.each([1, 2])
    assert fold_m(step, begin, done, source) == "total=3"
    assert log == ["begin", "source starts", "step 1", "step 2", "done"]


def test_fold_m_returning_pairs_results() -> None:
    source = P.each([2, 3]).map(lambda _: "r")
    assert fold_m_returning(lambda a, v: a * v, lambda: 1, lambda a: a, source) == (6, "r")


def test_fold_traps_source_that_requests() -> None:
    with pytest.raises(ContractViolation) as info:
        fold(lambda acc, v: acc, None, lambda acc: acc, emit(1) >> await_())
    assert info.value.shape == "Source"


def test_fold_records_trace() -> None:
    trace = Trace()
    source = lift(lambda: None) >> P.each([1, 2]).map(lambda _: "end")
    fold(lambda acc, v: acc + v, 0, lambda acc: acc, source, trace=trace)
    assert trace.keys() == [("effect", None), ("emit", 1), ("emit", 2), ("done", "end")]
    assert [event.id for event in trace.get_events()] == [0, 1, 2, 3]


def test_fold_logs_completion(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="pipekit.traversal"):
        fold(lambda acc, v: acc, None, lambda acc: acc, Done("finished"))
    assert "finished" in caplog.text


def test_fold_over_long_stream_has_bounded_stack() -> None:
    assert fold(lambda acc, _: acc + 1, 0, lambda acc: acc, P.each(range(200_000))) == 200_000


def test_next_step_yields_value_and_rest() -> None:
    first = next_step(P.each([1, 2]))
    assert isinstance(first, Yielded)
    assert first.value == 1
    second = next_step(first.rest)
    assert isinstance(second, Yielded) and second.value == 2
    third = next_step(second.rest)
    assert third == Done(None)


def test_next_step_does_not_evaluate_past_first_value() -> None:
    log = PullLog()
    first = next_step(log.source([1, 2, 3]))
    assert isinstance(first, Yielded) and first.value == 1
    assert log.pulled == [1]


def test_advance_embeds_the_pull_as_a_step() -> None:
    step = advance(P.each(["x"])).then(lambda nxt: Done(nxt.value))
    assert run_effect(step) == "x"


def test_to_list_and_to_list_returning() -> None:
    source = P.each([1, 2, 3]).map(lambda _: "r")
    assert to_list(source) == [1, 2, 3]
    assert to_list_returning(source) == ([1, 2, 3], "r")


def test_effects_run_exactly_once_in_order() -> None:
    log: list[int] = []

    def source(n: int):
        if n == 3:
            return Done(None)
        return lift(lambda: log.append(n)).then(lambda _: yield_(n)).then(lambda _: source(n + 1))

    assert to_list(source(0)) == [0, 1, 2]
    assert log == [0, 1, 2]


# --- Async engine ---


async def double_later(v: int) -> int:
    await asyncio.sleep(0)
    return v * 2


def test_ato_list_awaits_source_effects() -> None:
    source = P.each([1, 2, 3]) | P.map_m(double_later)
    assert asyncio.run(ato_list(source)) == [2, 4, 6]


def test_afold_sums_async_source() -> None:
    source = P.each([1, 2, 3]) | P.map_m(double_later)
    assert asyncio.run(afold(lambda acc, v: acc + v, 0, lambda acc: acc, source)) == 12


def test_afold_m_accepts_coroutine_steps() -> None:
    async def begin() -> list[int]:
        return []

    async def step(acc: list[int], v: int) -> list[int]:
        await asyncio.sleep(0)
        return acc + [v]

    async def done(acc: list[int]) -> tuple[int, ...]:
        return tuple(acc)

    source = P.each([3, 1, 2]).map(lambda _: "end")
    assert asyncio.run(afold_m(step, begin, done, source)) == (3, 1, 2)
    assert asyncio.run(afold_m_returning(step, begin, done, source)) == ((3, 1, 2), "end")


def test_anext_step_and_arun_effect() -> None:
    async def run():
        first = await anext_step(P.each([5]) | P.map_m(double_later))
        result = await arun_effect(lift(lambda: "sync effects work too"))
        return first, result

    first, result = asyncio.run(run())
    assert isinstance(first, Yielded) and first.value == 10
    assert result == "sync effects work too"
