import asyncio
import inspect

import pytest

from pipekit import (
    AwaitUpstream,
    ContractViolation,
    Done,
    Effect,
    EffectContextError,
    EmitDownstream,
    X,
    closed,
    emit,
    lift,
    request,
    run_effect,
    arun_effect,
    to_list,
)
from pipekit import prelude as P
from pipekit.laws import transcript


def test_request_suspends_with_identity_continuation() -> None:
    step = request("addr")
    assert isinstance(step, AwaitUpstream)
    assert step.address == "addr"
    assert step.resume("reply") == Done("reply")


def test_emit_suspends_with_identity_continuation() -> None:
    step = emit(7)
    assert isinstance(step, EmitDownstream)
    assert step.value == 7
    assert step.resume("ack") == Done("ack")


def test_then_on_done_substitutes_immediately() -> None:
    assert Done(2).then(lambda n: Done(n * 3)) == Done(6)


def test_then_preserves_interaction_structure() -> None:
    step = request("a").then(lambda reply: emit(reply + 1)).then(lambda ack: Done(f"ack={ack}"))
    assert transcript(step, upstream=[10], downstream=["ok"]) == [
        ("request", "a"),
        ("emit", 11),
        ("done", "ack=ok"),
    ]


def test_map_transforms_result_only() -> None:
    step = emit(1).map(lambda _: "finished")
    assert transcript(step, downstream=[None]) == [("emit", 1), ("done", "finished")]


def test_rshift_sequences_and_discards_first_result() -> None:
    step = emit(1) >> emit(2) >> Done("end")
    assert transcript(step, downstream=[None, None]) == [
        ("emit", 1),
        ("emit", 2),
        ("done", "end"),
    ]


def test_rshift_rejects_non_steps() -> None:
    with pytest.raises(TypeError):
        _ = emit(1) >> 5  # type: ignore[operator]


def test_binder_returning_non_step_raises() -> None:
    with pytest.raises(TypeError):
        Done(1).then(lambda n: n + 1)  # type: ignore[arg-type,return-value]


def test_lift_runs_effect_once_in_order() -> None:
    log: list[str] = []
    step = lift(lambda: log.append("first")) >> lift(lambda: log.append("second")) >> Done("ok")
    assert log == []
    assert run_effect(step) == "ok"
    assert log == ["first", "second"]


def test_step_value_can_be_traversed_twice() -> None:
    calls: list[int] = []
    step = lift(lambda: calls.append(1)) >> emit("x") >> emit("y")
    assert to_list(step) == ["x", "y"]
    assert to_list(step) == ["x", "y"]
    assert calls == [1, 1]


def test_left_nested_binds_are_stack_safe() -> None:
    step = lift(lambda: 0)
    for _ in range(50_000):
        step = step.then(lambda n: Done(n + 1))
    assert run_effect(step) == 50_000


def test_left_nested_emits_are_stack_safe() -> None:
    step = emit(0)
    for value in range(1, 20_000):
        step = step >> emit(value)
    assert to_list(step) == list(range(20_000))


def test_long_recursive_loop_is_stack_safe() -> None:
    def count(n: int):
        if n == 0:
            return Done("done")
        return emit(n).then(lambda _: count(n - 1))

    assert len(to_list(count(30_000))) == 30_000


def test_x_is_uninhabited() -> None:
    with pytest.raises(TypeError):
        X()


def test_closed_always_raises_contract_violation() -> None:
    with pytest.raises(ContractViolation) as info:
        closed("value", "Source")
    assert info.value.shape == "Source"
    assert info.value.offending == "value"
    assert isinstance(info.value, AssertionError)


def test_run_effect_traps_interaction() -> None:
    with pytest.raises(ContractViolation):
        run_effect(request(None))
    with pytest.raises(ContractViolation):
        run_effect(emit(1))


def test_sync_run_rejects_async_effect() -> None:
    async def fetch() -> int:
        return 1

    with pytest.raises(EffectContextError):
        run_effect(lift(fetch))


def test_refused_async_effect_is_closed() -> None:
    """The coroutine a refused effect returned is closed, not left pending."""
    created = []

    async def fetch(v: int) -> int:
        return v

    def start(v: int):
        coro = fetch(v)
        created.append(coro)
        return coro

    with pytest.raises(EffectContextError):
        to_list(emit(0).then(lambda _: lift(lambda: start(1))).then(emit))
    assert inspect.getcoroutinestate(created[0]) == inspect.CORO_CLOSED

    with pytest.raises(EffectContextError):
        to_list(P.each([2]) | P.map_m(start))
    assert inspect.getcoroutinestate(created[1]) == inspect.CORO_CLOSED


def test_async_run_awaits_effects() -> None:
    async def fetch() -> int:
        await asyncio.sleep(0)
        return 41

    step = lift(fetch).then(lambda n: lift(lambda: n + 1))
    assert asyncio.run(arun_effect(step)) == 42


def test_effect_node_wraps_action() -> None:
    step = Effect(lambda: Done("next"))
    assert run_effect(step) == "next"
