"""Traversal engine - strict reducers that run a step to its final value.

The engine inspects Step nodes directly instead of composing them, so a
traversal allocates nothing per element beyond what the step itself
produces. Accumulators are updated eagerly at every emitted value.

Synchronous entry points require every Effect to return a Step. The
``a*`` entry points also await effects that return awaitables; they
never schedule tasks of their own.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pipekit.errors import EffectContextError
from pipekit.kernel.shapes import Closed, Source, closed
from pipekit.kernel.step import (
    AwaitUpstream,
    Done,
    Effect,
    EmitDownstream,
    Step,
    map_effect,
)
from pipekit.kernel.trace import Trace

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")
X_ = TypeVar("X_")


@dataclass(frozen=True)
class Yielded(Generic[B, R]):
    """The first value of a source, plus a way to resume the remainder.

    ``rest`` is computed on access: building it runs no effect, but it may
    run pure code upstream, so it is only built once the caller wants the
    next value.
    """

    value: B
    resume: Callable[[None], Source[B, R]]

    @property
    def rest(self) -> Source[B, R]:
        return self.resume(None)


Next = Done[Any, Any, Any, Any, R] | Yielded[B, R]


def perform(action: Callable[[], Any], entry_point: str) -> Step[Any, Any, Any, Any, Any]:
    """Run one synchronous effect and return the next step."""
    outcome = action()
    if inspect.isawaitable(outcome):
        close = getattr(outcome, "close", None)
        if close is not None:
            close()
        raise EffectContextError(entry_point)
    return outcome


def _unexpected(step: Any) -> TypeError:
    return TypeError(f"expected a Step, got {type(step).__name__}: {step!r}")


# --- Closed steps ---


def run_effect(step: Closed[R], *, trace: Trace | None = None) -> R:
    """Run a self-contained step to its result.

    Raises:
        ContractViolation: If the step requests or emits.
        EffectContextError: If an effect returns an awaitable.
    """
    while True:
        if isinstance(step, Effect):
            if trace is not None:
                trace.record("effect")
            step = perform(step.action, "run_effect")
        elif isinstance(step, Done):
            if trace is not None:
                trace.record("done", step.result)
            return step.result
        elif isinstance(step, AwaitUpstream):
            closed(step.address, "Closed")
        elif isinstance(step, EmitDownstream):
            closed(step.value, "Closed")
        else:
            raise _unexpected(step)


async def arun_effect(step: Closed[R], *, trace: Trace | None = None) -> R:
    """Run a self-contained step whose effects may be awaitable."""
    while True:
        if isinstance(step, Effect):
            if trace is not None:
                trace.record("effect")
            outcome = step.action()
            step = await outcome if inspect.isawaitable(outcome) else outcome
        elif isinstance(step, Done):
            if trace is not None:
                trace.record("done", step.result)
            return step.result
        elif isinstance(step, AwaitUpstream):
            closed(step.address, "Closed")
        elif isinstance(step, EmitDownstream):
            closed(step.value, "Closed")
        else:
            raise _unexpected(step)


# --- Stepping a source ---


def advance(source: Source[B, R]) -> Closed[Next[B, R]]:
    """A closed step whose result is the source's next value or its Done node.

    Effects of the source run as effects of the returned step, so it can
    be embedded in any effect context. Nothing past the first emitted
    value is evaluated.
    """
    while True:
        if isinstance(source, EmitDownstream):
            return Done(Yielded(source.value, source.resume))
        if isinstance(source, Effect):
            return Effect(map_effect(source.action, advance))
        if isinstance(source, Done):
            return Done(source)
        if isinstance(source, AwaitUpstream):
            closed(source.address, "Source")
        raise _unexpected(source)


def next_step(source: Source[B, R]) -> Next[B, R]:
    """Pull one value: ``Yielded(value, resume)`` or the final ``Done``."""
    return run_effect(advance(source))


async def anext_step(source: Source[B, R]) -> Next[B, R]:
    """Asynchronous ``next_step``."""
    return await arun_effect(advance(source))


# --- Folds ---


def _fold(
    step: Callable[[X_, B], X_],
    x: X_,
    source: Source[B, R],
    trace: Trace | None,
    entry_point: str,
) -> tuple[X_, R]:
    while True:
        if isinstance(source, EmitDownstream):
            if trace is not None:
                trace.record("emit", source.value)
            x = step(x, source.value)
            source = source.resume(None)
        elif isinstance(source, Effect):
            if trace is not None:
                trace.record("effect")
            source = perform(source.action, entry_point)
        elif isinstance(source, Done):
            if trace is not None:
                trace.record("done", source.result)
            logger.debug("%s finished with result %r", entry_point, source.result)
            return x, source.result
        elif isinstance(source, AwaitUpstream):
            closed(source.address, "Source")
        else:
            raise _unexpected(source)


def fold(
    step: Callable[[X_, B], X_],
    begin: X_,
    done: Callable[[X_], A],
    source: Source[B, Any],
    *,
    trace: Trace | None = None,
) -> A:
    """Strict left fold of every value ``source`` emits.

    For a source emitting ``v1 .. vn``, returns
    ``done(step(... step(step(begin, v1), v2) ..., vn))``.
    """
    x, _ = _fold(step, begin, source, trace, "fold")
    return done(x)


def fold_returning(
    step: Callable[[X_, B], X_],
    begin: X_,
    done: Callable[[X_], A],
    source: Source[B, R],
    *,
    trace: Trace | None = None,
) -> tuple[A, R]:
    """Like ``fold``, but also returns the source's final result."""
    x, result = _fold(step, begin, source, trace, "fold_returning")
    return done(x), result


def fold_m(
    step: Callable[[X_, B], X_],
    begin: Callable[[], X_],
    done: Callable[[X_], A],
    source: Source[B, Any],
    *,
    trace: Trace | None = None,
) -> A:
    """Strict fold whose ``begin``, ``step`` and ``done`` perform effects.

    ``begin`` runs before the source is touched and ``done`` after it
    finishes; each ``step`` call runs as its value arrives.
    """
    x, _ = _fold(step, begin(), source, trace, "fold_m")
    return done(x)


def fold_m_returning(
    step: Callable[[X_, B], X_],
    begin: Callable[[], X_],
    done: Callable[[X_], A],
    source: Source[B, R],
    *,
    trace: Trace | None = None,
) -> tuple[A, R]:
    """Like ``fold_m``, but also returns the source's final result."""
    x, result = _fold(step, begin(), source, trace, "fold_m_returning")
    return done(x), result


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def _afold(
    step: Callable[[X_, B], X_ | Awaitable[X_]],
    x: X_,
    source: Source[B, R],
    trace: Trace | None,
) -> tuple[X_, R]:
    while True:
        if isinstance(source, EmitDownstream):
            if trace is not None:
                trace.record("emit", source.value)
            x = await _settle(step(x, source.value))
            source = source.resume(None)
        elif isinstance(source, Effect):
            if trace is not None:
                trace.record("effect")
            source = await _settle(source.action())
        elif isinstance(source, Done):
            if trace is not None:
                trace.record("done", source.result)
            logger.debug("async fold finished with result %r", source.result)
            return x, source.result
        elif isinstance(source, AwaitUpstream):
            closed(source.address, "Source")
        else:
            raise _unexpected(source)


async def afold(
    step: Callable[[X_, B], X_],
    begin: X_,
    done: Callable[[X_], A],
    source: Source[B, Any],
    *,
    trace: Trace | None = None,
) -> A:
    """Asynchronous ``fold``: the source's effects may be awaitable."""
    x, _ = await _afold(step, begin, source, trace)
    return done(x)


async def afold_m(
    step: Callable[[X_, B], X_ | Awaitable[X_]],
    begin: Callable[[], X_ | Awaitable[X_]],
    done: Callable[[X_], A | Awaitable[A]],
    source: Source[B, Any],
    *,
    trace: Trace | None = None,
) -> A:
    """Asynchronous ``fold_m``; ``begin``, ``step`` and ``done`` may be coroutine functions."""
    x, _ = await _afold(step, await _settle(begin()), source, trace)
    return await _settle(done(x))


async def afold_m_returning(
    step: Callable[[X_, B], X_ | Awaitable[X_]],
    begin: Callable[[], X_ | Awaitable[X_]],
    done: Callable[[X_], A | Awaitable[A]],
    source: Source[B, R],
    *,
    trace: Trace | None = None,
) -> tuple[A, R]:
    """Like ``afold_m``, but also returns the source's final result."""
    x, result = await _afold(step, await _settle(begin()), source, trace)
    return await _settle(done(x)), result


# --- Collecting ---
#
# Collecting into memory defeats the bounded-memory guarantee of the
# engine. These exist for tests and small demonstrations; idiomatic code
# consumes values as they arrive.


def _append(acc: list[B], value: B) -> list[B]:
    acc.append(value)
    return acc


def to_list(source: Source[B, Any]) -> list[B]:
    """Collect every value into a list (not for unbounded streams)."""
    return fold(_append, [], list, source)


def to_list_returning(source: Source[B, R]) -> tuple[list[B], R]:
    """Collect every value into a list, alongside the final result."""
    return fold_returning(_append, [], list, source)


async def ato_list(source: Source[B, Any]) -> list[B]:
    """Asynchronous ``to_list``."""
    return await afold(_append, [], list, source)
