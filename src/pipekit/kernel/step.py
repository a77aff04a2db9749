"""Step - the single recursive representation every stream is built from.

A Step is one of four immutable nodes:

- AwaitUpstream: suspended on a request sent upstream
- EmitDownstream: suspended on a value offered downstream
- Effect: one unit of work that produces the next Step
- Done: terminal, carries the final result

Continuations are plain callables from the reply to the next Step, so a
Step value *is* its own suspended computation. Traversals consume a Step
node by node and never mutate it.

Sequencing (``then``) substitutes a function at every Done leaf. Pending
binders are kept in a flat catenable frame sequence attached to the
continuation instead of being nested as closures, so arbitrarily long or
left-nested chains unwind in a loop with constant stack depth.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

UA = TypeVar("UA")
UR = TypeVar("UR")
DR = TypeVar("DR")
DV = TypeVar("DV")
R = TypeVar("R")
T = TypeVar("T")

Action = Callable[[], "Step[Any, Any, Any, Any, Any] | Awaitable[Step[Any, Any, Any, Any, Any]]"]


class Step(Generic[UA, UR, DR, DV, R]):
    """Base class of the four Step variants.

    Type parameters, in order: upstream request address, upstream reply,
    downstream reply, downstream value, final result.
    """

    __slots__ = ()

    def then(self, fn: Callable[[R], Step[UA, UR, DR, DV, T]]) -> Step[UA, UR, DR, DV, T]:
        """Sequence: continue with ``fn(result)`` once this step is Done."""
        return bind(self, fn)

    def map(self, fn: Callable[[R], T]) -> Step[UA, UR, DR, DV, T]:
        """Transform the final result, leaving the interaction untouched."""
        return bind(self, lambda result: Done(fn(result)))

    def __rshift__(self, other: Step[UA, UR, DR, DV, T]) -> Step[UA, UR, DR, DV, T]:
        """Sequence: ``a >> b`` runs ``a``, discards its result, then runs ``b``."""
        if not isinstance(other, Step):
            return NotImplemented
        return bind(self, lambda _: other)

    def __or__(self, other: Step[Any, Any, Any, Any, T]) -> Step[UA, UR, Any, Any, T]:
        """Connect: ``upstream | downstream`` is pull composition (``>->``)."""
        if not isinstance(other, Step):
            return NotImplemented
        from pipekit.kernel.compose import compose

        return compose(self, other)


@dataclass(frozen=True)
class AwaitUpstream(Step[UA, UR, DR, DV, R]):
    """Suspended, asking upstream to reply to ``address``."""

    address: UA
    resume: Callable[[UR], Step[UA, UR, DR, DV, R]]


@dataclass(frozen=True)
class EmitDownstream(Step[UA, UR, DR, DV, R]):
    """Suspended, offering ``value`` downstream."""

    value: DV
    resume: Callable[[DR], Step[UA, UR, DR, DV, R]]


@dataclass(frozen=True)
class Effect(Step[UA, UR, DR, DV, R]):
    """One unit of work; calling ``action`` yields the next Step.

    ``action`` may return an awaitable, in which case the step belongs to
    the asyncio effect context and must be run by an ``a*`` traversal.
    """

    action: Action


@dataclass(frozen=True)
class Done(Step[UA, UR, DR, DV, R]):
    """Terminal step carrying the final result."""

    result: R


pure = Done


def request(address: UA) -> Step[UA, UR, Any, Any, UR]:
    """Ask upstream for a reply to ``address``; the result is that reply."""
    return AwaitUpstream(address, Done)


def emit(value: DV) -> Step[Any, Any, DR, DV, DR]:
    """Offer ``value`` downstream; the result is the downstream reply."""
    return EmitDownstream(value, Done)


respond = emit


def lift(action: Callable[[], T | Awaitable[T]]) -> Step[Any, Any, Any, Any, T]:
    """Embed an effect; its return value becomes the step's result."""
    return Effect(map_effect(action, Done))


def map_effect(action: Callable[[], Any], fn: Callable[[Any], Any]) -> Callable[[], Any]:
    """Return an action that runs ``action`` then applies ``fn`` to its outcome.

    Awaitable outcomes stay awaitable: ``fn`` is applied once they resolve.
    """

    def run() -> Any:
        outcome = action()
        if inspect.isawaitable(outcome):
            return _Later(outcome, fn)
        return fn(outcome)

    return run


class _Later:
    """An awaitable outcome with a function still to apply.

    ``close()`` reaches down to the awaitable the effect returned, so a
    traversal that refuses it leaves no coroutine unawaited.
    """

    __slots__ = ("outcome", "fn")

    def __init__(self, outcome: Awaitable[Any], fn: Callable[[Any], Any]) -> None:
        self.outcome = outcome
        self.fn = fn

    def __await__(self) -> Any:
        return self._resolve().__await__()

    async def _resolve(self) -> Any:
        return self.fn(await self.outcome)

    def close(self) -> None:
        close = getattr(self.outcome, "close", None)
        if close is not None:
            close()


def bind(step: Step[UA, UR, DR, DV, R], fn: Callable[[R], Step[UA, UR, DR, DV, T]]) -> Step[UA, UR, DR, DV, T]:
    """Structural substitution of ``fn`` at every Done leaf of ``step``."""
    return _unwind(step, fn)


# --- Frames ---
#
# A frame sequence is either None, a single binder, or a (left, right)
# pair of frame sequences. Concatenation is O(1); taking the first binder
# rotates left-nested pairs in a loop.

Frames = Any


def _concat(left: Frames, right: Frames) -> Frames:
    if left is None:
        return right
    if right is None:
        return left
    return (left, right)


def _uncons(frames: Frames) -> tuple[Callable[[Any], Step[Any, Any, Any, Any, Any]], Frames]:
    while isinstance(frames, tuple):
        left, right = frames
        if not isinstance(left, tuple):
            return left, right
        frames = (left[0], (left[1], right))
    return frames, None


class _Resume:
    """A continuation followed by pending binders."""

    __slots__ = ("resume", "frames")

    def __init__(self, resume: Callable[[Any], Step[Any, Any, Any, Any, Any]], frames: Frames) -> None:
        self.resume = resume
        self.frames = frames

    def __call__(self, reply: Any) -> Step[Any, Any, Any, Any, Any]:
        return _unwind(self.resume(reply), self.frames)

    def __repr__(self) -> str:
        return f"_Resume({self.resume!r})"


class _Perform:
    """An effect action followed by pending binders."""

    __slots__ = ("action", "frames")

    def __init__(self, action: Action, frames: Frames) -> None:
        self.action = action
        self.frames = frames

    def __call__(self) -> Any:
        outcome = self.action()
        if inspect.isawaitable(outcome):
            frames = self.frames
            return _Later(outcome, lambda step: _unwind(step, frames))
        return _unwind(outcome, self.frames)

    def __repr__(self) -> str:
        return f"_Perform({self.action!r})"


def _resume_with(resume: Callable[[Any], Any], frames: Frames) -> _Resume:
    if isinstance(resume, _Resume):
        return _Resume(resume.resume, _concat(resume.frames, frames))
    return _Resume(resume, frames)


def _perform_with(action: Action, frames: Frames) -> _Perform:
    if isinstance(action, _Perform):
        return _Perform(action.action, _concat(action.frames, frames))
    return _Perform(action, frames)


def _unwind(step: Step[Any, Any, Any, Any, Any], frames: Frames) -> Step[Any, Any, Any, Any, Any]:
    while frames is not None:
        if isinstance(step, Done):
            binder, frames = _uncons(frames)
            step = binder(step.result)
        elif isinstance(step, EmitDownstream):
            return EmitDownstream(step.value, _resume_with(step.resume, frames))
        elif isinstance(step, AwaitUpstream):
            return AwaitUpstream(step.address, _resume_with(step.resume, frames))
        elif isinstance(step, Effect):
            return Effect(_perform_with(step.action, frames))
        else:
            break
    if not isinstance(step, Step):
        raise TypeError(f"expected a Step, got {type(step).__name__}: {step!r}")
    return step
