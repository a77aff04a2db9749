"""The single state slot threaded through an exchange combinator."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pipekit.kernel.step import Effect, Step, lift

S = TypeVar("S")
T = TypeVar("T")


@dataclass(frozen=True)
class Held(Generic[T]):
    """A value accepted but not yet passed on.

    Wrapping keeps "nothing held" (``None``) distinct from holding ``None``.
    """

    value: T


class StateSlot(Generic[S]):
    """One mutable cell, owned by a single traversal of one step.

    Reads and writes are effects, so they happen exactly when the
    traversal reaches them and in order with every other effect.
    """

    __slots__ = ("_value",)

    def __init__(self, initial: S) -> None:
        self._value = initial

    def get(self) -> Step[Any, Any, Any, Any, S]:
        return lift(self._read)

    def put(self, value: S) -> Step[Any, Any, Any, Any, None]:
        return lift(lambda: self._write(value))

    def _read(self) -> S:
        return self._value

    def _write(self, value: S) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"StateSlot({self._value!r})"


def with_state(initial: S, build: Callable[[StateSlot[S]], Step[Any, Any, Any, Any, T]]) -> Step[Any, Any, Any, Any, T]:
    """Run ``build`` against a fresh slot each time the step is traversed.

    The slot is created by the step's first effect, so one step value can
    be traversed any number of times without two runs sharing state.
    """
    return Effect(lambda: build(StateSlot(initial)))
