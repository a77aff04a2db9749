"""The specialised shapes of Step.

A shape fixes one or both interfaces of a Step to the uninhabited type
``X``. Shapes are a calling convention: nothing checks them at
construction time. A traversal that finds a step crossing a closed
interface calls ``closed``, which always raises.

    Source[B, R]          emits B, never requests
    Sink[A, R]            requests A, never emits
    Transformer[A, B, R]  requests A and emits B
    Closed[R]             neither requests nor emits
"""

from __future__ import annotations

from typing import Any, NoReturn, TypeVar

from pipekit.errors import ContractViolation
from pipekit.kernel.compose import pull
from pipekit.kernel.step import Step, emit, request

A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")


class Void:
    """The uninhabited type. It has no instances."""

    __slots__ = ()

    def __new__(cls) -> NoReturn:  # type: ignore[misc]
        raise TypeError("X is uninhabited and cannot be constructed")


X = Void


def closed(value: Any, shape: str = "step") -> NoReturn:
    """Unreachable: ``value`` crossed an interface declared closed."""
    raise ContractViolation(shape, value)


Proxy = Step
Source = Step[X, None, None, B, R]
Sink = Step[None, A, X, X, R]
Transformer = Step[None, A, None, B, R]
Closed = Step[X, None, None, X, R]
Client = Step[A, B, X, X, R]
Server = Step[X, None, A, B, R]


def await_() -> Step[None, A, Any, Any, A]:
    """Request the next value from upstream."""
    return request(None)


def yield_(value: B) -> Step[Any, Any, None, B, None]:
    """Send ``value`` downstream."""
    return emit(value)


def cat() -> Transformer[A, A, Any]:
    """The identity transformer: forward every value unchanged, forever."""
    return pull(None)
