"""Consumers - sinks that act on every value they receive."""

from __future__ import annotations

import builtins
from collections.abc import Callable
from typing import Any, TypeVar

from pipekit.kernel.compose import for_each
from pipekit.kernel.shapes import Sink, cat
from pipekit.kernel.step import Done, lift

A = TypeVar("A")


def consume_with(action: Callable[[A], Any]) -> Sink[A, Any]:
    """Call ``action`` on every value, as an effect. Never finishes."""
    return for_each(cat(), lambda value: lift(lambda: action(value)).map(lambda _: None))


def print(**kwargs: Any) -> Sink[Any, Any]:  # noqa: A001
    """Print every value with the builtin ``print``; keyword arguments are passed on."""
    return consume_with(lambda value: builtins.print(value, **kwargs))


def drain() -> Sink[Any, Any]:
    """Discard every value."""
    return for_each(cat(), lambda _: Done(None))
