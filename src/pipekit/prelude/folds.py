"""Folds - reduce a source to a single value.

The early-stopping folds (``all``, ``any``, ``find``, ``head``, ``index``,
...) are compositions of a filtering or limiting transformer with
``next_step``: they pull the source only until the answer is known, and
never evaluate the value after the deciding one.
"""

from __future__ import annotations

import builtins
import operator
from collections.abc import Callable
from typing import Any, TypeVar

from pipekit.kernel.shapes import Source
from pipekit.prelude.pipes import drop, filter, find_indices
from pipekit.traversal import Yielded, fold, next_step

A = TypeVar("A")
D = TypeVar("D")


def _identity(value: A) -> A:
    return value


def null(source: Source[Any, Any]) -> bool:
    """True if ``source`` finishes without emitting."""
    return not isinstance(next_step(source), Yielded)


def all(predicate: Callable[[A], bool], source: Source[A, Any]) -> bool:  # noqa: A001
    """True if every value satisfies ``predicate``; stops at the first that does not."""
    return null(source | filter(lambda value: not predicate(value)))


def any(predicate: Callable[[A], bool], source: Source[A, Any]) -> bool:  # noqa: A001
    """True if some value satisfies ``predicate``; stops at the first that does."""
    return not null(source | filter(predicate))


def and_(source: Source[bool, Any]) -> bool:
    """True if every value is true."""
    return all(_identity, source)


def or_(source: Source[bool, Any]) -> bool:
    """True if some value is true."""
    return any(_identity, source)


def elem(target: A, source: Source[A, Any]) -> bool:
    """True if some value equals ``target``."""
    return any(lambda value: value == target, source)


def not_elem(target: A, source: Source[A, Any]) -> bool:
    """True if no value equals ``target``."""
    return all(lambda value: value != target, source)


def head(source: Source[A, Any], default: D = None) -> A | D:
    """The first value, or ``default`` if ``source`` is empty."""
    first = next_step(source)
    if isinstance(first, Yielded):
        return first.value
    return default


def find(predicate: Callable[[A], bool], source: Source[A, Any], default: D = None) -> A | D:
    """The first value satisfying ``predicate``, or ``default``."""
    return head(source | filter(predicate), default)


def find_index(predicate: Callable[[A], bool], source: Source[A, Any], default: D = None) -> int | D:
    """The position of the first value satisfying ``predicate``, or ``default``."""
    return head(source | find_indices(predicate), default)


def index(position: int, source: Source[A, Any], default: D = None) -> A | D:
    """The value at ``position`` (zero-based), or ``default`` if the source is shorter."""
    return head(source | drop(position), default)


def last(source: Source[A, Any], default: D = None) -> A | D:
    """The final value, or ``default`` if ``source`` is empty."""
    current = next_step(source)
    if not isinstance(current, Yielded):
        return default
    while True:
        following = next_step(current.rest)
        if not isinstance(following, Yielded):
            return current.value
        current = following


def length(source: Source[Any, Any]) -> int:
    """Count the values."""
    return fold(lambda count, _: count + 1, 0, _identity, source)


_NOTHING: Any = object()


def _keep(pick: Callable[[A, A], A]) -> Callable[[A, A], A]:
    def step(best: A, value: A) -> A:
        return value if best is _NOTHING else pick(best, value)

    return step


def _or_none(best: A) -> A | None:
    return None if best is _NOTHING else best


def maximum(source: Source[A, Any]) -> A | None:
    """The largest value, or None if ``source`` is empty."""
    return fold(_keep(builtins.max), _NOTHING, _or_none, source)


def minimum(source: Source[A, Any]) -> A | None:
    """The smallest value, or None if ``source`` is empty."""
    return fold(_keep(builtins.min), _NOTHING, _or_none, source)


def sum(source: Source[A, Any]) -> A:  # noqa: A001
    """Add the values; 0 for an empty source."""
    return fold(operator.add, 0, _identity, source)


def product(source: Source[A, Any]) -> A:
    """Multiply the values; 1 for an empty source."""
    return fold(operator.mul, 1, _identity, source)
