"""Producers - sources built from Python values and effects."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from pipekit.kernel.compose import feed
from pipekit.kernel.shapes import Source, cat, yield_
from pipekit.kernel.step import Done, Effect, lift

A = TypeVar("A")
S = TypeVar("S")

_EXHAUSTED = object()


def each(values: Iterable[A]) -> Source[A, None]:
    """Emit every element of ``values`` in order.

    Sequences are walked by index, so the step can be traversed again.
    Other iterables are iterated lazily, one ``next()`` effect per value,
    from an iterator created when the traversal starts.
    """
    if isinstance(values, Sequence):
        return _each_index(values, 0)
    return Effect(lambda: _each_iterator(iter(values)))


def _each_index(values: Sequence[A], position: int) -> Source[A, None]:
    if position >= len(values):
        return Done(None)
    return yield_(values[position]).then(lambda _: _each_index(values, position + 1))


def _each_iterator(iterator: Any) -> Source[A, None]:
    def on_next(value: Any) -> Source[A, None]:
        if value is _EXHAUSTED:
            return Done(None)
        return yield_(value).then(lambda _: _each_iterator(iterator))

    return lift(lambda: next(iterator, _EXHAUSTED)).then(on_next)


def repeat_m(action: Callable[[], A]) -> Source[A, Any]:
    """Run ``action`` forever, emitting each result."""
    return feed(lift(action), cat())


def replicate_m(count: int, action: Callable[[], A]) -> Source[A, None]:
    """Run ``action`` ``count`` times, emitting each result."""
    if count <= 0:
        return Done(None)
    return lift(action).then(yield_).then(lambda _: replicate_m(count - 1, action))


def unfoldr(step: Callable[[S], tuple[A, S] | None], seed: S) -> Source[A, None]:
    """Unfold a source from a seed.

    ``step(seed)`` runs as an effect and returns either ``(value, next_seed)``
    or ``None`` to stop.
    """

    def on_step(outcome: tuple[A, S] | None) -> Source[A, None]:
        if outcome is None:
            return Done(None)
        value, next_seed = outcome
        return yield_(value).then(lambda _: unfoldr(step, next_seed))

    return lift(lambda: step(seed)).then(on_step)
