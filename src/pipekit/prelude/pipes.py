"""Pipes - transformers between an upstream and a downstream.

Intended to be imported qualified, since several names match builtins:

    from pipekit import prelude as P
    source | P.filter(is_even) | P.map(str)
"""

# Laws, with ``~`` meaning observably equivalent:
#
#   map(identity) ~ cat()            map(g . f) ~ map(f) | map(g)
#   filter(always) ~ cat()           filter(p and q) ~ filter(p) | filter(q)
#   take(0) ~ Done(None)             take(min(m, n)) ~ take(m) | take(n)
#   drop(0) ~ cat()                  drop(m + n) ~ drop(m) | drop(n)

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pipekit.kernel.compose import for_each
from pipekit.kernel.shapes import Transformer, await_, cat, yield_
from pipekit.kernel.step import Done, lift
from pipekit.prelude.producers import each

A = TypeVar("A")
B = TypeVar("B")
X_ = TypeVar("X_")


def map(fn: Callable[[A], B]) -> Transformer[A, B, Any]:  # noqa: A001
    """Apply ``fn`` to every value flowing downstream."""
    return for_each(cat(), lambda value: yield_(fn(value)))


def map_m(action: Callable[[A], B]) -> Transformer[A, B, Any]:
    """Apply ``action`` to every value as an effect and forward its result."""
    return for_each(cat(), lambda value: lift(lambda: action(value)).then(yield_))


def sequence() -> Transformer[Callable[[], A], A, Any]:
    """Run every incoming action and forward its result."""
    return map_m(lambda action: action())


def map_foldable(fn: Callable[[A], Iterable[B]]) -> Transformer[A, B, Any]:
    """Apply ``fn`` to every value and forward each element of the result."""
    return for_each(cat(), lambda value: each(fn(value)))


def filter(predicate: Callable[[A], bool]) -> Transformer[A, A, Any]:  # noqa: A001
    """Forward only the values that satisfy ``predicate``."""
    return for_each(cat(), lambda value: yield_(value) if predicate(value) else Done(None))


def filter_m(predicate: Callable[[A], bool]) -> Transformer[A, A, Any]:
    """Forward only the values for which the effectful ``predicate`` holds."""

    def check(value: A) -> Transformer[A, A, None]:
        return lift(lambda: predicate(value)).then(lambda keep: yield_(value) if keep else Done(None))

    return for_each(cat(), check)


def take(count: int) -> Transformer[A, A, None]:
    """Forward the first ``count`` values, then finish."""
    if count <= 0:
        return Done(None)
    return await_().then(yield_).then(lambda _: take(count - 1))


def take_while(predicate: Callable[[A], bool]) -> Transformer[A, A, None]:
    """Forward values while they satisfy ``predicate``; finish at the first that does not."""
    return take_while_returning(predicate).map(lambda _: None)


def take_while_returning(predicate: Callable[[A], bool]) -> Transformer[A, A, A]:
    """Like ``take_while``, but finish with the value that failed the predicate."""

    def check(value: A) -> Transformer[A, A, A]:
        if predicate(value):
            return yield_(value).then(lambda _: take_while_returning(predicate))
        return Done(value)

    return await_().then(check)


def drop(count: int) -> Transformer[A, A, Any]:
    """Discard the first ``count`` values, then forward the rest."""
    if count <= 0:
        return cat()
    return await_().then(lambda _: drop(count - 1))


def drop_while(predicate: Callable[[A], bool]) -> Transformer[A, A, Any]:
    """Discard values until one fails ``predicate``, then forward everything."""

    def check(value: A) -> Transformer[A, A, Any]:
        if predicate(value):
            return drop_while(predicate)
        return yield_(value) >> cat()

    return await_().then(check)


def concat() -> Transformer[Iterable[A], A, Any]:
    """Flatten every incoming iterable."""
    return for_each(cat(), each)


def elem_indices(target: A) -> Transformer[A, int, Any]:
    """Emit the positions of values equal to ``target``."""
    return find_indices(lambda value: value == target)


def find_indices(predicate: Callable[[A], bool]) -> Transformer[A, int, Any]:
    """Emit the positions of values that satisfy ``predicate``."""

    def go(position: int) -> Transformer[A, int, Any]:
        def check(value: A) -> Transformer[A, int, Any]:
            found = yield_(position) if predicate(value) else Done(None)
            return found.then(lambda _: go(position + 1))

        return await_().then(check)

    return go(0)


def scan(step: Callable[[X_, A], X_], begin: X_, done: Callable[[X_], B]) -> Transformer[A, B, Any]:
    """Strict left scan: emit ``done`` of every intermediate accumulator, starting with ``begin``."""

    def go(acc: X_) -> Transformer[A, B, Any]:
        return yield_(done(acc)).then(lambda _: await_()).then(lambda value: go(step(acc, value)))

    return go(begin)


def scan_m(
    step: Callable[[X_, A], X_],
    begin: Callable[[], X_],
    done: Callable[[X_], B],
) -> Transformer[A, B, Any]:
    """Strict left scan whose ``begin``, ``step`` and ``done`` perform effects."""

    def go(acc: X_) -> Transformer[A, B, Any]:
        return (
            lift(lambda: done(acc))
            .then(yield_)
            .then(lambda _: await_())
            .then(lambda value: lift(lambda: step(acc, value)))
            .then(go)
        )

    return lift(begin).then(go)


def chain(action: Callable[[A], Any]) -> Transformer[A, A, Any]:
    """Run ``action`` on every value as an effect, then forward the value."""
    return for_each(cat(), lambda value: lift(lambda: action(value)) >> yield_(value))
