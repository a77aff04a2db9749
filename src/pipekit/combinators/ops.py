"""Exchange combinators: tee, generalize, zip_with, zip."""

# The exchange combinators satisfy the following laws, where ``~`` means
# "observably equivalent" (see pipekit.laws):
#
# 1. Tee is transparent: source | tee(sink) emits exactly what source emits
#    and sink receives the same values in the same order
#
# 2. Generalize preserves identity: generalize(cat())(x) ~ pull(x)
#
# 3. Generalize distributes over composition:
#    generalize(f | g) ~ pull_compose(generalize(f), generalize(g))
#
# 4. Zip stops with the first exhausted side, left checked first

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pipekit.combinators.state import Held, StateSlot, with_state
from pipekit.kernel.compose import for_each, substitute_requests
from pipekit.kernel.shapes import Proxy, Sink, Source, Transformer, await_, closed, yield_
from pipekit.kernel.step import Done, Step, request, respond
from pipekit.traversal import Next, Yielded, advance

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
R = TypeVar("R")


def tee(sink: Sink[A, R]) -> Transformer[A, A, R]:
    """Turn a Sink into a Transformer that also forwards every value downstream.

    Each value the sink accepts is emitted downstream unchanged, once, in
    order. A value is emitted when the sink asks for the next one, or when
    the sink finishes.

    Args:
        sink: The consumer to wrap

    Returns:
        Transformer with the sink's result
    """

    def build(slot: StateSlot[Held[A] | None]) -> Transformer[A, A, R]:
        def flush() -> Step[Any, Any, None, A, None]:
            return slot.get().then(_emit_held)

        def upstream(_: None) -> Transformer[A, A, A]:
            return (
                flush()
                .then(lambda _: await_())
                .then(lambda value: slot.put(Held(value)).map(lambda _: value))
            )

        body = substitute_requests(upstream, for_each(sink, _sink_emitted))
        return body.then(lambda result: flush().map(lambda _: result))

    return with_state(None, build)


def _emit_held(held: Held[A] | None) -> Step[Any, Any, None, A, None]:
    if held is None:
        return Done(None)
    return yield_(held.value)


def _sink_emitted(value: Any) -> Step[Any, Any, Any, Any, Any]:
    closed(value, "Sink")


def generalize(pipe: Transformer[A, B, R]) -> Callable[[Any], Proxy[Any, A, Any, B, R]]:
    """Widen a unidirectional Transformer into a fully bidirectional one.

    The returned function takes the first upstream address. Every reply
    from downstream becomes the address of the next upstream request.

    generalize(cat()) ~ pull
    generalize(f | g) ~ pull_compose(generalize(f), generalize(g))
    """

    def widened(initial: Any) -> Proxy[Any, A, Any, B, R]:
        def build(slot: StateSlot[Any]) -> Proxy[Any, A, Any, B, R]:
            def upstream(_: None) -> Step[Any, A, Any, Any, A]:
                return slot.get().then(request)

            def downstream(value: B) -> Step[Any, Any, Any, B, None]:
                return respond(value).then(slot.put)

            return substitute_requests(upstream, for_each(pipe, downstream))

        return with_state(initial, build)

    return widened


def zip_with(combine: Callable[[A, B], C], left: Source[A, R], right: Source[B, R]) -> Source[C, R]:
    """Pair two sources value by value.

    Pulls from ``left`` first, then from ``right``, and emits
    ``combine(a, b)``. Finishes with the result of whichever side runs out
    first; when ``left`` runs out, ``right`` is not pulled again.
    """

    def go(lhs: Source[A, R], rhs: Source[B, R]) -> Source[C, R]:
        def on_left(first: Next[A, R]) -> Source[C, R]:
            if not isinstance(first, Yielded):
                return Done(first.result)

            def on_right(second: Next[B, R]) -> Source[C, R]:
                if not isinstance(second, Yielded):
                    return Done(second.result)
                return yield_(combine(first.value, second.value)).then(
                    lambda _: go(first.rest, second.rest)
                )

            return advance(rhs).then(on_right)

        return advance(lhs).then(on_left)

    return go(left, right)


def zip(left: Source[A, R], right: Source[B, R]) -> Source[tuple[A, B], R]:  # noqa: A001
    """Pair two sources into a source of tuples."""
    return zip_with(lambda a, b: (a, b), left, right)
