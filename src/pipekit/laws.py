"""Observational equivalence, used to check the algebraic laws.

Two steps are equivalent when, driven by the same scripted replies, they
make the same requests, emit the same values, and finish with the same
result. Effects run as they are reached; Effect nodes themselves are not
observable, only what the effects do.

The composition algebras satisfy the following laws:

1. Respond category (``for_each``):
   for_each(f(x), respond) ~ f(x)
   for_each(respond(x), f) ~ f(x)
   for_each(for_each(p, f), g) ~ for_each(p, lambda x: for_each(f(x), g))

2. Request category (``substitute_requests``):
   substitute_requests(request, f(x)) ~ f(x)
   substitute_requests(f, request(x)) ~ f(x)
   request_compose is associative

3. Pull category: pull_compose(pull, f) ~ f ~ pull_compose(f, pull);
   pull_compose is associative, so (a | b) | c ~ a | (b | c) and
   cat() | p ~ p ~ p | cat()

4. Push category: push_compose(push, f) ~ f ~ push_compose(f, push);
   push_compose is associative
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pipekit.kernel.step import AwaitUpstream, Done, Effect, EmitDownstream, Step
from pipekit.kernel.trace import Trace
from pipekit.traversal import perform

_END = object()


def transcript(
    step: Step[Any, Any, Any, Any, Any],
    *,
    upstream: Iterable[Any] = (),
    downstream: Iterable[Any] = (),
    max_events: int = 1000,
    trace: Trace | None = None,
) -> list[tuple[str, Any]]:
    """Drive ``step`` with scripted replies and return what it did.

    Each request is answered by the next item of ``upstream`` and each
    emitted value by the next item of ``downstream``. When a script runs
    out the step is left suspended and a ``("starved", side)`` event ends
    the transcript. Driving also stops after ``max_events`` events, so
    infinite steps can be compared on a prefix.

    Events are also recorded in ``trace`` when one is given; the returned
    transcript and the ``max_events`` limit cover this call only.

    Returns:
        List of ``(action, payload)`` pairs: ``request``, ``emit``,
        ``done``, ``starved`` or ``truncated``.
    """
    events: list[tuple[str, Any]] = []

    def observe(action: str, payload: Any) -> None:
        events.append((action, payload))
        if trace is not None:
            trace.record(action, payload)

    replies_up = iter(upstream)
    replies_down = iter(downstream)
    while len(events) < max_events:
        if isinstance(step, AwaitUpstream):
            observe("request", step.address)
            reply = next(replies_up, _END)
            if reply is _END:
                observe("starved", "upstream")
                break
            step = step.resume(reply)
        elif isinstance(step, EmitDownstream):
            observe("emit", step.value)
            reply = next(replies_down, _END)
            if reply is _END:
                observe("starved", "downstream")
                break
            step = step.resume(reply)
        elif isinstance(step, Effect):
            step = perform(step.action, "transcript")
        elif isinstance(step, Done):
            observe("done", step.result)
            break
        else:
            raise TypeError(f"expected a Step, got {type(step).__name__}: {step!r}")
    else:
        observe("truncated", max_events)
    return events


def equivalent(
    left: Step[Any, Any, Any, Any, Any],
    right: Step[Any, Any, Any, Any, Any],
    **script: Any,
) -> bool:
    """True if ``left`` and ``right`` produce the same transcript for ``script``."""
    replies_up = list(script.pop("upstream", ()))
    replies_down = list(script.pop("downstream", ()))
    return transcript(left, upstream=replies_up, downstream=replies_down, **script) == transcript(
        right, upstream=replies_up, downstream=replies_down, **script
    )
