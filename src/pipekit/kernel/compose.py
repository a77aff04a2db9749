"""Composition algebras over Step.

Four substitution operators, each associative with a two-sided identity:

- respond:  ``for_each(p, f)`` replaces every emit of ``p`` by ``f(value)``
            (identity ``respond``)
- request:  ``substitute_requests(f, p)`` replaces every request of ``p``
            by ``f(address)`` (identity ``request``)
- pull:     ``pull_from(f, p)`` runs ``p`` and, on each request, drives
            ``f(address)`` until it emits (identity ``pull``)
- push:     ``push_into(p, f)`` runs ``p`` and, on each emit, drives
            ``f(value)`` until it requests (identity ``push``)

``compose(up, down)`` (``up | down``) is pull composition with a
constant upstream handler; its identity is ``cat``.

Every operator is an explicit loop: handing a value across a boundary
never grows the Python stack, however long the stream.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pipekit.kernel.step import (
    AwaitUpstream,
    Done,
    Effect,
    EmitDownstream,
    Step,
    bind,
    map_effect,
    request,
    respond,
)

AnyStep = Step[Any, Any, Any, Any, Any]
Handler = Callable[[Any], AnyStep]


def _finished(step: Any) -> AnyStep:
    if isinstance(step, Done):
        return step
    raise TypeError(f"expected a Step, got {type(step).__name__}: {step!r}")


# --- Respond category ---


def for_each(step: AnyStep, handler: Handler) -> AnyStep:
    """Substitute ``handler(value)`` for every value ``step`` emits (``//>``).

    The handler's result is the reply that resumes ``step``. Requests made
    by ``step`` or by the handler pass upstream unchanged.
    """
    while True:
        if isinstance(step, EmitDownstream):
            body = handler(step.value)
            if isinstance(body, Done):
                step = step.resume(body.result)
                continue
            return bind(body, _resume_for_each(step.resume, handler))
        if isinstance(step, AwaitUpstream):
            return AwaitUpstream(step.address, _resume_for_each(step.resume, handler))
        if isinstance(step, Effect):
            return Effect(map_effect(step.action, lambda nxt: for_each(nxt, handler)))
        return _finished(step)


def _resume_for_each(resume: Handler, handler: Handler) -> Handler:
    return lambda reply: for_each(resume(reply), handler)


def respond_compose(first: Handler, second: Handler) -> Handler:
    """Kleisli form of ``for_each`` (``/>/``)."""
    return lambda value: for_each(first(value), second)


# --- Request category ---


def substitute_requests(handler: Handler, step: AnyStep) -> AnyStep:
    """Substitute ``handler(address)`` for every request ``step`` makes (``>\\\\``).

    The handler's result is the reply that resumes ``step``. Values
    emitted by ``step`` or by the handler pass downstream unchanged.
    """
    while True:
        if isinstance(step, AwaitUpstream):
            body = handler(step.address)
            if isinstance(body, Done):
                step = step.resume(body.result)
                continue
            return bind(body, _resume_substitution(handler, step.resume))
        if isinstance(step, EmitDownstream):
            return EmitDownstream(step.value, _resume_substitution(handler, step.resume))
        if isinstance(step, Effect):
            return Effect(map_effect(step.action, lambda nxt: substitute_requests(handler, nxt)))
        return _finished(step)


def _resume_substitution(handler: Handler, resume: Handler) -> Handler:
    return lambda reply: substitute_requests(handler, resume(reply))


def request_compose(first: Handler, second: Handler) -> Handler:
    """Kleisli form of ``substitute_requests`` (``\\>\\``)."""
    return lambda address: substitute_requests(first, second(address))


def feed(draw: AnyStep, consumer: AnyStep) -> AnyStep:
    """Answer every request of ``consumer`` by running ``draw`` (``>~``)."""
    return substitute_requests(lambda _: draw, consumer)


# --- Pull and push categories ---


def pull_from(handler: Handler, step: AnyStep) -> AnyStep:
    """Run ``step``; each request it makes starts ``handler(address)`` (``+>>``)."""
    return _connect(handler, step, None, None)


def push_into(step: AnyStep, handler: Handler) -> AnyStep:
    """Run ``step``; each value it emits starts ``handler(value)`` (``>>~``)."""
    return _connect(None, None, step, handler)


def _connect(
    upstream_handler: Handler | None,
    downstream: AnyStep | None,
    upstream: AnyStep | None,
    downstream_handler: Handler | None,
) -> AnyStep:
    # Exactly one side drives at a time: the downstream step (pulling) or
    # the upstream step (pushing). Control passes with a single value.
    while True:
        if downstream is not None:
            if isinstance(downstream, AwaitUpstream):
                upstream = upstream_handler(downstream.address)
                downstream_handler = downstream.resume
                downstream = upstream_handler = None
                continue
            if isinstance(downstream, EmitDownstream):
                return EmitDownstream(downstream.value, _resume_pull(upstream_handler, downstream.resume))
            if isinstance(downstream, Effect):
                handler = upstream_handler
                return Effect(map_effect(downstream.action, lambda nxt: pull_from(handler, nxt)))
            return _finished(downstream)

        if isinstance(upstream, EmitDownstream):
            downstream = downstream_handler(upstream.value)
            upstream_handler = upstream.resume
            upstream = downstream_handler = None
            continue
        if isinstance(upstream, AwaitUpstream):
            return AwaitUpstream(upstream.address, _resume_push(upstream.resume, downstream_handler))
        if isinstance(upstream, Effect):
            handler = downstream_handler
            return Effect(map_effect(upstream.action, lambda nxt: push_into(nxt, handler)))
        return _finished(upstream)


def _resume_pull(upstream_handler: Handler, resume: Handler) -> Handler:
    return lambda reply: pull_from(upstream_handler, resume(reply))


def _resume_push(resume: Handler, downstream_handler: Handler) -> Handler:
    return lambda reply: push_into(resume(reply), downstream_handler)


def pull_compose(first: Handler, second: Handler) -> Handler:
    """Kleisli form of ``pull_from`` (``>+>``)."""
    return lambda address: pull_from(first, second(address))


def push_compose(first: Handler, second: Handler) -> Handler:
    """Kleisli form of ``push_into`` (``>~>``)."""
    return lambda value: push_into(first(value), second)


def pull(address: Any) -> AnyStep:
    """Identity of the pull category: forward requests up, values down, forever."""
    return bind(request(address), lambda value: bind(respond(value), pull))


def push(value: Any) -> AnyStep:
    """Identity of the push category: forward values down, requests up, forever."""
    return bind(respond(value), lambda address: bind(request(address), push))


def compose(upstream: AnyStep, downstream: AnyStep) -> AnyStep:
    """Connect ``upstream`` to ``downstream`` (``>->``); also ``upstream | downstream``."""
    return pull_from(lambda _: upstream, downstream)


# --- Duality ---


def reflect(step: AnyStep) -> AnyStep:
    """Swap the upstream and downstream interfaces of ``step``."""
    if isinstance(step, AwaitUpstream):
        resume = step.resume
        return EmitDownstream(step.address, lambda reply: reflect(resume(reply)))
    if isinstance(step, EmitDownstream):
        resume = step.resume
        return AwaitUpstream(step.value, lambda reply: reflect(resume(reply)))
    if isinstance(step, Effect):
        return Effect(map_effect(step.action, reflect))
    return _finished(step)
