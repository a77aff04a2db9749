"""Kernel layer - the Step representation and its composition algebras."""

from pipekit.kernel.compose import (
    compose,
    feed,
    for_each,
    pull,
    pull_compose,
    pull_from,
    push,
    push_compose,
    push_into,
    reflect,
    request_compose,
    respond_compose,
    substitute_requests,
)
from pipekit.kernel.shapes import (
    Client,
    Closed,
    Proxy,
    Server,
    Sink,
    Source,
    Transformer,
    Void,
    X,
    await_,
    cat,
    closed,
    yield_,
)
from pipekit.kernel.step import (
    AwaitUpstream,
    Done,
    Effect,
    EmitDownstream,
    Step,
    bind,
    emit,
    lift,
    map_effect,
    pure,
    request,
    respond,
)
from pipekit.kernel.trace import Evidence, Trace

__all__ = [
    # Step
    "Step",
    "AwaitUpstream",
    "EmitDownstream",
    "Effect",
    "Done",
    "pure",
    "bind",
    "request",
    "emit",
    "respond",
    "lift",
    "map_effect",
    # Shapes
    "X",
    "Void",
    "closed",
    "Proxy",
    "Source",
    "Sink",
    "Transformer",
    "Closed",
    "Client",
    "Server",
    "await_",
    "yield_",
    "cat",
    # Algebras
    "for_each",
    "respond_compose",
    "substitute_requests",
    "request_compose",
    "feed",
    "pull_from",
    "pull_compose",
    "pull",
    "push_into",
    "push_compose",
    "push",
    "compose",
    "reflect",
    # Tracing
    "Evidence",
    "Trace",
]
