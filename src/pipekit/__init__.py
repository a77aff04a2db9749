"""pipekit - composable, effectful, bidirectional streams.

A stream is a Step: a tree of requests, emits, effects and a final
result. Steps compose with ``|`` (and four substitution algebras), and
are run by a strict traversal engine.
"""

from pipekit.combinators import generalize, tee, zip, zip_with
from pipekit.errors import ContractViolation, EffectContextError, PipekitError
from pipekit.kernel import (
    AwaitUpstream,
    Client,
    Closed,
    Done,
    Effect,
    EmitDownstream,
    Evidence,
    Proxy,
    Server,
    Sink,
    Source,
    Step,
    Trace,
    Transformer,
    X,
    await_,
    cat,
    closed,
    compose,
    emit,
    feed,
    for_each,
    lift,
    pull,
    pull_compose,
    pull_from,
    push,
    push_compose,
    push_into,
    reflect,
    request,
    request_compose,
    respond,
    respond_compose,
    substitute_requests,
    yield_,
)
from pipekit.traversal import (
    Yielded,
    advance,
    afold,
    afold_m,
    afold_m_returning,
    anext_step,
    arun_effect,
    ato_list,
    fold,
    fold_m,
    fold_m_returning,
    fold_returning,
    next_step,
    run_effect,
    to_list,
    to_list_returning,
)

__version__ = "0.1.0"

__all__ = [
    # Step
    "Step",
    "AwaitUpstream",
    "EmitDownstream",
    "Effect",
    "Done",
    "request",
    "emit",
    "respond",
    "lift",
    "await_",
    "yield_",
    # Shapes
    "X",
    "closed",
    "Proxy",
    "Source",
    "Sink",
    "Transformer",
    "Closed",
    "Client",
    "Server",
    "cat",
    # Algebras
    "compose",
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
    "reflect",
    # Traversal
    "run_effect",
    "arun_effect",
    "advance",
    "next_step",
    "anext_step",
    "Yielded",
    "fold",
    "fold_returning",
    "fold_m",
    "fold_m_returning",
    "afold",
    "afold_m",
    "afold_m_returning",
    "to_list",
    "to_list_returning",
    "ato_list",
    # Exchange combinators
    "tee",
    "generalize",
    "zip",
    "zip_with",
    # Tracing
    "Trace",
    "Evidence",
    # Errors
    "PipekitError",
    "ContractViolation",
    "EffectContextError",
]
