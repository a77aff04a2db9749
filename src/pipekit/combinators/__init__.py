"""Combinators - exchange combinators that thread one slot of state."""

from pipekit.combinators.ops import generalize, tee, zip, zip_with
from pipekit.combinators.state import Held, StateSlot, with_state

__all__ = [
    "tee",
    "generalize",
    "zip",
    "zip_with",
    "Held",
    "StateSlot",
    "with_state",
]
