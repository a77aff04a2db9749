"""Library-specific exceptions. Failures raised by user effects pass through unmodified."""

from __future__ import annotations

from typing import Any


class PipekitError(Exception):
    """Base exception for all pipekit errors."""

    pass


class ContractViolation(PipekitError, AssertionError):
    """Raised when a step reaches an interface its shape declares closed.

    A Source that requests, a Sink that emits, or a Closed step that does
    either is a programming error. It is never recovered from.

    Attributes:
        shape: Name of the shape whose contract was broken.
        offending: The value that crossed the closed interface.
    """

    def __init__(self, shape: str, offending: Any = None) -> None:
        self.shape = shape
        self.offending = offending
        super().__init__(
            f"unreachable: {shape} reached a closed interface with {offending!r}"
        )


class EffectContextError(PipekitError):
    """Raised when a synchronous traversal meets an asynchronous effect."""

    def __init__(self, entry_point: str) -> None:
        self.entry_point = entry_point
        super().__init__(
            f"{entry_point}() met an awaitable effect; "
            f"run the step with an asynchronous entry point (arun_effect, afold, ...)"
        )
