"""Error types for the textual parse adapters."""

from __future__ import annotations

from pipekit.errors import PipekitError


class CastError(PipekitError, ValueError):
    """A text value could not be turned into the requested type.

    Keeps the raw value so a dropped item can still be logged.
    """

    def __init__(self, message: str, raw_value: object) -> None:
        self.raw_value = raw_value
        super().__init__(message)

    def __repr__(self) -> str:
        return f"CastError({self.args[0]!r}, raw_value={self.raw_value!r})"
