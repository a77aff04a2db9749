from __future__ import annotations

import errno
from dataclasses import dataclass, field
from typing import Any

from pipekit import Source, lift, yield_
from pipekit.kernel.step import Done


@dataclass
class FakeHandle:
    """Writable text handle that fails after ``fail_after`` writes."""

    fail_after: int | None = None
    fail_errno: int = errno.EPIPE
    written: list[str] = field(default_factory=list)
    flushes: int = 0

    def write(self, text: str) -> int:
        if self.fail_after is not None and len(self.written) >= self.fail_after:
            raise OSError(self.fail_errno, "simulated write failure")
        self.written.append(text)
        return len(text)

    def flush(self) -> None:
        self.flushes += 1


@dataclass
class PullLog:
    """Records every value a counted source hands out."""

    pulled: list[Any] = field(default_factory=list)

    def source(self, values: list[Any], result: Any = None) -> Source[Any, Any]:
        """A source that logs each value, as an effect, right before emitting it."""

        def go(position: int) -> Source[Any, Any]:
            if position >= len(values):
                return Done(result)
            value = values[position]
            return lift(lambda: self.pulled.append(value)).then(
                lambda _: yield_(value)
            ).then(lambda _: go(position + 1))

        return go(0)
