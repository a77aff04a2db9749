"""Traversal trace - separate from the stream itself.

A Trace captures what a traversal observed, node by node, for debugging
and for comparing two steps in the law checks. It never changes what the
traversal does.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Evidence:
    """One observed interaction.

    Attributes:
        action: What happened ("request", "emit", "effect", "done").
        id: Position of the event in its trace.
        payload: The address, value or result involved, if any.
        timestamp: When the event was recorded.
    """

    action: str
    id: int = 0
    payload: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def key(self) -> tuple[str, Any]:
        """The observable part of the event, without bookkeeping."""
        return (self.action, self.payload)


class Trace:
    """Ordered record of traversal events.

    Performance guarantees:
    - Trace disabled → single None check overhead at the call site
    - Evidence append is O(1)
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._events: list[Evidence] = []

    def record(self, action: str, payload: Any = None) -> int | None:
        """Record an event and return its id, or None if tracing is disabled."""
        if not self.enabled:
            return None
        event_id = len(self._events)
        self._events.append(Evidence(action=action, id=event_id, payload=payload))
        return event_id

    def get_events(self) -> list[Evidence]:
        """Get all recorded events."""
        return list(self._events)

    def keys(self) -> list[tuple[str, Any]]:
        """The observable sequence, suitable for equality checks."""
        return [event.key() for event in self._events]

    def find_all(self, action: str) -> list[Evidence]:
        """All events with the given action."""
        return [event for event in self._events if event.action == action]

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        """Clear all events (for reuse)."""
        self._events.clear()
