"""Schemas that validate a decoded value into a typed one."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


class OutputSchema(Protocol[T]):
    """Protocol for value schemas used by ``read_json``."""

    def validate(self, value: Any) -> T:
        """Return the typed value, or raise ``ValueError`` / ``TypeError``."""
        ...

    def describe(self) -> str:
        """Human-readable name of the schema, for logs."""
        ...


@dataclass(frozen=True)
class CallableSchema(OutputSchema[T]):
    """Validate with a plain function that raises on bad input."""

    fn: Callable[[Any], T]
    name: str | None = None

    def validate(self, value: Any) -> T:
        return self.fn(value)

    def describe(self) -> str:
        return self.name or getattr(self.fn, "__name__", repr(self.fn))


@dataclass(frozen=True)
class PydanticSchema(OutputSchema[T]):
    """Validate with pydantic; ``model`` is any type a TypeAdapter accepts.

    Validation runs in lax mode, so ``PydanticSchema(int)`` accepts ``"12"``
    but rejects ``"12x"``.
    """

    model: Any
    _adapter: TypeAdapter[Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_adapter", TypeAdapter(self.model))

    def validate(self, value: Any) -> T:
        return self._adapter.validate_python(value)

    def describe(self) -> str:
        return f"PydanticSchema({getattr(self.model, '__name__', self.model)!s})"
