"""Textual parse and format adapters.

Parsing is lossy: a value that does not parse completely is
dropped (and logged at debug level), and the stream continues.
Formatting is total.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pipekit.handles import stdin_ln
from pipekit.kernel.compose import for_each
from pipekit.kernel.shapes import Source, Transformer, cat, yield_
from pipekit.kernel.step import Done
from pipekit.prelude.pipes import map
from pipekit.structured.errors import CastError
from pipekit.structured.schema import OutputSchema, PydanticSchema

logger = logging.getLogger(__name__)

T = TypeVar("T")

PARSE_FAILURES = (CastError, ValueError, TypeError)


def parse_json_if_needed(value: str | Any) -> Any:
    """Decode ``value`` as JSON if it is text; pass anything else through.

    Raises:
        CastError: If the value is text but not valid JSON.
    """
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise CastError(f"Invalid JSON: {e.msg} at position {e.pos}", value) from e
    return value


def read(parser: Callable[[str], T]) -> Transformer[str, T, Any]:
    """Parse every text value with ``parser``, dropping the ones it rejects.

    ``parser`` rejects a value by raising ``ValueError``, ``TypeError`` or
    ``CastError``; any other exception propagates.
    """

    def parse(text: str) -> Transformer[str, T, None]:
        try:
            parsed = parser(text)
        except PARSE_FAILURES as exc:
            logger.debug("dropping unparsable value %r: %s", text, exc)
            return Done(None)
        return yield_(parsed)

    return for_each(cat(), parse)


def read_as(tp: Any) -> Transformer[str, Any, Any]:
    """Parse every text value into ``tp`` with pydantic, dropping failures."""
    return read(PydanticSchema(tp).validate)


def read_json(schema: OutputSchema[T]) -> Transformer[str, T, Any]:
    """Decode every text value as JSON and validate it, dropping failures."""
    return read(lambda text: schema.validate(parse_json_if_needed(text)))


def read_ln(parser: Callable[[str], T]) -> Source[T, None]:
    """Parse the lines of standard input, dropping the ones that do not parse."""
    return stdin_ln() | read(parser)


def show(formatter: Callable[[Any], str] = str) -> Transformer[Any, str, Any]:
    """Format every value as text."""
    return map(formatter)
