"""Structured values - parse text into typed values and format them back."""

from .errors import CastError
from .parser import parse_json_if_needed, read, read_as, read_json, read_ln, show
from .schema import CallableSchema, OutputSchema, PydanticSchema

__all__ = [
    "CastError",
    "OutputSchema",
    "CallableSchema",
    "PydanticSchema",
    "parse_json_if_needed",
    "read",
    "read_as",
    "read_json",
    "read_ln",
    "show",
]
