"""Tests for the textual parse and format adapters."""

import logging
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from pipekit import PipekitError, to_list
from pipekit import prelude as P
from pipekit.structured import (
    CallableSchema,
    CastError,
    PydanticSchema,
    parse_json_if_needed,
    read,
    read_as,
    read_json,
    show,
)


@dataclass(frozen=True)
class UserProfile:
    name: str
    email: str


def parse_user_profile(data: dict) -> UserProfile:
    """Parse a user profile from a dict."""
    if not isinstance(data, dict):
        raise ValueError("Expected dict")
    for key in ("name", "email"):
        if key not in data:
            raise ValueError(f"Missing required field: {key}")
    return UserProfile(name=data["name"], email=data["email"])


class Point(BaseModel):
    x: int
    y: int


def test_parse_json_if_needed_with_string() -> None:
    """Test parsing JSON string."""
    assert parse_json_if_needed('{"x": 1}') == {"x": 1}


def test_parse_json_if_needed_passes_other_values_through() -> None:
    data = {"x": 1}
    assert parse_json_if_needed(data) is data


def test_parse_json_if_needed_with_invalid_json() -> None:
    """Test invalid JSON raises CastError."""
    with pytest.raises(CastError) as info:
        parse_json_if_needed('{"x": 1, invalid}')
    assert "Invalid JSON" in str(info.value)
    assert info.value.raw_value == '{"x": 1, invalid}'
    assert isinstance(info.value, ValueError)
    assert isinstance(info.value, PipekitError)


def test_read_drops_values_that_do_not_parse(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="pipekit.structured.parser"):
        assert to_list(P.each(["1", "x", "3"]) | read(int)) == [1, 3]
    assert "'x'" in caplog.text


def test_read_propagates_unexpected_errors() -> None:
    def broken(text: str) -> int:
        raise KeyError(text)

    with pytest.raises(KeyError):
        to_list(P.each(["1"]) | read(broken))


def test_read_as_uses_pydantic_lax_mode() -> None:
    assert to_list(P.each(["12", "12x", "7"]) | read_as(int)) == [12, 7]


def test_read_json_with_pydantic_model() -> None:
    lines = ['{"x": 1, "y": 2}', "not json", '{"x": 1}', '{"x": "3", "y": 4}']
    assert to_list(P.each(lines) | read_json(PydanticSchema(Point))) == [Point(x=1, y=2), Point(x=3, y=4)]


def test_read_json_with_callable_schema() -> None:
    schema = CallableSchema(parse_user_profile)
    lines = ['{"name": "ada", "email": "ada@example.com"}', '{"name": "bob"}', "[1, 2]"]
    assert to_list(P.each(lines) | read_json(schema)) == [UserProfile("ada", "ada@example.com")]


def test_schema_descriptions() -> None:
    assert CallableSchema(parse_user_profile).describe() == "parse_user_profile"
    assert CallableSchema(parse_user_profile, name="profile").describe() == "profile"
    assert PydanticSchema(Point).describe() == "PydanticSchema(Point)"


def test_show_formats_every_value() -> None:
    assert to_list(P.each([1, 2]) | show()) == ["1", "2"]
    assert to_list(P.each([1, 2]) | show(lambda v: f"{v:03d}")) == ["001", "002"]
