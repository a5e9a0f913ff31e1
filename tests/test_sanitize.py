"""Tests for name sanitising and the nickname shape."""

import re

import pytest

from rolecall_bot.core.extract import delimited
from rolecall_bot.core.sanitize import (
    format_nickname,
    is_valid_nickname,
    parse_nickname,
    sanitize,
)

SAMPLES = [
    "Jon Snow",
    "  Jon   Snow  ",
    "<@123> Jon 😀 Snow!!",
    "```Jon```",
    "Mary--Jane",
    "Mary - Jane Watson",
    "-Jon-",
    "O'Brien 3rd",
    "José Ñúñez",
    "Agent 7",
    "A" * 31 + " Bcdef",
    "x" * 80,
    "🙂🙂",
    "",
]


def test_sanitize_strips_everything_but_letters() -> None:
    assert sanitize("  Jon   Snow  ") == "Jon Snow"
    assert sanitize("<@123> Jon 😀 Snow!!") == "Jon Snow"
    assert sanitize("```Jon```") == "Jon"
    assert sanitize("O'Brien 3rd") == "OBrien rd"
    assert sanitize("José Ñúñez") == "José Ñúñez"


def test_sanitize_collapses_hyphens() -> None:
    assert sanitize("Mary--Jane") == "Mary-Jane"
    assert sanitize("Mary - Jane") == "Mary-Jane"
    assert sanitize("-Jon-") == "Jon"


def test_sanitize_caps_length() -> None:
    assert sanitize("x" * 80) == "x" * 32
    assert sanitize("abcdef", max_length=3) == "abc"
    # a cut landing on a space does not leave it dangling
    assert sanitize("A" * 31 + " Bcdef") == "A" * 31


def test_sanitize_bad_input() -> None:
    assert sanitize(None) == ""
    assert sanitize(12345) == ""  # type: ignore[arg-type]
    assert sanitize("🙂🙂") == ""


@pytest.mark.parametrize("text", SAMPLES)
def test_sanitize_is_idempotent(text: str) -> None:
    once = sanitize(text)
    assert sanitize(once) == once


def test_format_nickname() -> None:
    assert format_nickname("Jon Snow", "445566") == "Jon Snow | 445566"
    assert format_nickname("<@1> jon", "7") == "jon | 7"


def test_format_nickname_rejects_unusable_input() -> None:
    with pytest.raises(ValueError):
        format_nickname("🙂", "445566")
    with pytest.raises(ValueError):
        format_nickname("Jon", "12a")


def test_format_nickname_fit_limit() -> None:
    nick = format_nickname("A" * 32, "123456", fit_limit=32)
    assert nick == "A" * 23 + " | 123456"
    assert len(nick) == 32
    # without a limit the name alone is capped
    assert len(format_nickname("A" * 40, "123456")) == 41


NICKNAME_SHAPE = re.compile(r"^[^\W\d_]+(?:[ -][^\W\d_]+)* \| [0-9]+$")


@pytest.mark.parametrize("text", [s for s in SAMPLES if sanitize(s)])
def test_nickname_round_trip(text: str) -> None:
    nick = format_nickname(text, "445566")
    assert is_valid_nickname(nick)
    assert NICKNAME_SHAPE.match(nick)
    assert len(nick.rpartition(" | ")[0]) <= 32
    fields = delimited(nick)
    assert (fields.name, fields.id) == (sanitize(text), "445566")
    assert parse_nickname(nick) == (sanitize(text), "445566")


def test_parse_nickname_rejects_other_shapes() -> None:
    assert parse_nickname("Jon Snow") is None
    assert parse_nickname("Jon5 | 1") is None
    assert parse_nickname("Jon | 12a") is None
    assert parse_nickname(" | 12") is None
    assert parse_nickname(None) is None
    assert not is_valid_nickname("x" * 33 + " | 1")
