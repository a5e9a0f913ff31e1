"""Name sanitisation and the ``"Name | ID"`` nickname shape."""

from __future__ import annotations

import re

from .extract import digits

NAME_MAX_LENGTH = 32
# Discord rejects nicknames longer than this.
NICKNAME_LIMIT = 32
NICKNAME_SEP = " | "

_HYPHEN_GAP = re.compile(r"\s*-[\s-]*")
_SPACES = re.compile(r"\s+")


def _keep(char: str) -> str:
    if char.isalpha() or char == "-":
        return char
    if char.isspace():
        return " "
    return ""


def sanitize(name: str | None, max_length: int = NAME_MAX_LENGTH) -> str:
    """Reduce ``name`` to letters, single spaces and single hyphens.

    Digits, punctuation, emoji and mention or markdown markup are dropped,
    spaces around a hyphen are removed and the result is capped at
    ``max_length`` characters.  Never raises; bad input gives ``""``.
    """
    if not name or not isinstance(name, str):
        return ""
    text = "".join(_keep(c) for c in name)
    text = _HYPHEN_GAP.sub("-", text)
    text = _SPACES.sub(" ", text).strip(" -")
    return text[:max_length].strip(" -")


def format_nickname(
    name: str,
    id_: str,
    *,
    max_length: int = NAME_MAX_LENGTH,
    fit_limit: int | None = None,
) -> str:
    """Build ``"{name} | {id}"`` from a raw name and a digit id.

    With ``fit_limit`` the name is shortened further so the whole nickname
    stays within that many characters.

    Raises :class:`ValueError` when nothing usable is left of the name or the
    id is not made of digits.
    """
    if digits(id_) != id_:
        raise ValueError(f"Invalid id {id_!r}")
    clean = sanitize(name, max_length)
    if fit_limit is not None:
        room = fit_limit - len(NICKNAME_SEP) - len(id_)
        clean = sanitize(clean, room) if room > 0 else ""
    if not clean:
        raise ValueError(f"Nothing left of name {name!r} after sanitising")
    return f"{clean}{NICKNAME_SEP}{id_}"


def parse_nickname(
    nickname: str | None, max_length: int = NAME_MAX_LENGTH
) -> tuple[str, str] | None:
    """Split a formatted nickname back into ``(name, id)``.

    Returns ``None`` unless ``nickname`` has the exact
    ``<letters, spaces, hyphens> | <digits>`` shape.
    """
    if not nickname:
        return None
    name, sep, id_ = nickname.rpartition(NICKNAME_SEP)
    if not sep or digits(id_) != id_:
        return None
    if not 1 <= len(name) <= max_length:
        return None
    if not all(c.isalpha() or c in " -" for c in name):
        return None
    return name, id_


def is_valid_nickname(nickname: str | None, max_length: int = NAME_MAX_LENGTH) -> bool:
    return parse_nickname(nickname, max_length) is not None


__all__ = [
    "NAME_MAX_LENGTH",
    "NICKNAME_LIMIT",
    "NICKNAME_SEP",
    "format_nickname",
    "is_valid_nickname",
    "parse_nickname",
    "sanitize",
]
