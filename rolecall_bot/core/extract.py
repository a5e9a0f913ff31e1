"""Extraction of ``name``/``id``/``rank`` from free-text requests.

Members type their requests however they like, so no single pattern covers
them.  Instead an ordered list of small grammars is tried, most explicit
first, and the first one that yields a name and a digit-only id wins.  Each
grammar is a pure function returning :class:`ParsedFields` or ``None``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from .models import NO_MATCH, ParsedFields
from .normalize import SEP, flatten, lines, single_line

log = logging.getLogger("rolecall.extract")

Grammar = Callable[[str], ParsedFields | None]

_DIGITS = re.compile(r"[0-9]+")
_TRAILING = " ,;|/"
_LABEL_SEP = r"\s*[:=|-]\s*"
_LABELED_LINE = re.compile(rf"^(name|id|rank){_LABEL_SEP}(.*)$", re.IGNORECASE)
_NEXT_LABEL = rf"(?=\b(?:name|id|rank){_LABEL_SEP}|$)"
_LABEL_VALUE = {
    label: re.compile(rf"\b{label}{_LABEL_SEP}(.*?)\s*{_NEXT_LABEL}", re.IGNORECASE)
    for label in ("name", "id", "rank")
}


def digits(value: str | None) -> str | None:
    """Return ``value`` trimmed if it is a non-empty run of ASCII digits."""
    if value is None:
        return None
    value = value.strip()
    return value if _DIGITS.fullmatch(value) else None


def _value(found: dict[str, str], label: str) -> str:
    # "Name: Jon, ID: 1" and "Name: Jon | ID: 1" leave the joiner on the value
    return (found.get(label) or "").strip().rstrip(_TRAILING).strip()


def _from_labels(found: dict[str, str]) -> ParsedFields | None:
    name = _value(found, "name")
    id_ = digits(_value(found, "id"))
    if not name or not id_:
        return None
    return ParsedFields(name=name, id=id_, rank=digits(_value(found, "rank")))


def labeled_lines(raw: str) -> ParsedFields | None:
    """``Name: ...`` / ``ID: ...`` / ``Rank: ...`` each on its own line."""
    found: dict[str, str] = {}
    for line in lines(raw):
        m = _LABELED_LINE.match(line)
        if m:
            found.setdefault(m.group(1).lower(), m.group(2))
    return _from_labels(found)


def labeled_inline(raw: str) -> ParsedFields | None:
    """The same labels anywhere in a single run-together line."""
    text = single_line(raw)
    found: dict[str, str] = {}
    for label, pattern in _LABEL_VALUE.items():
        m = pattern.search(text)
        if m:
            found[label] = m.group(1)
    return _from_labels(found)


def delimited(raw: str) -> ParsedFields | None:
    """``Name - ID`` or ``Name - ID - Rank`` with any supported separator.

    The id is the first all-digit segment after at least one name segment.
    """
    segments = [s.strip() for s in flatten(raw).split(SEP)]
    segments = [s for s in segments if s]
    for index, segment in enumerate(segments):
        if digits(segment) is None:
            continue
        if index == 0:
            return None
        rank = digits(segments[index + 1]) if index + 1 < len(segments) else None
        return ParsedFields(name=" ".join(segments[:index]), id=segment, rank=rank)
    return None


def positional(raw: str) -> ParsedFields | None:
    """Two or three bare lines: name, id and optionally rank."""
    rows = lines(raw)
    if len(rows) not in (2, 3):
        return None
    id_ = digits(rows[1])
    if id_ is None:
        return None
    rank = digits(rows[2]) if len(rows) == 3 else None
    return ParsedFields(name=rows[0], id=id_, rank=rank)


GRAMMARS: tuple[tuple[str, Grammar], ...] = (
    ("labeled_lines", labeled_lines),
    ("labeled_inline", labeled_inline),
    ("delimited", delimited),
    ("positional", positional),
)


def match(
    raw: str | None, grammars: tuple[tuple[str, Grammar], ...] = GRAMMARS
) -> tuple[str | None, ParsedFields]:
    """Run the cascade and return ``(grammar_name, fields)``.

    The first grammar producing a complete result wins; later grammars are not
    consulted.  ``(None, NO_MATCH)`` is returned when nothing matches.
    """
    if not raw or not isinstance(raw, str):
        return None, NO_MATCH
    for name, grammar in grammars:
        fields = grammar(raw)
        if fields is not None and fields.complete:
            log.debug("Grammar %s matched %r -> %s", name, raw, fields)
            return name, fields
    log.debug("No grammar matched %r", raw)
    return None, NO_MATCH


def extract(raw: str | None) -> ParsedFields:
    """Extract the request fields from ``raw``."""
    return match(raw)[1]


__all__ = [
    "GRAMMARS",
    "Grammar",
    "delimited",
    "digits",
    "extract",
    "labeled_inline",
    "labeled_lines",
    "match",
    "positional",
]
