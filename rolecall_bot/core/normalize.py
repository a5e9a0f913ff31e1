"""Canonicalisation of raw request text.

Two shapes are produced because the extraction grammars need different views
of the same message:

``flatten``
    a single line where every field separator has been replaced by
    :data:`SEP` and whitespace runs are collapsed.  Used by the delimiter
    grammar.
``lines``
    the non-empty, trimmed lines of the message.  Used by the line based
    grammars.
"""

from __future__ import annotations

import re

SEP = ":"

_LINE_BREAKS = re.compile(r"[\r\n\t]")
_SEPARATOR_RUN = re.compile(r"\s*(?:[:=|]|-+)(?:\s*(?:[:=|]|-+))*\s*")
_SPACES = re.compile(r"\s+")


def _is_word_hyphen(text: str, match: re.Match[str]) -> bool:
    """Return ``True`` for a bare hyphen joining two letters (``Mary-Jane``)."""
    if match.group().strip("-"):
        return False
    start, end = match.start(), match.end()
    if start == 0 or end >= len(text):
        return False
    return text[start - 1].isalpha() and text[end].isalpha()


def flatten(raw: str | None) -> str:
    """Collapse ``raw`` into one line with canonical separators.

    ``-``, ``:``, ``=`` and ``|`` (with any surrounding spaces) become
    :data:`SEP`; consecutive separators merge into one.  A hyphen written
    directly between two letters is part of a name and is left alone.
    """
    if not raw or not isinstance(raw, str):
        return ""
    text = _LINE_BREAKS.sub(" ", raw)
    text = _SPACES.sub(" ", text).strip()

    def _replace(match: re.Match[str]) -> str:
        if _is_word_hyphen(text, match):
            return match.group()
        return SEP

    text = _SEPARATOR_RUN.sub(_replace, text)
    return text.strip()


def lines(raw: str | None) -> list[str]:
    """Return the trimmed, non-empty lines of ``raw`` with inner spaces collapsed."""
    if not raw or not isinstance(raw, str):
        return []
    result = []
    for line in raw.splitlines():
        line = _SPACES.sub(" ", line).strip()
        if line:
            result.append(line)
    return result


def single_line(raw: str | None) -> str:
    """Join ``raw`` into one whitespace-collapsed line without touching separators."""
    if not raw or not isinstance(raw, str):
        return ""
    return _SPACES.sub(" ", _LINE_BREAKS.sub(" ", raw)).strip()


__all__ = ["SEP", "flatten", "lines", "single_line"]
