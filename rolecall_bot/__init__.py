"""Core package for Rolecall.

Exposes the request parsing helpers and data models so consumers can import
them straight from ``rolecall_bot``.
"""

from .core.extract import extract
from .core.models import MemberRecord, ParsedFields
from .core.sanitize import format_nickname, sanitize
from .core.storage import MemberRegistry

__all__ = [
    "MemberRecord",
    "MemberRegistry",
    "ParsedFields",
    "extract",
    "format_nickname",
    "sanitize",
]
