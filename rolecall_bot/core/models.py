"""Data models for role requests and the member registry.

Transient values (requests, parse results and outcomes) are plain frozen
dataclasses.  :class:`MemberRecord` is persisted and therefore implemented
with :mod:`pydantic` for validation and convenient (de)serialisation.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class RawRequest:
    """An untouched message from the monitored channel."""

    content: str
    author_id: int
    author_name: str
    message_id: int
    channel_id: int
    guild_id: int
    url: str = ""
    guild_name: str = ""
    mention_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class ParsedFields:
    """Result of the field extractor; any field may be absent."""

    name: str | None = None
    id: str | None = None
    rank: str | None = None

    @property
    def complete(self) -> bool:
        return bool(self.name) and bool(self.id)


NO_MATCH = ParsedFields()


class MemberRecord(BaseModel):
    """Registry entry for a member whose request was applied.

    Attributes
    ----------
    submitter_id:
        Discord user ID of the member who sent the request.
    name:
        Sanitized name segment of the nickname.
    id:
        Community ID exactly as it was typed (digits only).
    rank:
        Optional rank, digits only.
    formatted_nickname:
        The ``"Name | ID"`` string written to the member.
    timestamp:
        Unix time of the request.

    """

    submitter_id: int
    name: str
    id: str
    rank: str | None = None
    formatted_nickname: str
    timestamp: float = Field(default_factory=time.time)


class Reason(str, Enum):
    MENTION = "mention"
    COOLDOWN = "cooldown"
    FORMAT = "format"
    PERMISSION = "permission"
    DUPLICATE = "duplicate"
    SYSTEM = "system"


@dataclass(frozen=True)
class Accepted:
    nickname: str
    fields: ParsedFields
    record: MemberRecord
    similar_to: int | None = None

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    reason: Reason
    detail: str = ""
    remaining: float | None = None
    holder_id: int | None = None
    # which half of the apply step went through before a system error
    applied: dict[str, bool] = field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return False


Outcome = Accepted | Rejected

__all__ = [
    "RawRequest",
    "ParsedFields",
    "NO_MATCH",
    "MemberRecord",
    "Reason",
    "Accepted",
    "Rejected",
    "Outcome",
]
