"""JSON-backed member registry."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..data.store import KeyValueStore
from .models import MemberRecord
from .sanitize import parse_nickname

log = logging.getLogger("rolecall.storage")


class MemberRegistry(KeyValueStore[MemberRecord]):
    """Persist one :class:`MemberRecord` per submitter.

    The whole registry is rewritten to a single JSON file on every mutation.
    Writes go through a temporary file followed by :func:`os.replace` so a
    crash never leaves a truncated file behind.
    """

    def __init__(self, path: Path | str) -> None:
        """Initialise the registry using the JSON file at ``path``."""
        self.path = Path(path)
        self._records: dict[int, MemberRecord] = {}
        if self.path.exists():
            self._load()

    # ------------------------------------------------------------------
    # Internal helpers
    def _load(self) -> None:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self._records = {
            int(item["submitter_id"]): MemberRecord(**item)
            for item in data.get("members", [])
        }

    def save(self) -> None:
        data = {"members": [r.model_dump() for r in self._records.values()]}
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self.path)

    # ------------------------------------------------------------------
    # KeyValueStore
    def get(self, key: int) -> MemberRecord | None:
        return self._records.get(key)

    def set(self, key: int, value: MemberRecord) -> None:
        self._records[key] = value
        self.save()

    def delete(self, key: int) -> bool:
        if key not in self._records:
            return False
        del self._records[key]
        self.save()
        return True

    def items(self) -> Iterator[tuple[int, MemberRecord]]:
        return iter(list(self._records.items()))

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------
    # Lookups
    def find_by_id(self, id_: str) -> MemberRecord | None:
        """Return the record holding community ``id_``, if any."""
        return next((r for r in self._records.values() if r.id == id_), None)

    def rebuild(self, nicknames: Iterable[tuple[int, str | None]]) -> int:
        """Add records for members whose nickname already has the right shape.

        Existing records are left untouched.  Returns the number of records
        added.
        """
        added = 0
        for member_id, nickname in nicknames:
            if member_id in self._records:
                continue
            parsed = parse_nickname(nickname)
            if parsed is None:
                continue
            name, id_ = parsed
            self._records[member_id] = MemberRecord(
                submitter_id=member_id,
                name=name,
                id=id_,
                formatted_nickname=nickname,
            )
            added += 1
        if added:
            self.save()
            log.info("Rebuilt %d member record(s) from nicknames", added)
        return added


__all__ = ["MemberRegistry"]
