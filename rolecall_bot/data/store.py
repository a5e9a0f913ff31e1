"""Key-value tables shared by the request classifier.

Cooldowns and similar-name warnings are kept in :class:`MemoryStore`
instances keyed by submitter ID.  The member registry implements the same
interface on top of a JSON file (:mod:`rolecall_bot.core.storage`).
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

V = TypeVar("V")


class KeyValueStore(ABC, Generic[V]):
    """Minimal table interface keyed by submitter ID."""

    @abstractmethod
    def get(self, key: int) -> V | None:
        """Return the value stored for ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: int, value: V) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def delete(self, key: int) -> bool:
        """Remove ``key``; return ``True`` if it was present."""

    @abstractmethod
    def items(self) -> Iterator[tuple[int, V]]:
        """Iterate over all stored ``(key, value)`` pairs."""

    def __len__(self) -> int:
        return sum(1 for _ in self.items())


class MemoryStore(KeyValueStore[V]):
    """In-process table backed by a ``dict``."""

    def __init__(self) -> None:
        self._data: dict[int, V] = {}

    def get(self, key: int) -> V | None:
        return self._data.get(key)

    def set(self, key: int, value: V) -> None:
        self._data[key] = value

    def delete(self, key: int) -> bool:
        return self._data.pop(key, None) is not None

    def items(self) -> Iterator[tuple[int, V]]:
        return iter(list(self._data.items()))

    def __len__(self) -> int:
        return len(self._data)


class SubmitterLocks:
    """One :class:`asyncio.Lock` per submitter.

    Holding the lock for the whole classification makes the cooldown
    check-then-set atomic for a given submitter while different submitters
    are still handled concurrently.
    """

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}
        self._waiters: dict[int, int] = {}

    @asynccontextmanager
    async def hold(self, key: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


__all__ = ["KeyValueStore", "MemoryStore", "SubmitterLocks"]
