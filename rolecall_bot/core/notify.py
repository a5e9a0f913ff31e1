"""Best-effort delivery of DMs, reactions and operator log lines."""

from __future__ import annotations

import logging
from enum import Enum

from ..adapters.base import Adapter
from .errors import DeliveryError
from .models import RawRequest

log = logging.getLogger("rolecall.notify")


class DeliveryResult(str, Enum):
    DELIVERED = "delivered"
    FALLBACK = "fallback"
    FAILED = "failed"


class Notifier:
    """Wrap an :class:`Adapter` so delivery failures never propagate.

    A failed DM can fall back to a public post in a channel.  Operator log
    lines go to ``log_channel_id``; when that is unset they are only written
    to the local log.
    """

    def __init__(self, adapter: Adapter, log_channel_id: int | None = None) -> None:
        self.adapter = adapter
        self.log_channel_id = log_channel_id

    async def notify(
        self,
        recipient_id: int,
        content: str,
        *,
        fallback_channel_id: int | None = None,
        fallback_content: str | None = None,
    ) -> DeliveryResult:
        """DM ``recipient_id``; on failure post ``fallback_content`` instead."""
        try:
            await self.adapter.send_direct_message(recipient_id, content)
            return DeliveryResult.DELIVERED
        except DeliveryError as exc:
            log.warning("Could not DM %s: %s", recipient_id, exc)
        if fallback_channel_id is None or fallback_content is None:
            return DeliveryResult.FAILED
        try:
            await self.adapter.send_message(fallback_channel_id, fallback_content)
            return DeliveryResult.FALLBACK
        except DeliveryError as exc:
            log.warning("Fallback notice in %s failed: %s", fallback_channel_id, exc)
            return DeliveryResult.FAILED

    async def operator(self, content: str) -> bool:
        """Append ``content`` to the operator log channel."""
        if self.log_channel_id is None:
            log.info("[operator] %s", content)
            return False
        try:
            await self.adapter.send_message(self.log_channel_id, content)
            return True
        except DeliveryError as exc:
            log.error("Operator log channel unavailable: %s (%s)", exc, content)
            return False

    async def react(self, request: RawRequest, emoji: str) -> bool:
        try:
            await self.adapter.add_reaction(request.channel_id, request.message_id, emoji)
            return True
        except DeliveryError as exc:
            log.warning("Could not react to message %s: %s", request.message_id, exc)
            return False


__all__ = ["DeliveryResult", "Notifier"]
