"""Discord adapter implementing :class:`~rolecall_bot.adapters.base.Adapter`.

Messages, direct messages and reactions are sent straight to Discord's HTTP
API with :mod:`httpx`, which keeps outbound notifications independent of the
gateway connection while remaining fully asynchronous.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import DeliveryError
from .base import Adapter


class DiscordAdapter(Adapter):
    """Adapter that sends requests directly to the Discord HTTP API."""

    api_base = "https://discord.com/api/v10"

    def __init__(self, token: str, client: httpx.AsyncClient | None = None) -> None:
        """Store authentication ``token`` and optional HTTP ``client``."""
        self.token = token
        self.client = client or httpx.AsyncClient(timeout=10.0)
        self._dm_channels: dict[int, str] = {}

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bot {self.token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.api_base}{path}"
        try:
            response = await self.client.request(
                method, url, headers=self.headers, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DeliveryError(f"{method} {path}: {exc}") from exc
        return response

    # ------------------------------------------------------------------
    async def send_message(self, channel_id: int, content: str) -> None:
        """Send a message to a channel.

        Parameters
        ----------
        channel_id:
            Identifier of the Discord channel.
        content:
            Message body to send.

        """
        await self._request(
            "POST",
            f"/channels/{channel_id}/messages",
            json={"content": content, "allowed_mentions": {"parse": ["users"]}},
        )

    async def open_dm_channel(self, user_id: int) -> str:
        """Return the DM channel id for ``user_id``, creating it if needed."""
        if user_id in self._dm_channels:
            return self._dm_channels[user_id]
        response = await self._request(
            "POST", "/users/@me/channels", json={"recipient_id": str(user_id)}
        )
        data: dict[str, Any] = response.json()
        channel_id = str(data["id"])
        self._dm_channels[user_id] = channel_id
        return channel_id

    async def send_direct_message(self, user_id: int, content: str) -> None:
        """Send a direct message.

        Discord answers with ``403`` when the user does not accept DMs from
        server members; that surfaces as :class:`DeliveryError`.
        """
        channel_id = await self.open_dm_channel(user_id)
        await self._request(
            "POST", f"/channels/{channel_id}/messages", json={"content": content}
        )

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        path = (
            f"/channels/{channel_id}/messages/{message_id}"
            f"/reactions/{quote(emoji, safe='')}/@me"
        )
        await self._request("PUT", path)

    async def close(self) -> None:
        """Close the underlying :class:`httpx.AsyncClient`."""
        await self.client.aclose()
