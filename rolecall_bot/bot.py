"""Discord bot watching the role request channel."""

from __future__ import annotations

from typing import Any

import discord
from discord.ext import commands

from .adapters.guild import GuildDirectory
from .config import Settings
from .core import messages
from .core.classifier import RequestClassifier
from .core.errors import DeliveryError
from .core.models import RawRequest
from .core.notify import Notifier
from .core.storage import MemberRegistry
from .logging_config import setup_logging


def request_from_message(message: discord.Message) -> RawRequest:
    """Snapshot the parts of ``message`` the classifier needs."""
    guild = message.guild
    return RawRequest(
        content=message.content or "",
        author_id=message.author.id,
        author_name=str(message.author),
        message_id=message.id,
        channel_id=message.channel.id,
        guild_id=guild.id if guild else 0,
        url=message.jump_url,
        guild_name=guild.name if guild else "",
        mention_ids=tuple(u.id for u in message.mentions),
    )


class RolecallBot(commands.Bot):
    """``discord.py`` bot that renames members from their role requests."""

    def __init__(
        self,
        settings: Settings,
        classifier: RequestClassifier,
        registry: MemberRegistry,
        notifier: Notifier,
        **kwargs: Any,
    ) -> None:
        intents = kwargs.pop("intents", None) or discord.Intents.default()
        # Requests are free text and duplicate checks scan the member list.
        intents.message_content = True
        intents.members = True
        super().__init__(
            command_prefix=kwargs.pop("command_prefix", "!"),
            intents=intents,
        )
        self.log = setup_logging()
        self.settings = settings
        self.classifier = classifier
        self.registry = registry
        self.notifier = notifier

    async def setup_hook(self) -> None:
        """Sync slash commands with Discord."""
        tree = getattr(self, "tree", None)
        if tree is not None:  # pragma: no cover - exercised in integration
            await tree.sync()
        await super().setup_hook()

    async def on_ready(self) -> None:  # pragma: no cover - requires discord
        """Log the login and rebuild missing member records from nicknames."""
        await self.change_presence(activity=discord.Game(name="Role requests"))
        self.log.info(
            "Logged in as %s (%s), watching channel %s",
            self.user,
            self.user.id if self.user else "?",
            self.settings.request_channel_id,
        )
        for guild in self.guilds:
            try:
                await self.rebuild_registry(guild)
            except Exception:
                self.log.exception(
                    "Failed to rebuild member records for guild %s", guild.id
                )

    async def rebuild_registry(self, guild: discord.Guild) -> int:
        directory = GuildDirectory(guild)
        return self.registry.rebuild(await directory.nicknames())

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or message.guild is None:
            return
        if message.channel.id != self.settings.request_channel_id:
            if self.mentions_me(message):
                await self.greet(message)
            return
        request = request_from_message(message)
        try:
            outcome = await self.classifier.handle(request, GuildDirectory(message.guild))
        except Exception:
            self.log.exception(
                "Unhandled error processing message %s from %s",
                message.id,
                message.author,
            )
            return
        self.log.debug("Message %s -> %s", message.id, outcome)

    def mentions_me(self, message: discord.Message) -> bool:
        me = self.user
        return me is not None and any(u.id == me.id for u in message.mentions)

    async def greet(self, message: discord.Message) -> None:
        """Point a member who pinged the bot to ``/help``."""
        try:
            await self.notifier.adapter.send_message(
                message.channel.id, messages.bot_mentioned()
            )
        except DeliveryError as exc:
            self.log.warning("Could not answer mention in %s: %s", message.channel.id, exc)

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        self.log.exception("Unhandled error in %s", event_method)

    async def close(self) -> None:
        close = getattr(self.notifier.adapter, "close", None)
        if close is not None:
            await close()
        await super().close()


__all__ = ["RolecallBot", "request_from_message"]
