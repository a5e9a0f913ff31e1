from __future__ import annotations

import asyncio
import json
import logging

import discord
from pydantic import ValidationError

from .adapters.discord import DiscordAdapter
from .bot import RolecallBot
from .commands.register import register_commands
from .config import load_settings
from .core.classifier import RequestClassifier
from .core.notify import Notifier
from .core.storage import MemberRegistry
from .logging_config import setup_logging


def _loop_exception_handler(log: logging.Logger):
    def handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
        log.error(
            "Unhandled exception in event loop: %s",
            context.get("message"),
            exc_info=context.get("exception"),
        )

    return handler


def main() -> int:
    log = setup_logging()
    settings = load_settings()
    if not settings.token:
        log.error("TOKEN is not set. Export it in your environment before running.")
        return 2
    if settings.request_channel_id is None:
        log.warning("ROLE_REQUEST_CHANNEL_ID is not set; no requests will be handled.")
    try:
        registry = MemberRegistry(settings.data_path)
    except (OSError, json.JSONDecodeError, ValidationError):
        log.exception("Could not read member registry %s", settings.data_path)
        return 1

    notifier = Notifier(DiscordAdapter(settings.token), settings.log_channel_id)
    classifier = RequestClassifier(
        notifier,
        registry,
        role_id=settings.role_id,
        cooldown_seconds=settings.cooldown_seconds,
        name_max_length=settings.name_max_length,
        fit_nickname=settings.fit_nickname,
        similar_name_window=settings.similar_name_window,
    )
    bot = RolecallBot(settings, classifier, registry, notifier)
    register_commands(bot, settings, registry, classifier, notifier)

    async def runner() -> int:
        asyncio.get_running_loop().set_exception_handler(_loop_exception_handler(log))
        try:
            async with bot:
                await bot.start(settings.token)
        except discord.LoginFailure:
            log.error("Login failed: the token was rejected.")
            return 1
        return 0

    try:
        return asyncio.run(runner())
    except KeyboardInterrupt:
        log.info("Shutting down...")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
