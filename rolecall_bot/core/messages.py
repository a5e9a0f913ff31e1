"""Texts sent to submitters and to the operator log channel."""

from __future__ import annotations

import math

FORMAT_EXAMPLE = "Name: John Doe\nID: 123456\nRank: 3"

ACCEPTED_FORMATS = (
    "Accepted formats:\n"
    "```\nName: John Doe\nID: 123456\nRank: 3\n```"
    "```\nJohn Doe - 123456 - 3\n```"
    "```\nJohn Doe\n123456\n3\n```"
)


def _echo(content: str, url: str) -> str:
    # fenced blocks cannot contain a bare fence
    body = content.replace("```", "'''")[:1000]
    text = f"**Your message:**\n```\n{body}\n```"
    if url:
        text += f"\n[Message Link]({url})"
    return text


def mention_rejected(content: str, url: str) -> str:
    return (
        "❌ **Invalid role request**\n"
        "You mentioned a user instead of typing your name.\n\n"
        f"{ACCEPTED_FORMATS}\n\n{_echo(content, url)}"
    )


def format_rejected(content: str, url: str) -> str:
    return (
        "⚠️ **Incorrect format**\n"
        "Your request could not be read. Please send it again.\n\n"
        f"{ACCEPTED_FORMATS}\n\n{_echo(content, url)}"
    )


def cooldown_rejected(remaining: float) -> str:
    minutes = max(1, math.ceil(remaining / 60))
    unit = "minute" if minutes == 1 else "minutes"
    return f"⌛ Please wait {minutes} {unit} before sending another request."


def duplicate_rejected(id_: str) -> str:
    return (
        f"❌ The ID `{id_}` is already used by another member. "
        "Check your ID and send your request again."
    )


def similar_name_warning(name: str) -> str:
    return (
        f"⚠️ Another member already uses the name **{name}**. "
        "Your request was still processed; contact staff if this is a mistake."
    )


def accepted(guild_name: str, old: str, new: str, rank: str | None) -> str:
    text = f"✅ **Nickname updated** in {guild_name}\nBefore: {old}\nAfter: {new}"
    if rank:
        text += f"\nRank: {rank}"
    return text


def accepted_fallback(user_id: int) -> str:
    return f"<@{user_id}> ✅ Name updated but I couldn't DM you."


def system_error() -> str:
    return "⚠️ Something went wrong while processing your request. Please try again later."


def name_notice(custom: str = "") -> str:
    text = (
        "📢 **Name Format Reminder**\n\n"
        "All members must use the correct name format:\n"
        f"```\n{FORMAT_EXAMPLE}\n```"
    )
    if custom:
        text += f"\n{custom}"
    return text


def role_removed(by: str) -> str:
    return f"❌ **Role removed**\nYour role was removed by {by}."


def bot_mentioned() -> str:
    return "👋 Hi! Use `/help` to see my commands."
