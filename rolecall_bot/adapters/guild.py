"""``MemberDirectory`` backed by a :class:`discord.Guild`."""

from __future__ import annotations

import discord

from ..core.errors import MutationError
from .base import MemberDirectory


class GuildDirectory(MemberDirectory):
    """Member operations for one guild through ``discord.py``."""

    def __init__(self, guild: discord.Guild, reason: str = "Role request") -> None:
        self.guild = guild
        self.reason = reason

    def _member(self, user_id: int) -> discord.Member | None:
        return self.guild.get_member(user_id)

    async def _fetch(self, user_id: int) -> discord.Member:
        member = self._member(user_id)
        if member is not None:
            return member
        try:
            return await self.guild.fetch_member(user_id)
        except discord.HTTPException as exc:
            raise MutationError("fetch member", str(exc)) from exc

    # ------------------------------------------------------------------
    def is_administrator(self, user_id: int) -> bool:
        member = self._member(user_id)
        return bool(member and member.guild_permissions.administrator)

    def bot_can_manage(self) -> bool:
        me = self.guild.me
        if me is None:
            return False
        perms = me.guild_permissions
        return perms.manage_nicknames and perms.manage_roles

    def outranks_bot(self, user_id: int) -> bool:
        member = self._member(user_id)
        me = self.guild.me
        if member is None or me is None:
            return False
        if self.guild.owner_id == user_id:
            return True
        return member.top_role >= me.top_role

    def has_role(self, user_id: int, role_id: int) -> bool:
        member = self._member(user_id)
        return bool(member and member.get_role(role_id))

    def display_name(self, user_id: int) -> str:
        member = self._member(user_id)
        if member is None:
            return str(user_id)
        return member.nick or member.name

    # ------------------------------------------------------------------
    async def set_nickname(self, user_id: int, nickname: str) -> None:
        member = await self._fetch(user_id)
        try:
            await member.edit(nick=nickname, reason=self.reason)
        except discord.HTTPException as exc:
            raise MutationError("set nickname", str(exc)) from exc

    async def add_role(self, user_id: int, role_id: int) -> None:
        member = await self._fetch(user_id)
        try:
            await member.add_roles(discord.Object(id=role_id), reason=self.reason)
        except discord.HTTPException as exc:
            raise MutationError("add role", str(exc)) from exc

    async def remove_role(self, user_id: int, role_id: int) -> None:
        member = await self._fetch(user_id)
        try:
            await member.remove_roles(discord.Object(id=role_id), reason=self.reason)
        except discord.HTTPException as exc:
            raise MutationError("remove role", str(exc)) from exc

    async def nicknames(self) -> list[tuple[int, str | None]]:
        if self.guild.chunked:
            members = list(self.guild.members)
        else:
            try:
                members = [m async for m in self.guild.fetch_members(limit=None)]
            except discord.HTTPException as exc:
                raise MutationError("list members", str(exc)) from exc
        return [(m.id, m.nick) for m in members]
