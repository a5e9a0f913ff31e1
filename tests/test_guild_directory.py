"""Tests for :class:`rolecall_bot.adapters.guild.GuildDirectory`."""

import asyncio
import types

import discord
import pytest

from rolecall_bot.adapters.guild import GuildDirectory
from rolecall_bot.core.errors import MutationError


def forbidden() -> discord.Forbidden:
    response = types.SimpleNamespace(status=403, reason="Forbidden")
    return discord.Forbidden(response, "Missing Permissions")


class Member:
    def __init__(self, mid, name, nick=None, top_role=1, admin=False, roles=()):
        self.id = mid
        self.name = name
        self.nick = nick
        self.top_role = top_role
        self.guild_permissions = types.SimpleNamespace(
            administrator=admin, manage_nicknames=True, manage_roles=True
        )
        self.roles = set(roles)
        self.fail = False
        self.edits = []

    def get_role(self, role_id):
        return role_id if role_id in self.roles else None

    async def edit(self, nick, reason=None):
        if self.fail:
            raise forbidden()
        self.nick = nick
        self.edits.append((nick, reason))

    async def add_roles(self, role, reason=None):
        if self.fail:
            raise forbidden()
        self.roles.add(role.id)

    async def remove_roles(self, role, reason=None):
        self.roles.discard(role.id)


class Guild:
    def __init__(self, members, me, owner_id=0, chunked=True):
        self._members = {m.id: m for m in members}
        self.me = me
        self.owner_id = owner_id
        self.chunked = chunked

    @property
    def members(self):
        return list(self._members.values())

    def get_member(self, user_id):
        return self._members.get(user_id)

    async def fetch_member(self, user_id):
        raise discord.NotFound(types.SimpleNamespace(status=404, reason="Not Found"), "")

    async def fetch_members(self, limit=None):
        for member in self._members.values():
            yield member


@pytest.fixture
def guild():
    me = Member(99, "bot", top_role=10)
    return Guild(
        [
            Member(1, "jon", top_role=2),
            Member(2, "boss", nick="Boss", top_role=10, admin=True),
            me,
        ],
        me,
        owner_id=3,
    )


def test_permission_checks(guild):
    directory = GuildDirectory(guild)
    assert not directory.is_administrator(1)
    assert directory.is_administrator(2)
    assert not directory.is_administrator(404)
    assert directory.bot_can_manage()
    assert not directory.outranks_bot(1)
    assert directory.outranks_bot(2)

    guild.me.guild_permissions.manage_roles = False
    assert not directory.bot_can_manage()


def test_owner_outranks_bot(guild):
    guild._members[3] = Member(3, "owner", top_role=0)
    assert GuildDirectory(guild).outranks_bot(3)


def test_display_name(guild):
    directory = GuildDirectory(guild)
    assert directory.display_name(1) == "jon"
    assert directory.display_name(2) == "Boss"


def test_mutations(guild):
    directory = GuildDirectory(guild, reason="Role request")
    asyncio.run(directory.set_nickname(1, "Jon Snow | 1"))
    asyncio.run(directory.add_role(1, 555))

    member = guild.get_member(1)
    assert member.edits == [("Jon Snow | 1", "Role request")]
    assert directory.has_role(1, 555)

    asyncio.run(directory.remove_role(1, 555))
    assert not directory.has_role(1, 555)


def test_mutation_failures_are_wrapped(guild):
    directory = GuildDirectory(guild)
    guild.get_member(1).fail = True
    with pytest.raises(MutationError) as excinfo:
        asyncio.run(directory.set_nickname(1, "Jon | 1"))
    assert excinfo.value.action == "set nickname"
    with pytest.raises(MutationError):
        asyncio.run(directory.add_role(1, 555))
    with pytest.raises(MutationError):
        asyncio.run(directory.set_nickname(404, "Ghost | 1"))


def test_nicknames(guild):
    pairs = asyncio.run(GuildDirectory(guild).nicknames())
    assert sorted(pairs) == [(1, None), (2, "Boss"), (99, None)]

    guild.chunked = False
    assert sorted(asyncio.run(GuildDirectory(guild).nicknames())) == sorted(pairs)
