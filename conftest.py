"""Test configuration and shared fakes for the platform collaborators."""

import asyncio
import os
import sys

import pytest

# Add the repository root (the directory containing this file) to ``sys.path``
# if it is not already present so ``rolecall_bot`` imports without installing.
ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from rolecall_bot.adapters.base import Adapter, MemberDirectory  # noqa: E402
from rolecall_bot.core.errors import DeliveryError, MutationError  # noqa: E402
from rolecall_bot.core.models import RawRequest  # noqa: E402


class FakeAdapter(Adapter):
    """Records every delivery; optionally refuses DMs or channel posts."""

    def __init__(self, dm_fails=False, send_fails=False, react_fails=False):
        self.dm_fails = dm_fails
        self.send_fails = send_fails
        self.react_fails = react_fails
        self.dms = []
        self.messages = []
        self.reactions = []

    async def send_message(self, channel_id, content):
        if self.send_fails:
            raise DeliveryError("channel unavailable")
        self.messages.append((channel_id, content))

    async def send_direct_message(self, user_id, content):
        if self.dm_fails:
            raise DeliveryError("403 Forbidden")
        self.dms.append((user_id, content))

    async def add_reaction(self, channel_id, message_id, emoji):
        if self.react_fails:
            raise DeliveryError("404 Unknown Message")
        self.reactions.append((message_id, emoji))


class FakeDirectory(MemberDirectory):
    """In-memory guild: ``members`` maps member id to nickname."""

    def __init__(
        self,
        members=None,
        admins=(),
        can_manage=True,
        outranks=(),
        fail_nickname=False,
        fail_role=False,
        fail_listing=False,
    ):
        self.members = dict(members or {})
        self.roles = {}
        self.admins = set(admins)
        self.can_manage = can_manage
        self.outranking = set(outranks)
        self.fail_nickname = fail_nickname
        self.fail_role = fail_role
        self.fail_listing = fail_listing
        self.renames = []

    def is_administrator(self, user_id):
        return user_id in self.admins

    def bot_can_manage(self):
        return self.can_manage

    def outranks_bot(self, user_id):
        return user_id in self.outranking

    def has_role(self, user_id, role_id):
        return role_id in self.roles.get(user_id, set())

    def display_name(self, user_id):
        return self.members.get(user_id) or f"user{user_id}"

    async def set_nickname(self, user_id, nickname):
        await asyncio.sleep(0)
        if self.fail_nickname:
            raise MutationError("set nickname", "403 Missing Permissions")
        self.members[user_id] = nickname
        self.renames.append((user_id, nickname))

    async def add_role(self, user_id, role_id):
        await asyncio.sleep(0)
        if self.fail_role:
            raise MutationError("add role", "403 Missing Permissions")
        self.roles.setdefault(user_id, set()).add(role_id)

    async def remove_role(self, user_id, role_id):
        self.roles.get(user_id, set()).discard(role_id)

    async def nicknames(self):
        await asyncio.sleep(0)
        if self.fail_listing:
            raise MutationError("list members", "503 Service Unavailable")
        return list(self.members.items())


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_request(content, author_id=1, mention_ids=()):
    return RawRequest(
        content=content,
        author_id=author_id,
        author_name=f"user{author_id}",
        message_id=100 + author_id,
        channel_id=20,
        guild_id=30,
        url=f"https://discord.com/channels/30/20/{100 + author_id}",
        guild_name="Test Guild",
        mention_ids=tuple(mention_ids),
    )


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture
def clock():
    return FakeClock()
