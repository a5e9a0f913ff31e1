"""Capabilities the request classifier consumes from the chat platform."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Adapter(ABC):
    """Outbound messaging.

    Implementations raise :class:`~rolecall_bot.core.errors.DeliveryError`
    when the platform refuses a delivery.
    """

    @abstractmethod
    async def send_message(self, channel_id: int, content: str) -> None:
        """Send ``content`` to the specified ``channel_id``."""

    @abstractmethod
    async def send_direct_message(self, user_id: int, content: str) -> None:
        """Send ``content`` privately to ``user_id``."""

    @abstractmethod
    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        """React to a message with ``emoji``."""


class MemberDirectory(ABC):
    """Member lookups and mutations within one guild.

    The permission checks are synchronous because platforms keep that state
    cached locally.  Mutations raise
    :class:`~rolecall_bot.core.errors.MutationError` on failure.
    """

    @abstractmethod
    def is_administrator(self, user_id: int) -> bool:
        """Whether ``user_id`` holds the administrator capability."""

    @abstractmethod
    def bot_can_manage(self) -> bool:
        """Whether the bot may change nicknames and roles."""

    @abstractmethod
    def outranks_bot(self, user_id: int) -> bool:
        """Whether the member's highest role is at or above the bot's."""

    @abstractmethod
    def has_role(self, user_id: int, role_id: int) -> bool:
        """Whether the member already holds ``role_id``."""

    @abstractmethod
    def display_name(self, user_id: int) -> str:
        """Current nickname, or the account name when no nickname is set."""

    @abstractmethod
    async def set_nickname(self, user_id: int, nickname: str) -> None:
        """Change the member's nickname."""

    @abstractmethod
    async def add_role(self, user_id: int, role_id: int) -> None:
        """Give the member ``role_id``."""

    @abstractmethod
    async def remove_role(self, user_id: int, role_id: int) -> None:
        """Take ``role_id`` away from the member."""

    @abstractmethod
    async def nicknames(self) -> list[tuple[int, str | None]]:
        """Return ``(member_id, nickname)`` for every guild member."""
