"""Exceptions raised by platform adapters.

Request rejections are not exceptions; see :class:`~rolecall_bot.core.models.Rejected`.
"""

from __future__ import annotations


class RolecallError(Exception):
    """Base class for errors raised by this package."""


class DeliveryError(RolecallError):
    """A message, DM or reaction could not be delivered."""


class MutationError(RolecallError):
    """A nickname or role change was refused by the platform."""

    def __init__(self, action: str, detail: str = "") -> None:
        self.action = action
        self.detail = detail
        super().__init__(f"{action} failed: {detail}" if detail else f"{action} failed")
