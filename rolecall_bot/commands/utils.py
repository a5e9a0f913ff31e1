"""Helpers shared by the slash commands."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def has_command_role(member: Any, role_id: int | None) -> bool:
    """Whether ``member`` may run privileged commands.

    Without a configured command role only administrators qualify.
    """
    if role_id is None:
        perms = getattr(member, "guild_permissions", None)
        return bool(perms and perms.administrator)
    return any(getattr(r, "id", None) == role_id for r in getattr(member, "roles", []))


def chunk_lines(lines: Iterable[str], limit: int = 4000) -> list[str]:
    """Join ``lines`` into blocks no longer than ``limit`` characters."""
    chunks: list[str] = []
    current = ""
    for line in lines:
        line = line[:limit]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks
