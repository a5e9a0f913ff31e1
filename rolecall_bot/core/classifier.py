"""Classification of role requests.

Each message from the monitored channel goes through the same sequence of
checks:

    mention -> cooldown -> parse -> permission -> duplicate -> apply

and ends as :class:`~rolecall_bot.core.models.Accepted` or
:class:`~rolecall_bot.core.models.Rejected`.  Rejections are plain values;
only unexpected errors raised outside of the platform mutations escape from
:meth:`RequestClassifier.handle`.

Requests from the same submitter are processed one at a time so that two
quick submissions cannot both slip past the cooldown check.
"""

from __future__ import annotations

import logging
import re
import time
from collections import Counter
from collections.abc import Callable

from ..adapters.base import MemberDirectory
from ..data.store import KeyValueStore, MemoryStore, SubmitterLocks
from . import messages
from .errors import MutationError
from .extract import extract
from .models import (
    Accepted,
    MemberRecord,
    Outcome,
    ParsedFields,
    RawRequest,
    Reason,
    Rejected,
)
from .notify import Notifier
from .sanitize import NAME_MAX_LENGTH, NICKNAME_LIMIT, format_nickname

log = logging.getLogger("rolecall.classifier")

# <@123>, <@!123>, <@&123> and typed @handles, @everyone, @here
MENTION = re.compile(r"<@[!&]?\d+>|(?<![\w@])@\w+")

REACT_REJECTED = "❌"
REACT_COOLDOWN = "⏳"
REACT_ACCEPTED = "✅"
REACT_ERROR = "⚠️"


def contains_mention(request: RawRequest) -> bool:
    return bool(request.mention_ids) or MENTION.search(request.content or "") is not None


def _id_of(nickname: str | None) -> str | None:
    if not nickname or "|" not in nickname:
        return None
    return nickname.rpartition("|")[2].strip()


def _name_of(nickname: str | None) -> str:
    if not nickname:
        return ""
    return nickname.rpartition("|")[0].strip() if "|" in nickname else nickname.strip()


class RequestClassifier:
    """Turn raw requests into outcomes and apply the accepted ones.

    Parameters
    ----------
    notifier:
        Delivery of DMs, reactions and operator log lines.
    registry:
        Member records keyed by submitter id.
    role_id:
        Role granted on acceptance; ``None`` only renames.
    cooldown_seconds:
        Minimum delay between two accepted requests of one submitter.
    name_max_length:
        Cap on the sanitized name segment.
    fit_nickname:
        Also shorten the name so the whole nickname fits Discord's limit.
    similar_name_window:
        Minimum delay between two similar-name warnings to one submitter.
    check_duplicates:
        Scan guild nicknames for id collisions and similar names.

    """

    def __init__(
        self,
        notifier: Notifier,
        registry: KeyValueStore[MemberRecord],
        *,
        role_id: int | None = None,
        cooldown_seconds: float = 300.0,
        name_max_length: int = NAME_MAX_LENGTH,
        fit_nickname: bool = False,
        similar_name_window: float = 24 * 60 * 60,
        check_duplicates: bool = True,
        cooldowns: KeyValueStore[float] | None = None,
        warnings: KeyValueStore[float] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.notifier = notifier
        self.registry = registry
        self.role_id = role_id
        self.cooldown_seconds = cooldown_seconds
        self.name_max_length = name_max_length
        self.fit_nickname = fit_nickname
        self.similar_name_window = similar_name_window
        self.check_duplicates = check_duplicates
        self.cooldowns: KeyValueStore[float] = cooldowns if cooldowns is not None else MemoryStore()
        self.warnings: KeyValueStore[float] = warnings if warnings is not None else MemoryStore()
        self.clock = clock
        self.locks = SubmitterLocks()
        self.stats: Counter[str] = Counter()

    # ------------------------------------------------------------------
    async def handle(self, request: RawRequest, directory: MemberDirectory) -> Outcome:
        """Classify ``request`` and carry out the resulting side effects."""
        async with self.locks.hold(request.author_id):
            outcome = await self._classify(request, directory)
        self.stats["accepted" if outcome.accepted else outcome.reason.value] += 1
        return outcome

    def cooldown_remaining(self, user_id: int) -> float:
        until = self.cooldowns.get(user_id)
        if until is None:
            return 0.0
        return max(0.0, until - self.clock())

    # ------------------------------------------------------------------
    async def _classify(self, request: RawRequest, directory: MemberDirectory) -> Outcome:
        author = request.author_id
        log.info("Role request from %s (%s)", request.author_name, author)

        if contains_mention(request):
            log.warning("Mention instead of name from %s", request.author_name)
            await self.notifier.react(request, REACT_REJECTED)
            await self.notifier.notify(
                author, messages.mention_rejected(request.content, request.url)
            )
            return Rejected(Reason.MENTION, "message contains a mention")

        remaining = self.cooldown_remaining(author)
        if remaining > 0:
            log.warning("%s is on cooldown for %.0fs", request.author_name, remaining)
            await self.notifier.react(request, REACT_COOLDOWN)
            await self.notifier.notify(author, messages.cooldown_rejected(remaining))
            return Rejected(Reason.COOLDOWN, "cooldown active", remaining=remaining)

        fields = extract(request.content)
        nickname = self._nickname(fields)
        if nickname is None:
            log.warning("Unreadable request from %s: %r", request.author_name, request.content)
            await self.notifier.react(request, REACT_REJECTED)
            await self.notifier.notify(
                author, messages.format_rejected(request.content, request.url)
            )
            return Rejected(Reason.FORMAT, "no grammar matched")

        rejected = await self._check_permissions(request, directory)
        if rejected is not None:
            return rejected

        similar_to: int | None = None
        if self.check_duplicates:
            try:
                holder, similar_to = await self._scan(author, fields.id, nickname, directory)
            except MutationError as exc:
                return await self._system_error(request, exc, {})
            if holder is not None:
                log.warning("ID %s from %s already held by %s", fields.id, author, holder)
                await self.notifier.react(request, REACT_REJECTED)
                await self.notifier.notify(author, messages.duplicate_rejected(fields.id))
                return Rejected(Reason.DUPLICATE, f"id {fields.id} in use", holder_id=holder)

        return await self._apply(request, directory, fields, nickname, similar_to)

    def _nickname(self, fields: ParsedFields) -> str | None:
        if not fields.complete:
            return None
        try:
            return format_nickname(
                fields.name,
                fields.id,
                max_length=self.name_max_length,
                fit_limit=NICKNAME_LIMIT if self.fit_nickname else None,
            )
        except ValueError:
            return None

    async def _check_permissions(
        self, request: RawRequest, directory: MemberDirectory
    ) -> Rejected | None:
        author = request.author_id
        if directory.is_administrator(author):
            log.warning("Administrator %s is not renamed", request.author_name)
            return Rejected(Reason.PERMISSION, "submitter is an administrator")
        if not directory.bot_can_manage():
            log.error("Bot lacks Manage Nicknames / Manage Roles")
            await self.notifier.operator(
                '❌ Bot missing "Manage Nicknames" or "Manage Roles" permission'
            )
            return Rejected(Reason.PERMISSION, "bot lacks permissions")
        if directory.outranks_bot(author):
            log.warning("%s's top role is above the bot", request.author_name)
            await self.notifier.operator(
                f"⚠️ Failed to change <@{author}>'s nickname (role hierarchy)"
            )
            return Rejected(Reason.PERMISSION, "role hierarchy")
        return None

    async def _scan(
        self, author: int, id_: str, nickname: str, directory: MemberDirectory
    ) -> tuple[int | None, int | None]:
        """Return ``(id_holder, similar_name_holder)`` among other members."""
        wanted = _name_of(nickname).casefold()
        holder = similar = None
        for member_id, current in await directory.nicknames():
            if member_id == author or not current:
                continue
            if holder is None and _id_of(current) == id_:
                holder = member_id
            if similar is None and _name_of(current).casefold() == wanted:
                similar = member_id
        return holder, similar

    async def _warn_similar(self, author: int, nickname: str) -> None:
        now = self.clock()
        last = self.warnings.get(author)
        if last is not None and now - last < self.similar_name_window:
            return
        self.warnings.set(author, now)
        await self.notifier.notify(author, messages.similar_name_warning(_name_of(nickname)))

    async def _apply(
        self,
        request: RawRequest,
        directory: MemberDirectory,
        fields: ParsedFields,
        nickname: str,
        similar_to: int | None,
    ) -> Outcome:
        author = request.author_id
        before = directory.display_name(author)
        applied = {"nickname": False, "role": False}
        try:
            await directory.set_nickname(author, nickname)
            applied["nickname"] = True
            if self.role_id is not None and not directory.has_role(author, self.role_id):
                await directory.add_role(author, self.role_id)
            applied["role"] = True
        except MutationError as exc:
            return await self._system_error(request, exc, applied)

        record = MemberRecord(
            submitter_id=author,
            name=_name_of(nickname),
            id=fields.id,
            rank=fields.rank,
            formatted_nickname=nickname,
            timestamp=self.clock(),
        )
        self.registry.set(author, record)
        self.cooldowns.set(author, self.clock() + self.cooldown_seconds)
        log.info("Nickname changed for %s: %s -> %s", request.author_name, before, nickname)

        await self.notifier.react(request, REACT_ACCEPTED)
        await self.notifier.notify(
            author,
            messages.accepted(request.guild_name, before, nickname, fields.rank),
            fallback_channel_id=request.channel_id,
            fallback_content=messages.accepted_fallback(author),
        )
        if similar_to is not None:
            await self._warn_similar(author, nickname)
        log_line = f"**Nickname Changed**\nUser: <@{author}>\nBefore: {before}\nAfter: {nickname}"
        if fields.rank:
            log_line += f"\nRank: {fields.rank}"
        await self.notifier.operator(log_line)
        return Accepted(nickname=nickname, fields=fields, record=record, similar_to=similar_to)

    async def _system_error(
        self, request: RawRequest, exc: MutationError, applied: dict[str, bool]
    ) -> Rejected:
        author = request.author_id
        log.error(
            "Request %s from %s failed (%s)",
            request.message_id,
            request.author_name,
            ", ".join(f"{k}={'done' if v else 'not done'}" for k, v in applied.items())
            or "before apply",
            exc_info=exc,
        )
        state = ""
        if applied:
            nick = "changed" if applied.get("nickname") else "not changed"
            role = "added" if applied.get("role") else "not added"
            state = f"\nNickname: {nick}\nRole: {role}"
        await self.notifier.operator(
            f"❌ Error processing request from <@{author}>: {exc}{state}"
        )
        await self.notifier.react(request, REACT_ERROR)
        await self.notifier.notify(author, messages.system_error())
        return Rejected(Reason.SYSTEM, str(exc), applied=dict(applied))


__all__ = ["MENTION", "RequestClassifier", "contains_mention"]
