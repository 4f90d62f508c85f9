"""
Paginated read access to a guild's channels.

:class:`Gateway` is the contract the crawler depends on. :class:`DiscordGateway`
implements it on top of a logged-in :class:`discord.Client` and translates
Discord HTTP failures into :class:`~support_bot.exceptions.FetchError` so the
crawler can skip a single channel without aborting the run.

Channels are described by :class:`ChannelRef`, a tagged variant whose ``kind``
selects the indexing behavior: ``STANDARD`` channels are paged directly while
``FORUM`` containers are expanded into their threads first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Protocol, Sequence

import discord
from discord.abc import Messageable

from support_bot.exceptions import FetchError, InvalidGroupError

from .models import Author, Message, Reaction

logger = logging.getLogger(__name__)


class ChannelKind(str, Enum):
    STANDARD = "standard"
    FORUM = "forum"


@dataclass(frozen=True)
class ChannelRef:
    """Channel identity plus the backend handle used to fetch it."""

    id: str
    name: str
    kind: ChannelKind = ChannelKind.STANDARD
    handle: Any = field(default=None, compare=False, repr=False)


class Gateway(Protocol):
    """Read-only paginated message source."""

    async def list_channels(self, guild_id: str, channel_ids: Sequence[int] = ()) -> List[ChannelRef]:
        """Return indexable channels; raise ``InvalidGroupError`` for unknown guilds."""

    async def fetch_page(self, channel: ChannelRef, before_id: str | None, limit: int) -> List[Message]:
        """Return up to ``limit`` messages newest-first, strictly older than ``before_id``."""

    async def list_threads(self, forum: ChannelRef) -> List[ChannelRef]:
        """Return active and archived threads of a forum container."""


def to_message(msg: discord.Message) -> Message:
    """Project a Discord message onto the stored message model."""

    author = msg.author
    return Message(
        id=str(msg.id),
        content=msg.content or "",
        author=Author(id=str(author.id), username=author.name, bot=bool(author.bot)),
        timestamp=int(msg.created_at.timestamp() * 1000),
        has_attachments=len(msg.attachments) > 0,
        reactions=tuple(
            Reaction(emoji=getattr(r.emoji, "name", None) or str(r.emoji), count=r.count)
            for r in msg.reactions
        ),
    )


def _ref(channel: Any) -> ChannelRef:
    kind = ChannelKind.FORUM if channel.type is discord.ChannelType.forum else ChannelKind.STANDARD
    return ChannelRef(id=str(channel.id), name=channel.name, kind=kind, handle=channel)


def _is_indexable(channel: Any, me: Any) -> bool:
    if channel.type is not discord.ChannelType.forum and not isinstance(channel, Messageable):
        return False
    if me is None:
        return True
    return channel.permissions_for(me).read_message_history


class DiscordGateway:
    """:class:`Gateway` backed by discord.py HTTP calls."""

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    async def _guild(self, guild_id: str) -> discord.Guild:
        try:
            gid = int(guild_id)
        except (TypeError, ValueError) as exc:
            raise InvalidGroupError(f"Invalid guild id {guild_id!r}") from exc

        guild = self._client.get_guild(gid)
        if guild is not None:
            return guild
        try:
            return await self._client.fetch_guild(gid)
        except (discord.NotFound, discord.Forbidden) as exc:
            raise InvalidGroupError(f"Guild {guild_id} is not reachable: {exc}") from exc
        except discord.HTTPException as exc:
            raise FetchError(guild_id, f"guild lookup failed: {exc}") from exc

    async def list_channels(self, guild_id: str, channel_ids: Sequence[int] = ()) -> List[ChannelRef]:
        guild = await self._guild(guild_id)
        me = getattr(guild, "me", None)

        channels: Iterable[Any] = guild.channels
        if channel_ids:
            logger.info("Fetching %d specific channels", len(channel_ids))
            resolved = []
            for cid in channel_ids:
                channel = guild.get_channel(cid)
                if channel is None:
                    try:
                        channel = await guild.fetch_channel(cid)
                    except discord.HTTPException as exc:
                        logger.warning("Could not fetch channel %s: %s", cid, exc)
                        continue
                resolved.append(channel)
            channels = resolved

        refs = [_ref(ch) for ch in channels if _is_indexable(ch, me)]
        logger.info("Found %d channels to index in guild %s", len(refs), guild_id)
        return refs

    async def fetch_page(self, channel: ChannelRef, before_id: str | None, limit: int) -> List[Message]:
        before = discord.Object(id=int(before_id)) if before_id else None
        try:
            return [
                to_message(msg)
                async for msg in channel.handle.history(limit=limit, before=before)
            ]
        except (discord.HTTPException, discord.ClientException) as exc:
            raise FetchError(channel.id, f"page fetch failed: {exc}") from exc

    async def list_threads(self, forum: ChannelRef) -> List[ChannelRef]:
        handle = forum.handle
        try:
            active = [t for t in await handle.guild.active_threads() if t.parent_id == handle.id]
            archived = [t async for t in handle.archived_threads(limit=None)]
        except (discord.HTTPException, discord.ClientException) as exc:
            raise FetchError(forum.id, f"thread listing failed: {exc}") from exc

        threads: dict[int, Any] = {t.id: t for t in active}
        threads.update((t.id, t) for t in archived)
        logger.info(
            "Found %d threads in #%s (%d active, %d archived)",
            len(threads),
            forum.name,
            len(active),
            len(archived),
        )
        return [
            ChannelRef(id=str(t.id), name=t.name, kind=ChannelKind.STANDARD, handle=t)
            for t in threads.values()
        ]


__all__ = ["ChannelKind", "ChannelRef", "Gateway", "DiscordGateway", "to_message"]
