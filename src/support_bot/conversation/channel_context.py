"""Cached recent-conversation context per Discord channel."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List

import discord

from support_bot.indexer.models import iso_from_ms

logger = logging.getLogger(__name__)

Fetcher = Callable[[Any, int], Awaitable[List[dict]]]


async def fetch_recent(channel: Any, limit: int) -> List[dict]:
    """Return the last ``limit`` messages of ``channel`` ordered oldest -> newest."""

    history = [msg async for msg in channel.history(limit=limit)]
    out: list[dict] = []
    for msg in reversed(history):
        ts = int(msg.created_at.timestamp() * 1000)
        out.append(
            {
                "author": msg.author.name,
                "content": msg.content,
                "timestamp": ts,
                "date": iso_from_ms(ts),
            }
        )
    return out


class ChannelContextCache:
    """Memoizes recent channel messages until the next scheduled :meth:`clear`."""

    def __init__(self, limit: int = 20, fetcher: Fetcher = fetch_recent) -> None:
        self.limit = limit
        self._fetcher = fetcher
        self._entries: Dict[int, List[dict]] = {}

    async def get(self, channel: Any) -> List[dict]:
        channel_id = channel.id
        if channel_id in self._entries:
            return self._entries[channel_id]

        try:
            messages = await self._fetcher(channel, self.limit)
        except (discord.HTTPException, discord.ClientException) as exc:
            logger.error("Error fetching channel context for %s: %s", channel_id, exc)
            return []

        self._entries[channel_id] = messages
        return messages

    def clear(self) -> None:
        if self._entries:
            logger.info("Clearing cached context for %d channel(s)", len(self._entries))
        self._entries.clear()

    def __contains__(self, channel_id: int) -> bool:
        return channel_id in self._entries


__all__ = ["ChannelContextCache", "fetch_recent"]
