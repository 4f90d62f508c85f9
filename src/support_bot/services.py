"""Process-wide collaborators, built once and passed to hooks and commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

import discord

from support_bot.config import indexer as index_cfg
from support_bot.config import memory as memory_cfg
from support_bot.conversation import ChannelContextCache, ConversationMemory
from support_bot.indexer import DiscordGateway, GuildIndexer, IndexStore
from support_bot.maintenance import Scheduler


@dataclass
class BotServices:
    """Caller-owned state of a running bot."""

    indexer: GuildIndexer
    memory: ConversationMemory
    channel_context: ChannelContextCache
    scheduler: Scheduler = field(default_factory=Scheduler)

    async def start_jobs(self) -> None:
        await self.scheduler.start(
            "channel_context_refresh", self.channel_context.clear, memory_cfg.CHANNEL_CONTEXT_REFRESH
        )
        await self.scheduler.start("memory_reset", self.memory.clear_all, memory_cfg.RESET_INTERVAL)

    async def close(self) -> None:
        await self.scheduler.stop()


def build_indexer(client: discord.Client) -> GuildIndexer:
    return GuildIndexer(
        DiscordGateway(client),
        IndexStore(index_cfg.DATA_DIR),
        page_size=index_cfg.PAGE_SIZE,
        cap=index_cfg.CHANNEL_CAP,
        request_interval=index_cfg.REQUEST_INTERVAL,
    )


def build_services(client: discord.Client) -> BotServices:
    return BotServices(
        indexer=build_indexer(client),
        memory=ConversationMemory(
            max_turns=memory_cfg.MAX_TURNS,
            max_age=timedelta(minutes=memory_cfg.MAX_AGE_MINUTES),
        ),
        channel_context=ChannelContextCache(limit=memory_cfg.CHANNEL_CONTEXT_LENGTH),
    )


__all__ = ["BotServices", "build_indexer", "build_services"]
