from __future__ import annotations

import logging

import discord

from support_bot.config import core
from support_bot.exceptions import SupportBotError
from support_bot.indexer import IndexRunReport
from support_bot.services import BotServices

logger = logging.getLogger(__name__)


async def index_guild(services: BotServices, guild_id: int | str) -> IndexRunReport | None:
    """
    Load (first time only) and incrementally index ``guild_id``.

    Never raises: callers loop over every joined guild, so one guild's failure
    is logged and reported as ``None``.
    """

    indexer = services.indexer
    try:
        if not indexer.has_snapshot(guild_id):
            indexer.load(guild_id)
        report = await indexer.index_guild(guild_id, core.INDEX_CHANNEL_IDS)
    except SupportBotError as exc:
        logger.error("Failed to index guild %s: %s", guild_id, exc)
        return None
    except Exception:
        logger.exception("Unexpected failure indexing guild %s", guild_id)
        return None

    summary = indexer.training_context(guild_id).summary
    logger.info(
        "Indexed %d channels, found %d bugs, %d features, %d solutions",
        summary.total_channels,
        summary.total_bugs,
        summary.total_features,
        summary.total_solutions,
    )
    return report


async def handle(client: discord.Client, guild: discord.Guild) -> None:
    """Index a guild as soon as the bot joins it."""
    logger.info("Joined new guild: %s (%s)", guild.name, guild.id)
    await index_guild(client.services, guild.id)
