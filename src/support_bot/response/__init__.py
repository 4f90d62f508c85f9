"""Answer pipeline: server knowledge + per-user memory -> text generation."""

from __future__ import annotations

import logging
from typing import Any

from support_bot.clients import oai
from support_bot.config import core
from support_bot.config import indexer as index_cfg
from support_bot.config import memory as memory_cfg
from support_bot.indexer import IndexSnapshot, aggregate
from support_bot.indexer.models import now_ms
from support_bot.services import BotServices

from .formatting import split_message
from .prompt import build_system_context

logger = logging.getLogger(__name__)


async def answer(
    services: BotServices,
    question: str,
    user_id: int | str,
    guild_id: int | str | None = None,
    channel: Any = None,
) -> str:
    """
    Generate a reply to ``question`` for ``user_id`` and record the exchange.

    ``guild_id`` selects whose index feeds the prompt; DMs (``None``) fall back
    to the most recently indexed guild.
    """

    gid = str(guild_id) if guild_id is not None else services.indexer.latest_guild_id
    snapshot = services.indexer.snapshot(gid) if gid else IndexSnapshot()
    training = aggregate(
        snapshot,
        now_ms(),
        recent_limit=index_cfg.RECENT_LIMIT,
        highlight_limit=index_cfg.HIGHLIGHT_LIMIT,
        highlight_channels=index_cfg.HIGHLIGHT_CHANNELS,
    )

    channel_context = await services.channel_context.get(channel) if channel is not None else []
    system = build_system_context(
        core.BOT_NAME,
        training,
        channel_context=channel_context,
        ground_truth=core.ground_truth,
        refresh_minutes=int(memory_cfg.CHANNEL_CONTEXT_REFRESH // 60),
        memory_minutes=int(memory_cfg.MAX_AGE_MINUTES),
    )

    prior_turns = services.memory.get(user_id)
    reply = await oai.generate(question, prior_turns, system=system)

    services.memory.add(user_id, "user", question)
    services.memory.add(user_id, "assistant", reply)
    return reply


__all__ = ["answer", "split_message", "build_system_context"]
