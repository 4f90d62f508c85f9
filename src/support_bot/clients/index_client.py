from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import discord

logger = logging.getLogger(__name__)

INTENTS = discord.Intents.none()
INTENTS.guilds = True
INTENTS.messages = True
INTENTS.message_content = True


class IndexDiscordClient(discord.Client):
    """Minimal gateway client for one-off indexing runs from the command line."""

    def __init__(self) -> None:
        super().__init__(intents=INTENTS)


@asynccontextmanager
async def connect_index_client(token: str) -> AsyncIterator[discord.Client]:
    """
    Connect a client and wait for its guild cache to fill.

    Channel listing reads ``guild.channels``, which only the gateway populates,
    so a bare HTTP login is not enough here.
    """

    client = IndexDiscordClient()
    runner = asyncio.create_task(client.start(token))
    try:
        ready = asyncio.create_task(client.wait_until_ready())
        done, _ = await asyncio.wait({runner, ready}, return_when=asyncio.FIRST_COMPLETED)
        if runner in done:
            ready.cancel()
            runner.result()
            raise RuntimeError("Discord client stopped before becoming ready")
        logger.info("Index client connected as %s", client.user)
        yield client
    finally:
        await client.close()
        if not runner.done():
            runner.cancel()
        try:
            await runner
        except (asyncio.CancelledError, discord.DiscordException):
            pass


__all__ = ["connect_index_client", "IndexDiscordClient"]
