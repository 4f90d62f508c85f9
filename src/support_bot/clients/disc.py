"""Discord bot bootstrap utilities."""

from __future__ import annotations

import logging

import discord
from discord.ext import commands as discord_commands

from support_bot import commands as sb_commands
from support_bot.config import core
from support_bot.event_hooks import guild_hook, message_hook, ready_hook
from support_bot.services import BotServices, build_services

logger = logging.getLogger(__name__)

# --- Intents --------------------------------------------------------------- #
intents = discord.Intents.default()
intents.message_content = True


class SupportBot(discord_commands.Bot):
    """Discord bot that owns the indexer, memory and scheduled jobs."""

    def __init__(self) -> None:
        super().__init__(command_prefix=discord_commands.when_mentioned, intents=intents)
        self.services: BotServices = build_services(self)

    async def setup_hook(self) -> None:
        """Register slash commands and synchronise with Discord."""

        await sb_commands.setup(self)

        try:
            synced = await self.tree.sync()
            logger.info("Synced %d application command(s)", len(synced))
        except Exception:
            logger.exception("Failed to sync application commands")

    async def close(self) -> None:
        logger.info("Shutting down bot...")
        await self.services.close()
        await super().close()


bot = SupportBot()


@bot.event
async def on_ready() -> None:
    await ready_hook.handle(bot)


@bot.event
async def on_message(message: discord.Message) -> None:
    await message_hook.handle(bot, message)


@bot.event
async def on_guild_join(guild: discord.Guild) -> None:
    await guild_hook.handle(bot, guild)


def run() -> None:
    """Start the Discord bot using configuration from the environment."""

    if not core.DISCORD_API_TOKEN:
        logger.error("No DISCORD_API_TOKEN configured. Cannot run client.")
        return

    try:
        bot.run(core.DISCORD_API_TOKEN, log_handler=None)
    except discord.LoginFailure as exc:
        logger.error("Login failed: %s", exc)
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected error while running client: %s", exc)
