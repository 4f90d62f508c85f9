import discord

from . import guild_hook

import logging

logger = logging.getLogger(__name__)

async def handle(client: discord.Client):
    """Start scheduled jobs and index every guild on client ready event."""
    logger.info(f"Bot logged in as {client.user.name} (ID: {client.user.id})")
    logger.info(f"Serving {len(client.guilds)} server(s)")

    services = client.services
    await services.start_jobs()

    for guild in client.guilds:
        logger.info(f"Auto indexing server: {guild.id}")
        await guild_hook.index_guild(services, guild.id)

    await client.change_presence(
        activity=discord.Activity(type=discord.ActivityType.watching, name="for @mentions | /help")
    )
    logger.info("Bot is ready to help!")
