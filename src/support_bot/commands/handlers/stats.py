from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from .. import register_cog
from ...indexer.aggregator import format_stats


@register_cog
class Stats(commands.Cog):
    """Report what the bot has learned about this server."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="stats", description="Show training data statistics.")
    async def stats(self, interaction: discord.Interaction) -> None:
        indexer = self.bot.services.indexer
        guild_id = interaction.guild_id or indexer.latest_guild_id
        if guild_id is None:
            await interaction.response.send_message(
                "No server has been indexed yet.", ephemeral=True
            )
            return

        summary = indexer.training_context(guild_id).summary
        await interaction.response.send_message(format_stats(summary))
