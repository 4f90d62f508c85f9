from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from .. import register_cog


@register_cog
class Clear(commands.Cog):
    """Forget the caller's conversation history."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="clear", description="Clear your conversation history with the bot.")
    async def clear(self, interaction: discord.Interaction) -> None:
        self.bot.services.memory.clear(interaction.user.id)
        await interaction.response.send_message(
            "Your conversation history has been cleared.", ephemeral=True
        )
