from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from .. import register_cog
from ... import response

logger = logging.getLogger(__name__)


@register_cog
class Ask(commands.Cog):
    """Answer a question using the server's indexed knowledge."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="ask", description="Ask the support bot a question.")
    @app_commands.describe(question="What do you want to know?")
    async def ask(self, interaction: discord.Interaction, question: str) -> None:
        """Defer, generate, then deliver the answer in Discord-sized chunks."""

        await interaction.response.defer(thinking=True)
        try:
            reply = await response.answer(
                self.bot.services,
                question,
                interaction.user.id,
                interaction.guild_id,
                interaction.channel,
            )
        except Exception:
            logger.exception("Error answering /ask from %s", interaction.user.id)
            await interaction.followup.send(
                "Sorry, I encountered an error processing your question. Please try again later."
            )
            return

        for chunk in response.split_message(reply):
            await interaction.followup.send(chunk)
