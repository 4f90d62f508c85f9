from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from .. import register_cog
from ...config import core
from ...exceptions import SupportBotError

logger = logging.getLogger(__name__)


@register_cog
class Index(commands.Cog):
    """Admin-only manual re-index of the current server."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="index", description="Re-index server messages (admin only).")
    @app_commands.guild_only()
    async def index(self, interaction: discord.Interaction) -> None:
        if interaction.user.id not in core.ADMIN_USER_IDS:
            await interaction.response.send_message(
                "Only bot administrators can re-index the server.", ephemeral=True
            )
            return

        await interaction.response.defer(thinking=True, ephemeral=True)
        indexer = self.bot.services.indexer
        try:
            if not indexer.has_snapshot(interaction.guild_id):
                indexer.load(interaction.guild_id)
            report = await indexer.index_guild(
                interaction.guild_id, core.INDEX_CHANNEL_IDS
            )
        except SupportBotError as exc:
            logger.error("Manual index failed: %s", exc)
            await interaction.followup.send(f"Indexing failed: {exc}", ephemeral=True)
            return

        await interaction.followup.send(
            f"Indexing complete. {report.channels_done} channel(s) indexed, "
            f"{report.channels_failed} failed, {report.new_messages} new message(s), "
            f"{report.new_records} new record(s).",
            ephemeral=True,
        )
