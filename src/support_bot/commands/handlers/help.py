from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from .. import register_cog

HELP_TEXT = """**Support Bot Help**

**How to use me:**
- Mention me with your question: `@{name} How do I install?`
- Use `/ask` followed by your question
- Send me a direct message

**Available Commands:**
`/help` - Show this help message
`/ask <question>` - Ask a question
`/stats` - Show training data statistics
`/clear` - Clear your conversation history
`/ping` - Check bot latency
`/index` - Re-index server messages (admin only)

I learn from bug reports, feature requests and solutions posted in this server."""


@register_cog
class Help(commands.Cog):
    """Explain how to talk to the bot."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="help", description="Show how to use the support bot.")
    async def help(self, interaction: discord.Interaction) -> None:
        name = self.bot.user.name if self.bot.user else "bot"
        await interaction.response.send_message(HELP_TEXT.format(name=name), ephemeral=True)
