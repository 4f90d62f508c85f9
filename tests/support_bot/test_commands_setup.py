import asyncio

import discord
from discord.ext import commands as discord_commands

from support_bot import commands as sb_commands


async def _collect_cogs():
    bot = discord_commands.Bot(command_prefix="!", intents=discord.Intents.none())
    try:
        await sb_commands.setup(bot)
        return set(bot.cogs.keys()), sorted(cmd.name for cmd in bot.tree.get_commands())
    finally:
        await bot.close()


def test_setup_registers_known_cogs():
    cogs, names = asyncio.run(_collect_cogs())
    assert {"Help", "Ask", "Stats", "Index", "Clear", "Ping"}.issubset(cogs)
    assert names == ["ask", "clear", "help", "index", "ping", "stats"]


def test_register_cog_rejects_non_cogs():
    import pytest

    with pytest.raises(TypeError):
        sb_commands.register_cog(object)


def test_register_cog_is_idempotent():
    help_cog = next(cls for cls in sb_commands._COG_CLASSES if cls.__name__ == "Help")
    before = len(sb_commands._COG_CLASSES)

    assert sb_commands.register_cog(help_cog) is help_cog
    assert len(sb_commands._COG_CLASSES) == before
