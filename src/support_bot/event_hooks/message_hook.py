import re

import discord

from support_bot import response
from support_bot.config import core

import logging

logger = logging.getLogger(__name__)

_MENTION_RE = re.compile(r"<@!?\d+>")

_ERROR_REPLY = "Sorry, I encountered an error processing your question. Please try again later."


def _question_for(client: discord.Client, message: discord.Message) -> str | None:
    """Return the question to answer, or ``None`` when the bot should stay silent."""
    bot_user = client.user
    if bot_user is not None and bot_user in message.mentions:
        return _MENTION_RE.sub("", message.content or "").strip()

    if core.AUTO_RESPOND_CHANNEL_ID and message.channel.id == core.AUTO_RESPOND_CHANNEL_ID:
        return (message.content or "").strip()

    if isinstance(message.channel, discord.DMChannel):
        return (message.content or "").strip()

    return None


async def handle(client: discord.Client, message: discord.Message):
    """
    Handle incoming discord messages.
    - client: Discord bot client instance
    - message: The incoming message object
    """
    # 1) Never answer bots (including ourselves)
    if message.author.bot:
        return

    # 2) Mention, auto-respond channel, or DM?
    question = _question_for(client, message)
    if question is None:
        return
    if not question:
        await message.reply("Please ask me a question! Example: `@me How do I install?`")
        return

    # 3) Generate and deliver in Discord-sized chunks
    guild_id = message.guild.id if message.guild else None
    try:
        async with message.channel.typing():
            reply = await response.answer(
                client.services, question, message.author.id, guild_id, message.channel
            )
    except Exception:
        logger.exception("Error answering message %s", message.id)
        await message.reply(_ERROR_REPLY)
        return

    for chunk in response.split_message(reply):
        await message.reply(chunk)
