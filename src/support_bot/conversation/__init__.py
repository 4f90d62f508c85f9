"""
Conversation state handed to the text-generation client.

``memory``
    :class:`~support_bot.conversation.memory.ConversationMemory`, the per-user
    TTL-bounded dialogue history.
``channel_context``
    :class:`~support_bot.conversation.channel_context.ChannelContextCache`, the
    recent public messages of a channel, cleared on a fixed schedule.
"""

from .channel_context import ChannelContextCache
from .memory import ConversationMemory, ConversationTurn

__all__ = ["ChannelContextCache", "ConversationMemory", "ConversationTurn"]
