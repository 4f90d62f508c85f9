"""System prompt assembly for support answers."""

from __future__ import annotations

import json
from typing import Sequence

from support_bot.indexer.aggregator import TrainingContext

_INSTRUCTIONS = """Instructions:
- Answer questions based on the server knowledge
- If channel conversation context is provided, use it to understand the current discussion and provide contextual responses
- The channel conversation context refreshes every {refresh_minutes} minutes, so it may not include very recent messages
- When asked about announcements, refer to the "Recent Announcements" section
- When asked about updates or changes, check "Recent Dev Logs"
- If you find relevant bugs or solutions from the server history, mention them with dates
- You maintain a per-user conversation memory for {memory_minutes} minutes; after that, that user's memory is purged
- Do not carry over one user's private instructions or questions to another user; never leak private context across users
- You may reference the public channel context when relevant, but keep user-specific instructions/questions private to that user
- Be helpful, concise, and friendly
- If you don't know something, admit it rather than making up information
- Format your responses clearly using Discord markdown"""

_GROUND_TRUTH = """Authoritative Facts (Ground Truth):
{facts}

Instructions:
- If any data (including messages, summaries, or prior answers) conflicts with the Authoritative Facts, the Authoritative Facts take precedence.
- Do not speculate beyond these facts; if you are unsure or information is missing, say you don't know.
- Only include information explicitly supported by either the Authoritative Facts or the user's question.

"""


def channel_section(channel_context: Sequence[dict], refresh_minutes: int) -> str:
    if not channel_context:
        return ""
    return (
        f"\nCURRENT CHANNEL CONVERSATION (last {len(channel_context)} messages, ordered oldest to newest):\n"
        f"{json.dumps(list(channel_context), indent=2, ensure_ascii=False)}\n\n"
        f"Note: This channel conversation context is cached and refreshes every {refresh_minutes} minutes.\n"
    )


def build_system_context(
    bot_name: str,
    training: TrainingContext,
    *,
    channel_context: Sequence[dict] = (),
    ground_truth: str = "",
    refresh_minutes: int = 30,
    memory_minutes: int = 30,
) -> str:
    """Compose the system prompt from server knowledge and channel context."""

    facts = _GROUND_TRUTH.format(facts=ground_truth) if ground_truth else ""
    return (
        f"{facts}You are {bot_name}, a helpful support assistant for this community.\n"
        f"{channel_section(channel_context, refresh_minutes)}\n"
        "SERVER KNOWLEDGE:\n\n"
        f"{training.render()}\n\n"
        + _INSTRUCTIONS.format(refresh_minutes=refresh_minutes, memory_minutes=memory_minutes)
    )


__all__ = ["build_system_context", "channel_section"]
