"""Helpers for interacting with OpenAI API"""
from openai import AsyncOpenAI
from support_bot.config import core

import logging
logger = logging.getLogger(__name__)

# One global async-capable client
aoai = AsyncOpenAI(api_key=core.OPENAI_API_KEY)


async def generate(
    prompt: str,
    prior_turns: list[dict] | None = None,
    *,
    system: str | None = None,
    model: str | None = None,
) -> str:
    """
    Send ``prompt`` after the caller's prior turns and return the reply text.

    ``prior_turns`` are ``{"role": "user" | "assistant", "content": str}`` dicts
    ordered oldest-first, as returned by ``ConversationMemory.get``.

    Example message list sent to the API:
    .. code-block:: python
        [
            {"role": "system", "content": "<server knowledge + instructions>"},
            {"role": "user", "content": "Is the login crash fixed?"},
            {"role": "assistant", "content": "Yes, since 1.4.2."},
            {"role": "user", "content": "What about on Android?"}
        ]
    """
    messages: list[dict] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.extend(prior_turns or [])
    messages.append({"role": "user", "content": prompt})

    resp = await aoai.chat.completions.create(
        model=model or core.MSG_MODEL_ID,
        messages=messages,
        max_tokens=core.MAX_OUTPUT_TOKENS,
        temperature=core.TEMPERATURE,
    )
    text = (resp.choices[0].message.content or "").strip()
    logger.info("Generated %d chars with %s (%d prior turns)", len(text), model or core.MSG_MODEL_ID, len(prior_turns or []))
    return text
