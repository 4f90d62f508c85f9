from __future__ import annotations

from typing import List

DISCORD_MESSAGE_LIMIT = 2000


def split_message(text: str, max_length: int = DISCORD_MESSAGE_LIMIT) -> List[str]:
    """
    Split ``text`` into chunks of at most ``max_length`` characters.

    Lines are kept whole where possible; a single line longer than the limit is
    hard-wrapped.
    """
    if len(text) <= max_length:
        return [text]

    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > max_length:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:max_length])
            line = line[max_length:]
        if current and len(current) + len(line) + 1 > max_length:
            chunks.append(current)
            current = line
        else:
            current = f"{current}\n{line}" if current else line

    if current:
        chunks.append(current)
    return chunks
