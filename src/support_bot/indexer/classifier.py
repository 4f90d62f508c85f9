from __future__ import annotations

import logging
from typing import Iterable

from .models import Category, ClassifiedRecord, IndexSnapshot, Message

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------- #
#  Keyword lists (lower-case, substring match)
# --------------------------------------------------------------------- #

KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.BUG: ("bug", "error", "crash", "broken", "issue", "problem", "not working"),
    Category.FEATURE: ("feature", "request", "suggestion", "could you", "would be nice", "add"),
    Category.SOLUTION: ("fixed", "solved", "working now", "thanks", "resolved"),
}

# --------------------------------------------------------------------- #
#  Main entry
# --------------------------------------------------------------------- #


def classify(text: str) -> frozenset[Category]:
    """
    Return every category whose keywords occur in ``text``.

    Categories are not exclusive: ``"thanks, the crash is fixed"`` is both a
    bug and a solution. Empty text matches nothing.
    """
    content = (text or "").lower()
    return frozenset(
        category
        for category, keywords in KEYWORDS.items()
        if any(keyword in content for keyword in keywords)
    )


def classify_messages(channel_name: str, messages: Iterable[Message], snapshot: IndexSnapshot) -> int:
    """
    Append a :class:`ClassifiedRecord` to ``snapshot`` for each matching category.

    A message already recorded under a category (same message id) is not
    recorded there again, so re-indexing never duplicates records.

    :returns: Number of records appended.
    """
    seen = {category: {r.id for r in snapshot.records(category)} for category in Category}
    added = 0
    for msg in messages:
        for category in sorted(classify(msg.content), key=lambda c: c.value):
            if msg.id in seen[category]:
                continue
            snapshot.records(category).append(
                ClassifiedRecord(
                    channel=channel_name,
                    message=msg.content,
                    author=msg.author.username,
                    timestamp=msg.timestamp,
                    id=msg.id,
                    category=category,
                )
            )
            seen[category].add(msg.id)
            added += 1

    if added:
        logger.debug("classify: #%s -> %d new records", channel_name, added)
    return added


__all__ = ["KEYWORDS", "classify", "classify_messages"]
