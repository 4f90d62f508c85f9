"""Error taxonomy shared by the indexer and its collaborators.

``FetchError`` and ``PersistenceError`` are recoverable: the crawler and the
index store catch and log them so a guild run always completes a best-effort
pass. ``InvalidGroupError`` is the only failure surfaced to callers.
"""

from __future__ import annotations


class SupportBotError(Exception):
    """Base class for errors raised by this package."""


class FetchError(SupportBotError):
    """A gateway page or thread listing could not be fetched."""

    def __init__(self, channel_id: str, message: str) -> None:
        super().__init__(f"channel {channel_id}: {message}")
        self.channel_id = channel_id


class PersistenceError(SupportBotError):
    """An index file could not be read or written."""


class InvalidGroupError(SupportBotError):
    """The guild identifier is malformed or the guild cannot be resolved."""


__all__ = ["SupportBotError", "FetchError", "PersistenceError", "InvalidGroupError"]
