"""Dataclass models for the guild index.

Persisted index schema (output of :meth:`IndexSnapshot.to_dict`):

```
{
  "channels": {
    "<channel id>": {"name": "general", "messageCount": 2, "latestTimestamp": 200,
                     "messages": [<message>, ...]}          # newest-first
  },
  "bugs": [<record>, ...], "features": [...], "solutions": [...],
  "lastIndexed": "2025-01-01T00:00:00.000Z" | null
}
```

``messageCount``, ``latestTimestamp`` and each message's ``date`` are derived
values: they are written for readers of the file and recomputed on load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List


def iso_from_ms(timestamp: int) -> str:
    """Render a millisecond epoch timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    dt = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class Category(str, Enum):
    BUG = "bug"
    FEATURE = "feature"
    SOLUTION = "solution"

    @property
    def collection(self) -> str:
        """Name of the snapshot collection holding this category's records."""
        return f"{self.value}s"


@dataclass(slots=True, frozen=True)
class Author:
    id: str
    username: str
    bot: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username, "bot": self.bot}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Author":
        return cls(id=str(data["id"]), username=str(data.get("username", "")), bot=bool(data.get("bot", False)))


@dataclass(slots=True, frozen=True)
class Reaction:
    emoji: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"emoji": self.emoji, "count": self.count}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reaction":
        return cls(emoji=str(data.get("emoji") or ""), count=int(data.get("count", 0)))


@dataclass(slots=True, frozen=True)
class Message:
    """A harvested channel message."""

    id: str
    content: str
    author: Author
    timestamp: int
    has_attachments: bool = False
    reactions: tuple[Reaction, ...] = ()

    @property
    def date(self) -> str:
        return iso_from_ms(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "author": self.author.to_dict(),
            "timestamp": self.timestamp,
            "date": self.date,
            "hasAttachments": self.has_attachments,
            "reactions": [r.to_dict() for r in self.reactions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(
            id=str(data["id"]),
            content=str(data.get("content") or ""),
            author=Author.from_dict(data["author"]),
            timestamp=int(data["timestamp"]),
            has_attachments=bool(data.get("hasAttachments", False)),
            reactions=tuple(Reaction.from_dict(r) for r in data.get("reactions", [])),
        )


def _newest_first(messages: Iterable[Message]) -> List[Message]:
    by_id = {m.id: m for m in messages}
    return sorted(by_id.values(), key=message_sort_key, reverse=True)


def message_sort_key(message: Message) -> tuple[int, int, str]:
    # Snowflake ids are decimal strings; compare by length first to order them numerically.
    return (message.timestamp, len(message.id), message.id)


@dataclass(slots=True)
class ChannelIndex:
    """Bounded, newest-first message list for one channel or thread."""

    channel_id: str
    name: str
    messages: List[Message] = field(default_factory=list)

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def watermark(self) -> int:
        """Newest stored timestamp, or 0 when nothing is stored."""
        return max((m.timestamp for m in self.messages), default=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "messageCount": self.message_count,
            "latestTimestamp": self.watermark,
            "messages": [m.to_dict() for m in self.messages],
        }

    @classmethod
    def from_dict(cls, channel_id: str, data: Dict[str, Any]) -> "ChannelIndex":
        return cls(
            channel_id=str(channel_id),
            name=str(data.get("name", "")),
            messages=_newest_first(Message.from_dict(m) for m in data.get("messages", [])),
        )


@dataclass(slots=True, frozen=True)
class ClassifiedRecord:
    """A message tagged with one actionable category."""

    channel: str
    message: str
    author: str
    timestamp: int
    id: str
    category: Category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channel": self.channel,
            "message": self.message,
            "author": self.author,
            "timestamp": self.timestamp,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], category: Category) -> "ClassifiedRecord":
        return cls(
            channel=str(data.get("channel", "")),
            message=str(data.get("message") or ""),
            author=str(data.get("author", "")),
            timestamp=int(data["timestamp"]),
            id=str(data["id"]),
            category=category,
        )


@dataclass(slots=True)
class IndexSnapshot:
    """Everything known about one guild; owned by a single indexer."""

    channels: Dict[str, ChannelIndex] = field(default_factory=dict)
    bugs: List[ClassifiedRecord] = field(default_factory=list)
    features: List[ClassifiedRecord] = field(default_factory=list)
    solutions: List[ClassifiedRecord] = field(default_factory=list)
    last_indexed: str | None = None

    def records(self, category: Category) -> List[ClassifiedRecord]:
        return getattr(self, category.collection)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channels": {cid: ch.to_dict() for cid, ch in self.channels.items()},
            "bugs": [r.to_dict() for r in self.bugs],
            "features": [r.to_dict() for r in self.features],
            "solutions": [r.to_dict() for r in self.solutions],
            "lastIndexed": self.last_indexed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexSnapshot":
        if not isinstance(data, dict):
            raise TypeError(f"index payload must be an object, got {type(data).__name__}")
        snapshot = cls(
            channels={
                str(cid): ChannelIndex.from_dict(cid, payload)
                for cid, payload in (data.get("channels") or {}).items()
            },
            last_indexed=data.get("lastIndexed"),
        )
        for category in Category:
            snapshot.records(category).extend(
                ClassifiedRecord.from_dict(r, category) for r in data.get(category.collection) or []
            )
        return snapshot


__all__ = [
    "Author",
    "Reaction",
    "Message",
    "ChannelIndex",
    "Category",
    "ClassifiedRecord",
    "IndexSnapshot",
    "iso_from_ms",
    "message_sort_key",
    "now_ms",
]
