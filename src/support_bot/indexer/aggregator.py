"""
Read-only projection of an :class:`IndexSnapshot` into prompt-ready context.

:func:`aggregate` ranks each category's records newest-first, keeps the most
recent few, and pulls the latest raw messages of the well-known highlight
channels (``announcements`` and ``dev-logs`` by default). Every entry carries a
human relative time (``"3 days ago"``) computed against the ``now`` supplied by
the caller, which keeps the projection deterministic under test.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .models import Category, ChannelIndex, ClassifiedRecord, IndexSnapshot, Message, iso_from_ms

RECENT_LIMIT = 10
HIGHLIGHT_LIMIT = 5
HIGHLIGHT_CHANNELS = ("announcements", "dev-logs")

_UNITS = (
    ("day", 86_400_000),
    ("hour", 3_600_000),
    ("minute", 60_000),
)


def relative_time(timestamp: int, now: int) -> str:
    """Return ``"<n> <unit>[s] ago"`` using the largest non-zero unit."""

    elapsed = max(now - timestamp, 0)
    for unit, size in _UNITS:
        count = elapsed // size
        if count > 0:
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    seconds = elapsed // 1000
    return f"{seconds} second{'s' if seconds != 1 else ''} ago"


@dataclass(slots=True)
class ContextSummary:
    total_channels: int
    total_bugs: int
    total_features: int
    total_solutions: int
    last_indexed: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalChannels": self.total_channels,
            "totalBugs": self.total_bugs,
            "totalFeatures": self.total_features,
            "totalSolutions": self.total_solutions,
            "lastIndexed": self.last_indexed,
        }


@dataclass(slots=True)
class RankedRecord:
    record: ClassifiedRecord
    relative_time: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.record.to_dict(),
            "date": iso_from_ms(self.record.timestamp),
            "relativeTime": self.relative_time,
        }


@dataclass(slots=True)
class ChannelHighlight:
    channel: str
    message: Message
    relative_time: str

    def to_dict(self) -> Dict[str, Any]:
        return {**self.message.to_dict(), "channel": self.channel, "relativeTime": self.relative_time}


def _camel(name: str) -> str:
    return "".join(part.capitalize() for part in name.replace("_", "-").split("-") if part)


@dataclass(slots=True)
class TrainingContext:
    summary: ContextSummary
    recent: Dict[Category, List[RankedRecord]] = field(default_factory=dict)
    highlights: Dict[str, List[ChannelHighlight]] = field(default_factory=dict)

    @property
    def recent_bugs(self) -> List[RankedRecord]:
        return self.recent.get(Category.BUG, [])

    @property
    def recent_features(self) -> List[RankedRecord]:
        return self.recent.get(Category.FEATURE, [])

    @property
    def recent_solutions(self) -> List[RankedRecord]:
        return self.recent.get(Category.SOLUTION, [])

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"summary": self.summary.to_dict()}
        for category in Category:
            out[f"recent{_camel(category.collection)}"] = [r.to_dict() for r in self.recent.get(category, [])]
        for name, entries in self.highlights.items():
            out[f"recent{_camel(name)}"] = [h.to_dict() for h in entries]
        return out

    def render(self) -> str:
        """Structured text sections for embedding in a generation prompt."""

        sections: list[str] = []
        for name, entries in self.highlights.items():
            sections.append(
                f"Recent {name.replace('-', ' ').title()} (from #{name}):\n"
                f"{json.dumps([h.to_dict() for h in entries], indent=2, ensure_ascii=False)}"
            )
        titles = {
            Category.BUG: "Recent Bugs",
            Category.FEATURE: "Recent Feature Requests",
            Category.SOLUTION: "Recent Solutions",
        }
        for category, title in titles.items():
            entries = self.recent.get(category, [])
            sections.append(
                f"{title}:\n{json.dumps([r.to_dict() for r in entries], indent=2, ensure_ascii=False)}"
            )
        return "\n\n".join(sections)


def _find_channel(snapshot: IndexSnapshot, fragment: str) -> ChannelIndex | None:
    needle = fragment.lower()
    return next((ch for ch in snapshot.channels.values() if needle in ch.name.lower()), None)


def aggregate(
    snapshot: IndexSnapshot,
    now: int,
    *,
    recent_limit: int = RECENT_LIMIT,
    highlight_limit: int = HIGHLIGHT_LIMIT,
    highlight_channels: Sequence[str] = HIGHLIGHT_CHANNELS,
) -> TrainingContext:
    """Build the :class:`TrainingContext` for ``snapshot`` as seen at ``now`` (ms)."""

    summary = ContextSummary(
        total_channels=len(snapshot.channels),
        total_bugs=len(snapshot.bugs),
        total_features=len(snapshot.features),
        total_solutions=len(snapshot.solutions),
        last_indexed=snapshot.last_indexed or "never",
    )

    recent: Dict[Category, List[RankedRecord]] = {}
    for category in Category:
        newest = sorted(snapshot.records(category), key=lambda r: r.timestamp, reverse=True)[:recent_limit]
        recent[category] = [RankedRecord(r, relative_time(r.timestamp, now)) for r in newest]

    highlights: Dict[str, List[ChannelHighlight]] = {}
    for name in highlight_channels:
        channel = _find_channel(snapshot, name)
        messages = channel.messages[:highlight_limit] if channel else []
        highlights[name] = [
            ChannelHighlight(channel.name, m, relative_time(m.timestamp, now)) for m in messages
        ]

    return TrainingContext(summary=summary, recent=recent, highlights=highlights)


def format_stats(summary: ContextSummary) -> str:
    """Render ``summary`` as the Discord-markdown stats reply."""

    last = summary.last_indexed if summary.last_indexed != "never" else "Never"
    return (
        "**Training Data Statistics**\n\n"
        f"Channels indexed: {summary.total_channels}\n"
        f"Bugs tracked: {summary.total_bugs}\n"
        f"Feature requests: {summary.total_features}\n"
        f"Solutions found: {summary.total_solutions}\n"
        f"Last indexed: {last}"
    )


__all__ = [
    "ContextSummary",
    "RankedRecord",
    "ChannelHighlight",
    "TrainingContext",
    "aggregate",
    "relative_time",
    "format_stats",
]
