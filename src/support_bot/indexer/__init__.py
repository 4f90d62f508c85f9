"""
Guild message index package.

Modules
=======

``models``
    Dataclasses for harvested messages, per-channel indices, classified records
    and the guild-wide :class:`~support_bot.indexer.models.IndexSnapshot`, with
    their JSON (de)serialization.
``gateway``
    The :class:`~support_bot.indexer.gateway.Gateway` contract plus the
    discord.py-backed implementation and the ``ChannelRef`` tagged variant.
``ratelimit``
    Fixed-interval pacing shared by every page request of one guild run.
``crawler``
    Watermark-bounded backward paging and the deduplicating merge.
``classifier``
    Keyword tagging of messages into bug / feature / solution records.
``store``
    Best-effort JSON persistence of snapshots, one file per guild.
``aggregator``
    Ranked, time-annotated projection of a snapshot for prompt building.
``guild``
    :class:`~support_bot.indexer.guild.GuildIndexer`, which runs a full
    indexing pass for a guild under that guild's lock.
"""

from .aggregator import TrainingContext, aggregate, relative_time
from .classifier import classify
from .crawler import IncrementalCrawler, merge
from .gateway import ChannelKind, ChannelRef, DiscordGateway, Gateway
from .guild import GuildIndexer, IndexRunReport
from .models import Category, ChannelIndex, ClassifiedRecord, IndexSnapshot, Message
from .store import IndexStore

__all__ = [
    "aggregate",
    "classify",
    "merge",
    "relative_time",
    "Category",
    "ChannelIndex",
    "ChannelKind",
    "ChannelRef",
    "ClassifiedRecord",
    "DiscordGateway",
    "Gateway",
    "GuildIndexer",
    "IncrementalCrawler",
    "IndexRunReport",
    "IndexSnapshot",
    "IndexStore",
    "Message",
    "TrainingContext",
]
