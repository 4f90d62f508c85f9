"""Guild-level indexing runs.

:class:`GuildIndexer` owns the in-memory :class:`IndexSnapshot` of every guild it
has loaded or indexed. A run for one guild holds that guild's lock for its whole
duration, so overlapping runs for the same guild are serialized while different
guilds proceed independently, each with its own rate limiter.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Sequence

from support_bot.exceptions import FetchError

from .aggregator import TrainingContext, aggregate
from .classifier import classify_messages
from .crawler import DEFAULT_CAP, DEFAULT_PAGE_SIZE, CrawlResult, CrawlState, IncrementalCrawler
from .gateway import ChannelKind, ChannelRef, Gateway
from .models import Category, IndexSnapshot, iso_from_ms, now_ms
from .ratelimit import FixedIntervalLimiter
from .store import IndexStore, validate_guild_id

logger = logging.getLogger(__name__)


@dataclass
class IndexRunReport:
    """Summary of one guild run."""

    guild_id: str
    results: List[CrawlResult] = field(default_factory=list)
    new_records: int = 0
    saved: bool = False

    @property
    def channels_done(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def channels_failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def new_messages(self) -> int:
        return sum(len(r.new_messages) for r in self.results)


class GuildIndexer:
    """Runs incremental indexing for guilds and keeps their snapshots."""

    def __init__(
        self,
        gateway: Gateway,
        store: IndexStore,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        cap: int = DEFAULT_CAP,
        request_interval: float = 1.0,
        clock: Callable[[], int] = now_ms,
        limiter_factory: Callable[[], FixedIntervalLimiter] | None = None,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self.page_size = page_size
        self.cap = cap
        self._clock = clock
        self._limiter_factory = limiter_factory or (lambda: FixedIntervalLimiter(request_interval))
        self._snapshots: Dict[str, IndexSnapshot] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._latest: str | None = None
        self._handlers: Dict[
            ChannelKind,
            Callable[[IncrementalCrawler, ChannelRef, IndexSnapshot], Awaitable[List[CrawlResult]]],
        ] = {
            ChannelKind.STANDARD: self._index_standard,
            ChannelKind.FORUM: self._index_forum,
        }

    # ------------------------------------------------------------------ #
    # Snapshot access
    # ------------------------------------------------------------------ #

    def snapshot(self, guild_id: str | int) -> IndexSnapshot:
        """Return the guild's snapshot, creating an empty one on first use."""

        gid = validate_guild_id(guild_id)
        return self._snapshots.setdefault(gid, IndexSnapshot())

    def load(self, guild_id: str | int) -> IndexSnapshot | None:
        """Reload the guild's snapshot from disk; fall back to empty when absent."""

        gid = validate_guild_id(guild_id)
        loaded = self._store.load(gid)
        self._snapshots[gid] = loaded if loaded is not None else IndexSnapshot()
        self._latest = gid
        return loaded

    def has_snapshot(self, guild_id: str | int) -> bool:
        return validate_guild_id(guild_id) in self._snapshots

    def training_context(self, guild_id: str | int, now: int | None = None, **kwargs) -> TrainingContext:
        return aggregate(self.snapshot(guild_id), self._clock() if now is None else now, **kwargs)

    @property
    def latest_guild_id(self) -> str | None:
        """Guild most recently loaded or indexed; used for DMs, which have no guild."""
        return self._latest

    def _lock(self, guild_id: str) -> asyncio.Lock:
        return self._locks.setdefault(guild_id, asyncio.Lock())

    # ------------------------------------------------------------------ #
    # Indexing
    # ------------------------------------------------------------------ #

    async def index_guild(self, guild_id: str | int, channel_ids: Sequence[int] = ()) -> IndexRunReport:
        """
        Incrementally index ``guild_id`` and persist the result.

        Channel and thread failures are logged and skipped. Raises
        ``InvalidGroupError`` only when the guild itself cannot be resolved.
        """

        gid = validate_guild_id(guild_id)
        async with self._lock(gid):
            logger.info("Starting server indexing for guild: %s", gid)
            snapshot = self.snapshot(gid)
            crawler = IncrementalCrawler(
                self._gateway, self._limiter_factory(), page_size=self.page_size, cap=self.cap
            )
            report = IndexRunReport(guild_id=gid)
            before = sum(len(snapshot.records(c)) for c in Category)

            channels = await self._gateway.list_channels(gid, channel_ids)
            for ref in channels:
                logger.info("Processing channel: #%s (kind: %s, id: %s)", ref.name, ref.kind.value, ref.id)
                try:
                    report.results.extend(await self._handlers[ref.kind](crawler, ref, snapshot))
                except Exception as exc:
                    logger.exception("Unexpected failure indexing channel #%s", ref.name)
                    report.results.append(_failed(ref, str(exc)))

            snapshot.last_indexed = iso_from_ms(self._clock())
            report.new_records = sum(len(snapshot.records(c)) for c in Category) - before
            report.saved = self._store.save(gid, snapshot)
            self._latest = gid

            logger.info(
                "Server indexing completed for guild %s: %d channels done, %d failed, %d new messages",
                gid,
                report.channels_done,
                report.channels_failed,
                report.new_messages,
            )
            return report

    async def _index_standard(
        self, crawler: IncrementalCrawler, ref: ChannelRef, snapshot: IndexSnapshot
    ) -> List[CrawlResult]:
        result = await crawler.index_channel(ref, snapshot.channels.get(ref.id))
        if result.ok and result.index is not None:
            snapshot.channels[ref.id] = result.index
            classify_messages(ref.name, result.new_messages, snapshot)
        return [result]

    async def _index_forum(
        self, crawler: IncrementalCrawler, ref: ChannelRef, snapshot: IndexSnapshot
    ) -> List[CrawlResult]:
        logger.info("Channel #%s is a forum channel, fetching threads...", ref.name)
        try:
            threads = await self._gateway.list_threads(ref)
        except FetchError as exc:
            logger.error("Error fetching threads from #%s: %s", ref.name, exc)
            return [_failed(ref, str(exc))]

        results: list[CrawlResult] = []
        for thread in threads:
            try:
                results.extend(await self._index_standard(crawler, thread, snapshot))
            except Exception as exc:
                logger.exception("Unexpected failure indexing thread #%s", thread.name)
                results.append(_failed(thread, str(exc)))
        return results


def _failed(ref: ChannelRef, error: str) -> CrawlResult:
    return CrawlResult(channel=ref, state=CrawlState.FAILED, index=None, error=error)


__all__ = ["GuildIndexer", "IndexRunReport"]
