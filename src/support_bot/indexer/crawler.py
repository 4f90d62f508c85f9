"""
Incremental, watermark-bounded channel crawler.

Each channel is paged backwards (newest-first) from the present until one of:

* a message at or below the channel's watermark shows up (already indexed),
* the gateway returns an empty page (history exhausted), or
* the configured cap of new messages has been collected.

The fresh messages are then merged into the stored list, deduplicated by id,
sorted newest-first and truncated to the cap. Every page request goes through
the run's :class:`~support_bot.indexer.ratelimit.FixedIntervalLimiter`.

Per channel the crawl walks ``IDLE -> FETCHING_PAGE -> MERGING ->
{FETCHING_PAGE | DONE}``; a gateway failure moves it to ``FAILED`` and the
previously stored index is kept as is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import takewhile
from typing import Iterable, List

from support_bot.exceptions import FetchError

from .gateway import ChannelRef, Gateway
from .models import ChannelIndex, Message, message_sort_key
from .ratelimit import FixedIntervalLimiter

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
DEFAULT_CAP = 500


class CrawlState(str, Enum):
    IDLE = "idle"
    FETCHING_PAGE = "fetching_page"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: dict[CrawlState, frozenset[CrawlState]] = {
    CrawlState.IDLE: frozenset({CrawlState.FETCHING_PAGE}),
    CrawlState.FETCHING_PAGE: frozenset({CrawlState.MERGING, CrawlState.FAILED}),
    CrawlState.MERGING: frozenset({CrawlState.FETCHING_PAGE, CrawlState.DONE, CrawlState.FAILED}),
    CrawlState.DONE: frozenset(),
    CrawlState.FAILED: frozenset(),
}


@dataclass
class ChannelCrawl:
    """Mutable progress of one channel within a run."""

    channel: ChannelRef
    state: CrawlState = CrawlState.IDLE
    pages: int = 0
    error: str | None = None

    def advance(self, state: CrawlState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"illegal crawl transition {self.state.value} -> {state.value}")
        self.state = state

    def fail(self, error: str) -> None:
        self.advance(CrawlState.FAILED)
        self.error = error


@dataclass
class CrawlResult:
    """Outcome of indexing one channel."""

    channel: ChannelRef
    state: CrawlState
    index: ChannelIndex | None
    new_messages: List[Message] = field(default_factory=list)
    pages: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is CrawlState.DONE


def merge(new: Iterable[Message], existing: Iterable[Message], cap: int = DEFAULT_CAP) -> List[Message]:
    """Merge ``new`` into ``existing``: dedupe by id (new wins), newest-first, at most ``cap``."""

    by_id: dict[str, Message] = {m.id: m for m in existing}
    by_id.update((m.id, m) for m in new)
    return sorted(by_id.values(), key=message_sort_key, reverse=True)[:cap]


class IncrementalCrawler:
    """Pages a channel back to its watermark and merges the result."""

    def __init__(
        self,
        gateway: Gateway,
        limiter: FixedIntervalLimiter,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        cap: int = DEFAULT_CAP,
    ) -> None:
        if page_size < 1 or cap < 1:
            raise ValueError("page_size and cap must be >= 1")
        self._gateway = gateway
        self._limiter = limiter
        self.page_size = page_size
        self.cap = cap

    async def fetch_new(
        self,
        channel: ChannelRef,
        watermark: int,
        crawl: ChannelCrawl | None = None,
    ) -> List[Message]:
        """Return messages newer than ``watermark``, newest-first, at most ``cap``."""

        crawl = crawl or ChannelCrawl(channel)
        accumulated: list[Message] = []
        cursor: str | None = None

        while True:
            crawl.advance(CrawlState.FETCHING_PAGE)
            await self._limiter.acquire()
            page = await self._gateway.fetch_page(channel, cursor, self.page_size)
            crawl.advance(CrawlState.MERGING)
            crawl.pages += 1

            if not page:
                break

            fresh = list(takewhile(lambda m: m.timestamp > watermark, page))
            accumulated.extend(fresh)
            if len(fresh) < len(page):
                logger.info("Reached previously indexed messages in #%s, stopping", channel.name)
                break
            if len(accumulated) >= self.cap:
                break
            cursor = page[-1].id

        return accumulated[: self.cap]

    async def index_channel(self, channel: ChannelRef, previous: ChannelIndex | None = None) -> CrawlResult:
        """Crawl ``channel`` and return its merged index; never raises ``FetchError``."""

        logger.info("Indexing channel: #%s", channel.name)
        crawl = ChannelCrawl(channel)
        watermark = previous.watermark if previous else 0
        if watermark > 0:
            logger.info("Found existing index for #%s, latest timestamp: %s", channel.name, watermark)

        try:
            fresh = await self.fetch_new(channel, watermark, crawl)
            merged = merge(fresh, previous.messages if previous else [], self.cap)
        except FetchError as exc:
            crawl.fail(str(exc))
            logger.error("Error indexing channel #%s: %s", channel.name, exc)
            return CrawlResult(
                channel=channel,
                state=crawl.state,
                index=previous,
                pages=crawl.pages,
                error=crawl.error,
            )

        crawl.advance(CrawlState.DONE)
        index = ChannelIndex(channel_id=channel.id, name=channel.name, messages=merged)
        if fresh:
            logger.info(
                "Indexed %d new messages from #%s (total: %d)", len(fresh), channel.name, index.message_count
            )
        else:
            logger.info("No new messages in #%s (total: %d)", channel.name, index.message_count)

        return CrawlResult(
            channel=channel,
            state=crawl.state,
            index=index,
            new_messages=fresh,
            pages=crawl.pages,
        )


__all__ = [
    "CrawlState",
    "ChannelCrawl",
    "CrawlResult",
    "IncrementalCrawler",
    "merge",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_CAP",
]
