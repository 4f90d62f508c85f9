from typing import Dict, List, Sequence

import pytest

from support_bot.exceptions import FetchError, InvalidGroupError
from support_bot.indexer.gateway import ChannelKind, ChannelRef
from support_bot.indexer.models import Author, Message


def make_msg(mid: int, ts: int, content: str = "", author: str = "alice") -> Message:
    return Message(id=str(mid), content=content, author=Author(id="9", username=author), timestamp=ts)


class FakeGateway:
    """In-memory gateway; ``history`` maps channel id to messages in any order."""

    def __init__(self) -> None:
        self.channels: List[ChannelRef] = []
        self.history: Dict[str, List[Message]] = {}
        self.threads: Dict[str, List[ChannelRef]] = {}
        self.failing: set[str] = set()
        self.failing_forums: set[str] = set()
        self.unknown_guilds: set[str] = set()
        self.calls: List[tuple[str, str | None, int]] = []

    def add_channel(self, cid: str, name: str, messages=(), kind=ChannelKind.STANDARD) -> ChannelRef:
        ref = ChannelRef(id=cid, name=name, kind=kind)
        self.channels.append(ref)
        self.history[cid] = list(messages)
        return ref

    def add_thread(self, forum: ChannelRef, cid: str, name: str, messages=()) -> ChannelRef:
        ref = ChannelRef(id=cid, name=name)
        self.threads.setdefault(forum.id, []).append(ref)
        self.history[cid] = list(messages)
        return ref

    async def list_channels(self, guild_id: str, channel_ids: Sequence[int] = ()) -> List[ChannelRef]:
        if guild_id in self.unknown_guilds:
            raise InvalidGroupError(f"Guild {guild_id} is not reachable")
        if channel_ids:
            wanted = {str(c) for c in channel_ids}
            return [c for c in self.channels if c.id in wanted]
        return list(self.channels)

    async def fetch_page(self, channel: ChannelRef, before_id: str | None, limit: int) -> List[Message]:
        self.calls.append((channel.id, before_id, limit))
        if channel.id in self.failing:
            raise FetchError(channel.id, "Missing Access")
        ordered = sorted(self.history.get(channel.id, []), key=lambda m: int(m.id), reverse=True)
        if before_id is not None:
            ordered = [m for m in ordered if int(m.id) < int(before_id)]
        return ordered[:limit]

    async def list_threads(self, forum: ChannelRef) -> List[ChannelRef]:
        if forum.id in self.failing_forums:
            raise FetchError(forum.id, "threads unavailable")
        return list(self.threads.get(forum.id, []))


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def msg():
    return make_msg
