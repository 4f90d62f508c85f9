import asyncio
from types import SimpleNamespace

from support_bot.conversation import ChannelContextCache, ConversationMemory
from support_bot.event_hooks import guild_hook, ready_hook
from support_bot.exceptions import FetchError
from support_bot.indexer import ChannelRef, GuildIndexer, IndexStore
from support_bot.indexer.ratelimit import FixedIntervalLimiter
from support_bot.services import BotServices


class FlakyGateway:
    """Guild ``1`` breaks with ``error``; every other guild has one empty channel."""

    def __init__(self, error):
        self.error = error
        self.listed = []

    async def list_channels(self, guild_id, channel_ids=()):
        self.listed.append(guild_id)
        if guild_id == "1":
            raise self.error
        return [ChannelRef(id="5", name="general")]

    async def fetch_page(self, channel, before_id, limit):
        return []

    async def list_threads(self, forum):
        return []


def _services(gateway, tmp_path):
    indexer = GuildIndexer(
        gateway, IndexStore(tmp_path), limiter_factory=lambda: FixedIntervalLimiter(0.0)
    )
    return BotServices(
        indexer=indexer,
        memory=ConversationMemory(),
        channel_context=ChannelContextCache(),
    )


def test_gateway_failure_is_reported_as_none(tmp_path):
    services = _services(FlakyGateway(FetchError("1", "503 Service Unavailable")), tmp_path)

    assert asyncio.run(guild_hook.index_guild(services, "1")) is None


def test_unexpected_error_is_reported_as_none(tmp_path):
    services = _services(FlakyGateway(RuntimeError("boom")), tmp_path)

    assert asyncio.run(guild_hook.index_guild(services, "1")) is None


def test_malformed_snapshot_file_does_not_block_indexing(tmp_path):
    gateway = FlakyGateway(RuntimeError("unused"))
    services = _services(gateway, tmp_path)
    (tmp_path / "server-index-2.json").write_text('{"channels": [1]}', encoding="utf-8")

    report = asyncio.run(guild_hook.index_guild(services, "2"))

    assert report is not None and report.channels_done == 1


def test_ready_indexes_remaining_guilds_after_a_failure(tmp_path):
    gateway = FlakyGateway(RuntimeError("boom"))
    services = _services(gateway, tmp_path)
    presence = []

    async def change_presence(activity):
        presence.append(activity)

    client = SimpleNamespace(
        user=SimpleNamespace(name="helper", id=999),
        guilds=[SimpleNamespace(id=1), SimpleNamespace(id=2)],
        services=services,
        change_presence=change_presence,
    )

    async def run():
        await ready_hook.handle(client)
        await services.close()

    asyncio.run(run())

    assert gateway.listed == ["1", "2"]
    assert (tmp_path / "server-index-2.json").exists()
    assert len(presence) == 1
