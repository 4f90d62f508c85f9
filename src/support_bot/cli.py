from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

logger = logging.getLogger(__name__)


def _guild_id(value: str) -> str:
    if not value.isdigit() or int(value) <= 0:
        raise argparse.ArgumentTypeError("guild id must be a positive integer")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="support-bot",
        description="Discord support bot backed by the server's own message history.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>", required=True)

    subparsers.add_parser("run", help="Connect to Discord and serve questions.")

    index_cmd = subparsers.add_parser(
        "index",
        help="Incrementally index one guild and write its snapshot, then exit.",
    )
    index_cmd.add_argument("guild_id", type=_guild_id, help="Discord guild (server) ID.")
    index_cmd.add_argument(
        "--channels",
        "-c",
        nargs="+",
        type=int,
        default=None,
        help="Channel IDs to index (overrides the configured channel list).",
    )

    stats_cmd = subparsers.add_parser(
        "stats", help="Print statistics for a guild snapshot already on disk."
    )
    stats_cmd.add_argument("guild_id", type=_guild_id, help="Discord guild (server) ID.")

    return parser


async def _index(guild_id: str, channel_ids: List[int]) -> int:
    from .clients.index_client import connect_index_client
    from .config import core
    from .services import build_indexer

    async with connect_index_client(core.DISCORD_API_TOKEN) as client:
        indexer = build_indexer(client)
        indexer.load(guild_id)
        report = await indexer.index_guild(guild_id, channel_ids or core.INDEX_CHANNEL_IDS)

    print(
        f"Guild {report.guild_id}: {report.channels_done} channel(s) indexed, "
        f"{report.channels_failed} failed, {report.new_messages} new message(s), "
        f"{report.new_records} new record(s), saved={report.saved}"
    )
    return 0 if report.saved else 1


def _stats(guild_id: str) -> int:
    from .config import indexer as index_cfg
    from .indexer import IndexStore, aggregate
    from .indexer.aggregator import format_stats
    from .indexer.models import now_ms

    snapshot = IndexStore(index_cfg.DATA_DIR).load_or_empty(guild_id)
    print(format_stats(aggregate(snapshot, now_ms()).summary))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "run":
        from .clients import disc

        disc.run()
        return 0

    if args.command == "index":
        return asyncio.run(_index(args.guild_id, args.channels or []))

    if args.command == "stats":
        return _stats(args.guild_id)

    parser.print_help()
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
