import pytest

from support_bot.indexer.aggregator import aggregate, format_stats, relative_time
from support_bot.indexer.models import Category, ChannelIndex, ClassifiedRecord, IndexSnapshot

NOW = 10_000_000_000


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (3_661_000, "1 hour ago"),
        (45_000, "45 seconds ago"),
        (1_000, "1 second ago"),
        (0, "0 seconds ago"),
        (-5_000, "0 seconds ago"),
        (120_000, "2 minutes ago"),
        (3 * 86_400_000 + 5, "3 days ago"),
    ],
)
def test_relative_time(elapsed, expected):
    assert relative_time(NOW - elapsed, NOW) == expected


def _record(i: int, category: Category = Category.BUG) -> ClassifiedRecord:
    return ClassifiedRecord("support", f"record {i}", "alice", NOW - i * 1000, str(i), category)


def test_recent_records_are_newest_first_and_limited():
    snapshot = IndexSnapshot()
    snapshot.bugs.extend(_record(i) for i in (15, 3, 8, 1, 12, 2, 9, 4, 7, 6, 5, 11, 10, 14, 13))

    ctx = aggregate(snapshot, NOW)

    assert [r.record.id for r in ctx.recent_bugs] == [str(i) for i in range(1, 11)]
    assert ctx.recent_bugs[0].relative_time == "1 second ago"
    assert ctx.summary.total_bugs == 15


def test_highlight_channels_match_by_name_fragment(msg):
    snapshot = IndexSnapshot(
        channels={
            "1": ChannelIndex("1", "📢-announcements", [msg(i, NOW - i * 60_000) for i in range(1, 8)]),
            "2": ChannelIndex("2", "general", [msg(100, NOW)]),
        }
    )

    ctx = aggregate(snapshot, NOW)

    announcements = ctx.highlights["announcements"]
    assert len(announcements) == 5
    assert announcements[0].relative_time == "1 minute ago"
    assert announcements[0].channel == "📢-announcements"
    assert ctx.highlights["dev-logs"] == []


def test_scenario_one_bug_and_one_feature(msg):
    from support_bot.indexer.classifier import classify_messages

    messages = [msg(1, 100, "bug: app crashes on launch"), msg(2, 200, "feature: please add dark mode")]
    snapshot = IndexSnapshot(channels={"1": ChannelIndex("1", "support", messages[::-1])})
    classify_messages("support", messages, snapshot)

    out = aggregate(snapshot, 1_000).to_dict()

    assert [r["id"] for r in out["recentBugs"]] == ["1"]
    assert [r["id"] for r in out["recentFeatures"]] == ["2"]
    assert out["recentSolutions"] == []
    assert set(out) >= {"summary", "recentAnnouncements", "recentDevLogs"}
    assert out["summary"]["lastIndexed"] == "never"


def test_render_includes_every_section():
    snapshot = IndexSnapshot()
    snapshot.features.append(_record(1, Category.FEATURE))

    text = aggregate(snapshot, NOW).render()

    for heading in (
        "Recent Announcements (from #announcements):",
        "Recent Dev Logs (from #dev-logs):",
        "Recent Bugs:",
        "Recent Feature Requests:",
        "Recent Solutions:",
    ):
        assert heading in text
    assert '"relativeTime": "1 second ago"' in text


def test_format_stats():
    snapshot = IndexSnapshot(channels={"1": ChannelIndex("1", "general")})
    snapshot.bugs.append(_record(1))

    text = format_stats(aggregate(snapshot, NOW).summary)

    assert text.startswith("**Training Data Statistics**")
    assert "Channels indexed: 1" in text
    assert "Bugs tracked: 1" in text
    assert "Last indexed: Never" in text
