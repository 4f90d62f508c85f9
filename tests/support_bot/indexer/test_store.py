import json

import pytest

from support_bot.exceptions import InvalidGroupError
from support_bot.indexer.models import (
    Category,
    ChannelIndex,
    ClassifiedRecord,
    IndexSnapshot,
    iso_from_ms,
)
from support_bot.indexer.store import IndexStore, validate_guild_id


def _snapshot(msg) -> IndexSnapshot:
    snap = IndexSnapshot(
        channels={"10": ChannelIndex("10", "general", [msg(2, 2000, "hi"), msg(1, 1000, "yo")])},
        last_indexed=iso_from_ms(5000),
    )
    snap.bugs.append(
        ClassifiedRecord("general", "it crashed", "alice", 1000, "1", Category.BUG)
    )
    return snap


def test_save_then_load_round_trip(tmp_path, msg):
    store = IndexStore(tmp_path)
    snap = _snapshot(msg)

    assert store.save("42", snap) is True
    loaded = store.load(42)

    assert loaded == snap
    assert store.path("42").name == "server-index-42.json"


def test_file_layout(tmp_path, msg):
    store = IndexStore(tmp_path)
    store.save("42", _snapshot(msg))

    raw = json.loads(store.path("42").read_text(encoding="utf-8"))

    assert set(raw) == {"channels", "bugs", "features", "solutions", "lastIndexed"}
    channel = raw["channels"]["10"]
    assert channel["messageCount"] == 2
    assert channel["latestTimestamp"] == 2000
    assert channel["messages"][0]["date"] == "1970-01-01T00:00:02.000Z"
    assert raw["bugs"][0] == {
        "channel": "general",
        "message": "it crashed",
        "author": "alice",
        "timestamp": 1000,
        "id": "1",
    }
    assert raw["lastIndexed"] == "1970-01-01T00:00:05.000Z"


def test_missing_file_loads_as_none(tmp_path):
    store = IndexStore(tmp_path)
    assert store.load("42") is None
    assert store.load_or_empty("42") == IndexSnapshot()


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        "[]",
        '{"channels": {"1": {"messages": [{"id": "1"}]}}}',
        '{"channels": [1]}',
        '{"channels": {"1": "oops"}}',
        '{"bugs": [1]}',
        '{"channels": {"1": {"messages": [{"id": "1", "author": {"id": "9"}, "timestamp": 1, "reactions": [1]}]}}}',
    ],
)
def test_malformed_file_loads_as_none(tmp_path, payload):
    store = IndexStore(tmp_path)
    store.path("42").write_text(payload, encoding="utf-8")

    assert store.load("42") is None


def test_save_failure_returns_false(tmp_path, msg):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    store = IndexStore(blocker)

    assert store.save("42", _snapshot(msg)) is False


@pytest.mark.parametrize("bad", ["", "abc", "-5", "0", "12a"])
def test_invalid_guild_id(tmp_path, bad):
    with pytest.raises(InvalidGroupError):
        validate_guild_id(bad)
    with pytest.raises(InvalidGroupError):
        IndexStore(tmp_path).load(bad)


def test_load_restores_newest_first_unique_messages(tmp_path):
    def raw(mid, ts):
        return {"id": str(mid), "content": "", "author": {"id": "9", "username": "a"}, "timestamp": ts}

    store = IndexStore(tmp_path)
    payload = {"channels": {"10": {"name": "general", "messages": [raw(1, 100), raw(3, 300), raw(2, 200), raw(3, 300)]}}}
    store.path("42").write_text(json.dumps(payload), encoding="utf-8")

    channel = store.load("42").channels["10"]

    assert [m.id for m in channel.messages] == ["3", "2", "1"]
