import threading
from datetime import timedelta

import pytest

from support_bot.conversation import ConversationMemory


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_history_is_capped_to_newest_turns():
    memory = ConversationMemory(max_turns=20)
    for i in range(21):
        memory.add("u1", "user", f"q{i}")

    turns = memory.get("u1")

    assert len(turns) == 20
    assert turns[0]["content"] == "q1"
    assert turns[-1] == {"role": "user", "content": "q20"}


def test_turns_expire_after_max_age():
    clock = FakeClock()
    memory = ConversationMemory(max_age=timedelta(minutes=30), clock=clock)
    memory.add("u1", "user", "old question")
    clock.now += 10 * 60
    memory.add("u1", "assistant", "newer answer")

    clock.now += 25 * 60
    assert memory.get("u1") == [{"role": "assistant", "content": "newer answer"}]

    clock.now += 10 * 60
    assert memory.get("u1") == []
    assert len(memory) == 0


def test_users_are_isolated():
    memory = ConversationMemory()
    memory.add(1, "user", "mine")
    memory.add(2, "user", "theirs")

    assert memory.get("1") == [{"role": "user", "content": "mine"}]
    assert memory.get(2) == [{"role": "user", "content": "theirs"}]
    assert sorted(memory.users()) == ["1", "2"]


def test_clear_and_clear_all():
    memory = ConversationMemory()
    memory.add("a", "user", "x")
    memory.add("b", "user", "y")

    memory.clear("a")
    assert memory.get("a") == []
    assert memory.get("b") != []

    memory.clear_all()
    assert len(memory) == 0


def test_invalid_role_rejected():
    with pytest.raises(ValueError):
        ConversationMemory().add("a", "system", "nope")


def test_concurrent_adds_for_one_user_are_not_lost():
    memory = ConversationMemory(max_turns=1000)

    def worker(n):
        for i in range(50):
            memory.add("shared", "user", f"{n}-{i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(memory.get("shared")) == 400


def test_idle_users_do_not_keep_locks():
    memory = ConversationMemory()
    for uid in range(100):
        memory.add(uid, "user", "hi")
    memory.clear(5)
    memory.clear_all()

    assert len(memory) == 0
    assert len(memory._locks) == 0
