import asyncio

import pytest

from support_bot.indexer.ratelimit import FixedIntervalLimiter


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_first_acquire_does_not_wait():
    clock = FakeClock()
    limiter = FixedIntervalLimiter(1.0, clock=clock, sleep=clock.sleep)

    asyncio.run(limiter.acquire())

    assert clock.sleeps == []


def test_successive_acquires_are_spaced():
    clock = FakeClock()
    limiter = FixedIntervalLimiter(1.0, clock=clock, sleep=clock.sleep)

    async def run():
        await limiter.acquire()
        clock.now += 0.25
        await limiter.acquire()
        await limiter.acquire()

    asyncio.run(run())

    assert clock.sleeps == [pytest.approx(0.75), pytest.approx(1.0)]


def test_no_wait_once_interval_has_elapsed():
    clock = FakeClock()
    limiter = FixedIntervalLimiter(1.0, clock=clock, sleep=clock.sleep)

    async def run():
        await limiter.acquire()
        clock.now += 5
        await limiter.acquire()

    asyncio.run(run())

    assert clock.sleeps == []


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        FixedIntervalLimiter(-1)
