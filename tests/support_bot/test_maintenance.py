import asyncio

import pytest

from support_bot.maintenance import Scheduler, shutdown, startup


@pytest.mark.asyncio
async def test_startup_runs_job_periodically():
    ran = []
    task = await startup(lambda: ran.append(1), 0.01)
    await asyncio.sleep(0.05)
    await shutdown(task)

    assert len(ran) >= 2
    assert task.cancelled()


@pytest.mark.asyncio
async def test_job_errors_do_not_stop_the_loop():
    ran = []

    async def flaky():
        ran.append(1)
        raise RuntimeError("boom")

    task = await startup(flaky, 0.01)
    await asyncio.sleep(0.05)
    await shutdown(task)

    assert len(ran) >= 2


@pytest.mark.asyncio
async def test_scheduler_start_stop():
    scheduler = Scheduler()

    first = await scheduler.start("refresh", lambda: None, 60)
    again = await scheduler.start("refresh", lambda: None, 60)
    disabled = await scheduler.start("reset", lambda: None, 0)

    assert first is again
    assert disabled is None
    assert scheduler.running() == ["refresh"]

    await scheduler.stop()
    assert scheduler.running() == []


@pytest.mark.asyncio
async def test_shutdown_tolerates_none():
    await shutdown(None)
