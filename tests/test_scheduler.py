# File: tests/test_scheduler.py
import asyncio

import pytest

from web_spider.crawler.events import TASK_COMPLETED, TASK_STARTING, EventEmitter
from web_spider.crawler.scheduler import TaskQueue


@pytest.mark.asyncio()
async def test_in_flight_never_exceeds_concurrency():
    queue = TaskQueue(3)
    state = {"active": 0, "peak": 0}

    async def job(i: int) -> int:
        state["active"] += 1
        state["peak"] = max(state["peak"], state["active"])
        await asyncio.sleep(0.01)
        state["active"] -= 1
        return i

    results = await asyncio.gather(*(queue.add(lambda i=i: job(i)) for i in range(25)))

    assert results == list(range(25))
    assert state["peak"] == 3
    assert queue.max_active_seen == 3
    assert queue.active == 0
    assert queue.pending == 0


@pytest.mark.asyncio()
async def test_tasks_admitted_first_in_first_out():
    queue = TaskQueue(1)
    started = []

    async def job(i: int) -> None:
        started.append(i)
        await asyncio.sleep(0)

    await asyncio.gather(*(queue.add(lambda i=i: job(i)) for i in range(6)))
    assert started == list(range(6))


@pytest.mark.asyncio()
async def test_failure_propagates_and_queue_keeps_running():
    queue = TaskQueue(1)

    async def boom() -> None:
        raise RuntimeError("boom")

    async def ok() -> str:
        return "ok"

    results = await asyncio.gather(queue.add(boom), queue.add(ok), return_exceptions=True)
    assert isinstance(results[0], RuntimeError)
    assert results[1] == "ok"


@pytest.mark.asyncio()
async def test_join_waits_for_drain():
    queue = TaskQueue(2)
    await asyncio.wait_for(queue.join(), timeout=1)

    finished = []

    async def job(i: int) -> None:
        await asyncio.sleep(0.02)
        finished.append(i)

    callers = [asyncio.create_task(queue.add(lambda i=i: job(i))) for i in range(5)]
    await asyncio.sleep(0)
    await asyncio.wait_for(queue.join(), timeout=2)

    assert sorted(finished) == list(range(5))
    await asyncio.gather(*callers)


@pytest.mark.asyncio()
async def test_admission_and_completion_events(recorder):
    events = EventEmitter()
    events.on_any(recorder)
    queue = TaskQueue(2, events)

    async def job() -> None:
        await asyncio.sleep(0.01)

    await asyncio.gather(*(queue.add(job) for _ in range(5)))

    starting = recorder.named(TASK_STARTING)
    completed = recorder.named(TASK_COMPLETED)
    assert len(starting) == len(completed) == 5
    assert all(e.payload["concurrency"] == 2 for e in starting)
    assert all(1 <= e.payload["active"] <= 2 for e in starting)
    assert starting[0].payload["queue_length"] == 0
    assert completed[-1].payload == {"active": 0, "concurrency": 2, "queue_length": 0}


def test_concurrency_must_be_positive():
    with pytest.raises(ValueError):
        TaskQueue(0)
