"""Tests for the repeating background task."""

import asyncio

import pytest

from moonlight_match.services.scheduling import RepeatingTask


def test_repeating_task_cancelled_from_callback() -> None:
    calls: list[int] = []
    task: RepeatingTask

    async def callback() -> None:
        calls.append(task.ticks)
        if len(calls) == 3:
            task.cancel()

    task = RepeatingTask(callback, interval_seconds=0, name="counter")

    async def scenario() -> None:
        task.start()
        assert task.running
        await task.wait()

    asyncio.run(scenario())

    assert calls == [1, 2, 3]
    assert not task.running


def test_repeating_task_survives_failing_tick() -> None:
    calls: list[int] = []
    task: RepeatingTask

    async def callback() -> None:
        calls.append(task.ticks)
        if len(calls) == 1:
            raise RuntimeError("transient")
        task.cancel()

    task = RepeatingTask(callback, interval_seconds=0)

    async def scenario() -> None:
        task.start()
        await task.wait()

    asyncio.run(scenario())

    assert calls == [1, 2]


def test_repeating_task_cancel_before_first_tick() -> None:
    calls: list[int] = []

    async def callback() -> None:
        calls.append(1)

    task = RepeatingTask(callback, interval_seconds=60)

    async def scenario() -> None:
        task.start()
        task.cancel()
        await task.wait()

    asyncio.run(scenario())

    assert calls == []
    assert task.ticks == 0


def test_repeating_task_cannot_start_twice() -> None:
    async def callback() -> None:
        return None

    task = RepeatingTask(callback, interval_seconds=60)

    async def scenario() -> None:
        task.start()
        try:
            with pytest.raises(RuntimeError):
                task.start()
        finally:
            task.cancel()
            await task.wait()

    asyncio.run(scenario())
