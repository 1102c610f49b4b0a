"""Unit tests for the asyncio-backed Timer implementation."""

import asyncio

import pytest

from steampanel.infrastructure.timing import AsyncioTimerFactory


@pytest.mark.asyncio
async def test_periodic_timer_keeps_firing():
    fired: list[float] = []
    factory = AsyncioTimerFactory()
    timer = factory.create(lambda: fired.append(factory.monotonic()))

    timer.change(0.0, 0.02)
    await asyncio.sleep(0.11)
    timer.dispose()

    assert len(fired) >= 3
    assert not timer.armed


@pytest.mark.asyncio
async def test_one_shot_timer_fires_once():
    fired: list[int] = []
    timer = AsyncioTimerFactory().create(lambda: fired.append(1))

    timer.change(0.01)
    await asyncio.sleep(0.05)

    assert fired == [1]
    assert not timer.armed


@pytest.mark.asyncio
async def test_disarm_prevents_firing():
    fired: list[int] = []
    timer = AsyncioTimerFactory().create(lambda: fired.append(1))

    timer.change(0.01, 0.01)
    timer.change(None)
    await asyncio.sleep(0.05)

    assert fired == []


@pytest.mark.asyncio
async def test_failing_callback_does_not_stop_timer():
    calls: list[int] = []

    def callback() -> None:
        calls.append(1)
        raise RuntimeError("tick failed")

    timer = AsyncioTimerFactory().create(callback)
    timer.change(0.0, 0.01)
    await asyncio.sleep(0.06)
    timer.dispose()

    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_change_after_dispose_is_ignored():
    fired: list[int] = []
    timer = AsyncioTimerFactory().create(lambda: fired.append(1))
    timer.dispose()

    timer.change(0.0, 0.01)
    await asyncio.sleep(0.03)

    assert fired == []
    assert not timer.armed
