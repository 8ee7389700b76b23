"""Tests for one-shot timers driven by real asyncio sleeps."""

import asyncio
from datetime import timedelta

import pytest

from hydronag.utils.timers import OneShotTimer

SHORT = timedelta(milliseconds=10)


@pytest.mark.asyncio
async def test_callback_runs_after_delay():
    """An armed timer fires once and is no longer pending."""
    timer = OneShotTimer("test")
    fired = []

    async def callback(generation):
        fired.append(generation)

    timer.arm(SHORT, callback)
    assert timer.pending
    assert timer.delay == SHORT

    await asyncio.sleep(0.05)

    assert fired == [timer.generation]
    assert not timer.pending
    assert timer.delay is None


@pytest.mark.asyncio
async def test_rearm_cancels_previous_callback():
    """Only the most recent arm fires."""
    timer = OneShotTimer("test")
    fired = []

    async def first(generation):
        fired.append("first")

    async def second(generation):
        fired.append("second")

    timer.arm(SHORT, first)
    timer.arm(SHORT * 2, second)
    await asyncio.sleep(0.06)

    assert fired == ["second"]


@pytest.mark.asyncio
async def test_cancel_prevents_callback():
    timer = OneShotTimer("test")
    fired = []

    async def callback(generation):
        fired.append(generation)

    timer.arm(SHORT, callback)
    timer.cancel()
    await asyncio.sleep(0.03)

    assert fired == []
    assert not timer.pending
    assert timer.due_at is None


@pytest.mark.asyncio
async def test_callback_can_rearm_its_own_timer():
    """A callback re-arming the timer schedules a fresh run."""
    timer = OneShotTimer("test")
    runs = []

    async def callback(generation):
        runs.append(generation)
        if len(runs) < 3:
            timer.arm(SHORT, callback)

    timer.arm(SHORT, callback)
    await asyncio.sleep(0.1)

    assert len(runs) == 3
    assert len(set(runs)) == 3
    assert not timer.pending


@pytest.mark.asyncio
async def test_negative_delay_fires_immediately():
    timer = OneShotTimer("test")
    fired = []

    async def callback(generation):
        fired.append(generation)

    timer.arm(timedelta(minutes=-5), callback)
    assert timer.delay == timedelta(0)

    await asyncio.sleep(0.01)
    assert len(fired) == 1


@pytest.mark.asyncio
async def test_rearm_retires_a_callback_already_running():
    """A callback that woke before a re-arm can see it is stale."""
    timer = OneShotTimer("test")
    gate = asyncio.Event()
    seen = []

    async def callback(generation):
        await gate.wait()
        seen.append(timer.is_current(generation))

    timer.arm(timedelta(0), callback)
    await asyncio.sleep(0.01)

    # The callback has left the timer and is blocked on the gate
    assert not timer.pending
    timer.arm(timedelta(hours=1), callback)
    gate.set()
    await asyncio.sleep(0.01)

    assert seen == [False]
    timer.cancel()


@pytest.mark.asyncio
async def test_callback_errors_are_contained():
    """A failing callback is logged and the timer stays usable."""
    timer = OneShotTimer("test")
    fired = []

    async def broken(generation):
        raise RuntimeError("boom")

    async def working(generation):
        fired.append(generation)

    timer.arm(timedelta(0), broken)
    await asyncio.sleep(0.01)

    timer.arm(timedelta(0), working)
    await asyncio.sleep(0.01)

    assert len(fired) == 1
