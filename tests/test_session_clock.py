"""
Tests for the elapsed-time clock.
"""

import asyncio

from conftest import wait_until
from mockroom.core.session_clock import SessionClock, format_elapsed


def test_format_elapsed():
    assert format_elapsed(0) == "00:00"
    assert format_elapsed(75) == "01:15"
    assert format_elapsed(3600) == "60:00"
    assert format_elapsed(-3) == "00:00"


async def test_clock_ticks_until_stopped():
    clock = SessionClock(interval_seconds=0.005)
    ticks = []

    async def on_tick(elapsed):
        ticks.append(elapsed)

    clock.on_tick(on_tick)
    clock.start()
    clock.start()
    await wait_until(lambda: clock.elapsed >= 3)

    await clock.stop()
    stopped_at = clock.elapsed
    await asyncio.sleep(0.03)

    assert not clock.running
    assert clock.elapsed == stopped_at
    assert ticks == list(range(1, stopped_at + 1))


async def test_stop_is_idempotent():
    clock = SessionClock(interval_seconds=10)
    await clock.stop()
    clock.start()
    await clock.stop()
    await clock.stop()
    assert clock.elapsed == 0


async def test_tick_callback_errors_are_absorbed():
    clock = SessionClock(interval_seconds=0.005)

    async def broken(elapsed):
        raise RuntimeError("render failed")

    clock.on_tick(broken)
    clock.start()
    await wait_until(lambda: clock.elapsed >= 2)
    await clock.stop()
