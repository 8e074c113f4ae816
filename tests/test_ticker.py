"""Tests for the periodic wake source."""
import asyncio

from musiccontroller.core.ticker import Ticker


async def test_ticks_until_stopped():
    calls = []
    ticker = Ticker(0.01, lambda: calls.append(1))
    ticker.start()
    ticker.start()
    await asyncio.sleep(0.1)
    ticker.stop()
    assert calls
    assert not ticker.running
    count = len(calls)
    await asyncio.sleep(0.05)
    assert len(calls) == count


async def test_failing_callback_keeps_ticking(caplog):
    calls = []

    def _flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first tick fails")

    ticker = Ticker(0.01, _flaky, name="flaky")
    ticker.start()
    await asyncio.sleep(0.1)
    ticker.stop()
    assert len(calls) > 1
    assert "flaky: tick failed" in caplog.text
