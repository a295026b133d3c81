#!/usr/bin/env python3
"""Unit tests for BeatClock.

Tests verify:
- ticks arrive at the configured tempo
- stop() halts ticking, including from inside the handler
- restart() never produces a double-ticking clock
- a stalled loop resyncs instead of bursting missed beats
- a failing handler does not stop the clock
"""

import asyncio
import time

import pytest

from saybeat.managers.beat_clock import BeatClock


def test_interval_from_bpm():
    clock = BeatClock(182)
    assert abs(clock.interval_ms - 329.67) < 0.01, "182 BPM is about 329.67ms per beat"
    assert clock.is_running is False


def test_invalid_bpm():
    with pytest.raises(ValueError):
        BeatClock(0)


@pytest.mark.asyncio
async def test_clock_ticks_at_tempo():
    """3000 BPM is a 20ms beat: 0.25s should give roughly a dozen ticks."""
    ticks = []
    clock = BeatClock(3000, on_beat=lambda: ticks.append(time.monotonic()))
    clock.start()
    await asyncio.sleep(0.25)
    clock.stop()

    assert 6 <= len(ticks) <= 14, f"Expected about 12 ticks, got {len(ticks)}"
    assert clock.beat_count == len(ticks)


@pytest.mark.asyncio
async def test_beat_flash_toggles():
    flashes = []
    clock = BeatClock(3000)
    clock.on_beat = lambda: flashes.append(clock.beat_flash)
    clock.start()
    await asyncio.sleep(0.1)
    clock.stop()

    assert len(flashes) >= 2
    assert flashes[0] is True
    assert flashes[1] is False, "Flash must alternate on each beat"
    assert clock.beat_flash is False, "stop() clears the flash"


@pytest.mark.asyncio
async def test_stop_halts_ticks():
    count = [0]

    def on_beat():
        count[0] += 1

    clock = BeatClock(3000, on_beat=on_beat)
    clock.start()
    await asyncio.sleep(0.08)
    clock.stop()
    stopped_at = count[0]
    await asyncio.sleep(0.1)

    assert count[0] == stopped_at, "No ticks after stop()"
    assert clock.is_running is False


@pytest.mark.asyncio
async def test_stop_from_inside_handler():
    count = [0]
    clock = BeatClock(3000)

    def on_beat():
        count[0] += 1
        if count[0] == 3:
            clock.stop()

    clock.on_beat = on_beat
    clock.start()
    await asyncio.sleep(0.2)

    assert count[0] == 3, "Clock must stop on the beat that asked it to"
    assert clock.is_running is False


@pytest.mark.asyncio
async def test_restart_does_not_double_tick():
    """Restarting many times leaves exactly one run ticking."""
    count = [0]

    def on_beat():
        count[0] += 1

    clock = BeatClock(1500, on_beat=on_beat)  # 40ms beat
    for _ in range(5):
        clock.start()
        await asyncio.sleep(0)
    generation = clock.generation

    await asyncio.sleep(0.3)
    clock.stop()

    assert count[0] <= 10, f"Double ticking detected: {count[0]} ticks in 0.3s"
    assert clock.generation > generation, "stop() bumps the generation"


@pytest.mark.asyncio
async def test_stalled_loop_skips_beats():
    """A handler that blocks for several beats causes a resync, not a burst."""
    ticks = []

    def on_beat():
        ticks.append(time.monotonic())
        if len(ticks) == 1:
            time.sleep(0.1)  # stall the loop for five 20ms beats

    clock = BeatClock(3000, on_beat=on_beat)
    clock.start()
    await asyncio.sleep(0.2)
    clock.stop()

    assert clock.skipped_beats >= 2, "Stall should be counted as skipped beats"
    assert len(ticks) >= 2
    gap = ticks[2] - ticks[1] if len(ticks) > 2 else 0.02
    assert gap >= 0.01, "Beats after a stall must not fire back-to-back"


@pytest.mark.asyncio
async def test_handler_error_keeps_clock_running():
    count = [0]

    def on_beat():
        count[0] += 1
        raise RuntimeError("boom")

    clock = BeatClock(3000, on_beat=on_beat)
    clock.start()
    await asyncio.sleep(0.1)
    clock.stop()

    assert count[0] >= 2, "Clock keeps ticking after a handler error"


def test_start_requires_running_loop():
    clock = BeatClock(120)
    with pytest.raises(RuntimeError):
        clock.start()
