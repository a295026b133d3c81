# File: src/saybeat/managers/beat_clock.py
"""
BeatClock - Fixed-tempo ticker that drives every game transition.

Uses a master time anchor (ticks_ms) rather than chained sleeps: each beat's
due time is the previous due time plus the beat interval, with the
fractional millisecond carried forward. Scheduling jitter on one beat is
therefore never added to the next, and the clock stays locked to the music
for the whole game.
"""

import asyncio

from adafruit_ticks import ticks_add, ticks_diff, ticks_ms

from saybeat.utilities.errors import StaleCallback
from saybeat.utilities.logger import GameLogger


class BeatClock:
    """
    Periodic beat ticker.

    Each tick toggles the cosmetic ``beat_flash`` flag and calls ``on_beat()``
    synchronously. ``start()`` and ``stop()`` may be called any number of
    times; a generation counter guarantees that a tick scheduled by an older
    run can never fire after a restart.

    Usage::

        clock = BeatClock(182, on_beat=machine.on_beat)
        clock.start()      # inside a running event loop
        ...
        clock.stop()
    """

    def __init__(self, bpm, on_beat=None):
        if bpm <= 0:
            raise ValueError(f"bpm must be positive, got {bpm}")

        self.bpm = bpm
        self.interval_ms = 60000.0 / bpm
        self.on_beat = on_beat

        # Toggled on every tick; the UI uses it for the countdown flash
        self.beat_flash = False

        self.beat_count = 0
        self.skipped_beats = 0

        self._generation = 0
        self._task = None

        GameLogger.info("BEAT", f"[INIT] BeatClock - bpm: {bpm} interval: {self.interval_ms:.2f}ms")

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def is_running(self):
        return self._task is not None and not self._task.done()

    @property
    def generation(self):
        """Identifier of the current run. Bumped by every start() and stop()."""
        return self._generation

    def start(self):
        """Start ticking. Must be called from inside a running event loop."""
        if self._task is not None:
            self.stop()

        self._generation += 1
        self.beat_count = 0
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation))
        GameLogger.debug("BEAT", f"Clock started (generation {self._generation})")

    def stop(self):
        """Stop ticking immediately. Safe to call from inside on_beat()."""
        self._generation += 1
        task, self._task = self._task, None
        self.beat_flash = False

        if task is None or task.done():
            return

        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None

        # The generation bump alone ends a run that is stopping itself
        if task is not current:
            task.cancel()
        GameLogger.debug("BEAT", f"Clock stopped after {self.beat_count} beats")

    def restart(self):
        self.stop()
        self.start()

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    async def _run(self, generation):
        """Sleep until each due time, then tick, for as long as this run is current."""
        due = ticks_ms()
        carry = 0.0

        while generation == self._generation:
            carry += self.interval_ms
            step = int(carry)
            carry -= step
            due = ticks_add(due, step)

            wait_ms = ticks_diff(due, ticks_ms())
            if wait_ms < -self.interval_ms:
                # Loop was stalled for more than a beat; resync instead of bursting
                missed = int(-wait_ms // self.interval_ms)
                self.skipped_beats += missed
                GameLogger.warning("BEAT", f"Loop stalled, skipped {missed} beat(s)")
                due = ticks_ms()
                carry = 0.0
                wait_ms = 0

            await asyncio.sleep(max(0, wait_ms) / 1000)

            if generation != self._generation:
                GameLogger.debug("BEAT", str(StaleCallback("beat", f"(generation {generation})")))
                return

            self._tick()

    def _tick(self):
        self.beat_flash = not self.beat_flash
        self.beat_count += 1
        if self.on_beat is None:
            return
        try:
            self.on_beat()
        except Exception as e:
            # A failing handler must not silence the clock for the rest of the game
            GameLogger.error("BEAT", f"on_beat handler failed: {e!r}")
