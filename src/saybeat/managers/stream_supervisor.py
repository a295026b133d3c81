# File: src/saybeat/managers/stream_supervisor.py
"""
StreamSupervisor - Keep-alive for the speech recognition stream.

Recognition engines stop on their own (silence timeouts, engine resets,
tab focus changes). Rather than trusting a fire-and-forget subscription,
the supervisor owns one invariant: while a game is in an active phase and
speech is available, the stream is listening. ``check()`` restores that
invariant and is called on every beat and on every stream state change.
"""

from adafruit_ticks import ticks_diff, ticks_ms

from saybeat.utilities.errors import StreamDropped
from saybeat.utilities.logger import GameLogger


class StreamSupervisor:
    """
    Restarts the recognition stream whenever it is found stopped while it
    is expected to be listening. The restart is unconditional: no backoff,
    no retry limit.
    """

    #: Repeated drops inside this window are logged at debug level only
    LOG_THROTTLE_MS = 1000

    def __init__(self, stream, expected_active, options):
        """
        Args:
            stream: TranscriptStream to supervise.
            expected_active: Callable returning True while the stream must be listening.
            options: Recognition options passed to ``stream.start()``.
        """
        self.stream = stream
        self.expected_active = expected_active
        self.options = options

        self.restart_count = 0
        self._dropped = False
        self._last_drop_log = None

        GameLogger.info("KEEP", "[INIT] StreamSupervisor")

    def on_state_change(self, active):
        """Stream listener: re-check the invariant whenever listening stops."""
        if not active:
            self.check()

    def check(self):
        """Restart the stream if it should be listening but is not.

        Returns:
            bool: True if a restart was requested.
        """
        if not self.expected_active():
            self._dropped = False
            return False

        if self.stream.is_active():
            if self._dropped:
                GameLogger.info("KEEP", "Recognition stream recovered")
                self._dropped = False
            return False

        self.restart_count += 1
        self._log_drop()
        self._dropped = True

        try:
            self.stream.start(self.options)
        except Exception as e:
            # Next beat or state change will try again
            GameLogger.error("KEEP", f"Stream restart failed: {e!r}")
        return True

    def _log_drop(self):
        now = ticks_ms()
        message = f"{StreamDropped('recognition stream stopped')} - restart #{self.restart_count}"
        if self._last_drop_log is None or ticks_diff(now, self._last_drop_log) > self.LOG_THROTTLE_MS:
            GameLogger.warning("KEEP", message)
            self._last_drop_log = now
        else:
            GameLogger.debug("KEEP", message)
