# File: src/saybeat/dummies/transcript_stream.py
"""Dummy TranscriptStream - no recognition engine, transcripts are pushed by hand."""

from saybeat.services import TranscriptStream as BaseTranscriptStream


class TranscriptStream(BaseTranscriptStream):
    """Drop-in recognition stream that records calls.

    ``speak()`` appends to the cumulative transcript and notifies listeners,
    ``drop()`` simulates the engine stopping on its own.
    """

    def __init__(self, supported=True, fail_on_start=False):
        self.supported = supported
        self.fail_on_start = fail_on_start
        self.active = False
        self.transcript = ""
        self.start_calls = []
        self.stop_count = 0
        self.reset_count = 0
        self._update_callbacks = []
        self._state_callbacks = []

    def start(self, config):
        self.start_calls.append(dict(config))
        if self.fail_on_start:
            raise RuntimeError("recognition engine failed to start")
        if not self.active:
            self.active = True
            self._emit_state()

    def stop(self):
        self.stop_count += 1
        if self.active:
            self.active = False
            self._emit_state()

    def is_active(self):
        return self.active

    def on_update(self, callback):
        self._update_callbacks.append(callback)

    def on_state_change(self, callback):
        self._state_callbacks.append(callback)

    def reset(self):
        self.reset_count += 1
        self.transcript = ""

    # --- Simulation helpers ---

    def speak(self, text):
        """Append recognized text and deliver the cumulative transcript."""
        self.transcript = f"{self.transcript} {text}".strip() if self.transcript else text
        for callback in list(self._update_callbacks):
            callback(self.transcript)

    def drop(self):
        """The engine stops without being asked to."""
        if self.active:
            self.active = False
            self._emit_state()

    def _emit_state(self):
        for callback in list(self._state_callbacks):
            callback(self.active)
