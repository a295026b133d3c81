# File: src/saybeat/utilities/errors.py
"""Error taxonomy for the game core.

None of these is fatal. They name the failure conditions so they can be
logged and surfaced as warnings; the worst outcome of any of them is a
degraded but playable session.
"""


class SayBeatError(Exception):
    """Base class for all game core errors."""
    pass


class PermissionDeniedError(SayBeatError):
    """Microphone permission was refused.

    Recoverable only by an external platform action (the user changing the
    site permission) or a reload.
    """
    pass


class ResourceUnavailable(SayBeatError):
    """A single resource could not be prepared. Gameplay continues without it."""

    def __init__(self, resource, reason=""):
        self.resource = resource
        self.reason = reason
        message = f"{resource} unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StreamDropped(SayBeatError):
    """The recognition stream stopped while the game expected it to be listening."""
    pass


class StaleCallback(SayBeatError):
    """A timer tick or transcript update raced an already stopped game."""

    def __init__(self, source, detail=""):
        self.source = source
        self.detail = detail
        super().__init__(f"stale {source} callback discarded {detail}".strip())
