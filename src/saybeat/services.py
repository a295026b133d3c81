# File: src/saybeat/services.py
"""Interfaces for the platform services the game core consumes.

The host environment (browser bridge, desktop shell, test harness) provides
concrete implementations. The game core only ever talks to these methods,
so it never needs to know which speech engine or audio backend is behind
them.
"""


class PermissionService:
    """Microphone permission as reported by the platform."""

    async def query(self):
        """Return the current permission state.

        Returns:
            str: One of ``"granted"``, ``"denied"`` or ``"prompt"``.

        Raises:
            NotImplementedError: If the platform cannot report permission
                state; callers fall back to a direct request() probe.
        """
        raise NotImplementedError("Subclass must implement query()")

    def on_change(self, callback):
        """Register ``callback(state)`` for platform permission changes."""
        raise NotImplementedError("Subclass must implement on_change()")

    async def request(self):
        """Ask the user for access.

        Returns:
            bool: True if access was granted.
        """
        raise NotImplementedError("Subclass must implement request()")


class TranscriptStream:
    """Live speech recognition producing a cumulative transcript.

    Updates may arrive arbitrarily often and include interim results. The
    underlying engine may stop on its own at any time; callers supervise it.
    """

    #: False when the platform has no speech recognition at all
    supported = True

    def start(self, config):
        """Begin listening with the given recognition options."""
        raise NotImplementedError("Subclass must implement start()")

    def stop(self):
        """Stop listening."""
        raise NotImplementedError("Subclass must implement stop()")

    def is_active(self):
        """Return True while the engine is listening."""
        raise NotImplementedError("Subclass must implement is_active()")

    def on_update(self, callback):
        """Register ``callback(text)`` for transcript updates."""
        raise NotImplementedError("Subclass must implement on_update()")

    def on_state_change(self, callback):
        """Register ``callback(active)`` for listening start/stop events."""
        raise NotImplementedError("Subclass must implement on_state_change()")

    def reset(self):
        """Clear the cumulative transcript buffer."""
        raise NotImplementedError("Subclass must implement reset()")


class AudioPlayback:
    """Background music playback."""

    async def prepare(self, asset):
        """Fetch and decode the track. Returns True when playable."""
        raise NotImplementedError("Subclass must implement prepare()")

    def play(self):
        raise NotImplementedError("Subclass must implement play()")

    def stop(self):
        raise NotImplementedError("Subclass must implement stop()")


class ImagePrefetch:
    """Warms the image cache for the prompt catalog."""

    async def prepare(self, catalog):
        """Prefetch every prompt image.

        Partial failures are tolerated by implementations; the return value
        reports whether the prefetch as a whole is usable.

        Returns:
            bool: True if the images are usable.
        """
        raise NotImplementedError("Subclass must implement prepare()")
