# File: src/saybeat/game_session.py
"""
GameSession - The single object a presentation layer talks to.

Owns every game component and wires them together:

- ResourceGate decides when play may begin.
- BeatClock ticks drive GameStateMachine.on_beat().
- Transcript updates go through TranscriptMatcher.
- StreamSupervisor keeps recognition alive while a game is active.

The UI calls ``initialize()``, ``request_permission()``, ``start()`` and
``stop()``, and renders ``snapshot()`` (or subscribes with
``add_listener()``). All mutations happen on the event loop thread; use
``post_transcript()`` when a speech engine calls back from another thread.
"""

import asyncio

from saybeat.dummies import build_services
from saybeat.managers import (
    BeatClock,
    GameStateMachine,
    ResourceGate,
    RoundDeck,
    StreamSupervisor,
    TranscriptMatcher,
)
from saybeat.utilities.catalog import DEFAULT_CATALOG
from saybeat.utilities.config import DEFAULT_CONFIG, GameSettings
from saybeat.utilities.logger import GameLogger
from saybeat.utilities.phases import Phase


class GameSession:
    """Aggregate owning one player's game, from permission prompt to final score.

    Args:
        permissions: PermissionService implementation.
        stream: TranscriptStream implementation.
        playback: AudioPlayback implementation.
        images: ImagePrefetch implementation.
        settings: GameSettings; defaults to the standard 182 BPM game.
        catalog: Prompt catalog; defaults to DEFAULT_CATALOG.
        seed: Optional deck RNG seed.
    """

    def __init__(self, permissions, stream, playback, images, settings=None, catalog=None, seed=None):
        self.settings = settings or GameSettings()
        self.catalog = tuple(catalog) if catalog is not None else DEFAULT_CATALOG

        self.permissions = permissions
        self.stream = stream
        self.playback = playback
        self.images = images

        self.deck = RoundDeck(self.catalog, self.settings.slot_count, seed=seed)
        self.machine = GameStateMachine(
            self.settings,
            self.deck,
            on_start=self._begin_services,
            on_stop=self._end_services,
        )
        self.clock = BeatClock(self.settings.tempo_bpm, on_beat=self.on_beat)
        self.matcher = TranscriptMatcher(self.machine, stream)
        self.supervisor = StreamSupervisor(stream, self._stream_expected, self.settings.speech_options)
        self.gate = ResourceGate(
            permissions,
            stream,
            playback,
            images,
            self.settings,
            self.catalog,
            on_change=self._notify,
        )

        self._listeners = []
        self._loop = None

        stream.on_update(self.on_transcript)
        stream.on_state_change(self._on_stream_state)

        GameLogger.info("SESS", f"[INIT] GameSession - {len(self.catalog)} prompts, {self.settings!r}")

    @classmethod
    def from_config(cls, config=None, services=None, catalog=None):
        """Build a session from a config dict, filling missing services with dummies."""
        merged = DEFAULT_CONFIG.copy()
        merged.update(config or {})
        GameLogger.configure(merged)
        built = build_services(merged, services)
        return cls(
            built["permissions"],
            built["stream"],
            built["playback"],
            built["images"],
            settings=GameSettings.from_config(merged),
            catalog=catalog,
            seed=merged.get("seed"),
        )

    # ------------------------------------------------------------------
    # Entry points for the presentation layer
    # ------------------------------------------------------------------

    @property
    def phase(self):
        """Combined phase: gate phases until READY, then the game phase."""
        if not self.gate.is_open:
            return self.gate.phase
        return self.machine.phase

    @property
    def warnings(self):
        return list(self.gate.warnings)

    async def initialize(self):
        """Check microphone permission and load resources if already granted."""
        self._loop = asyncio.get_running_loop()
        return await self.gate.check_permission()

    async def request_permission(self):
        self._loop = asyncio.get_running_loop()
        return await self.gate.request_permission()

    def start(self):
        """Start (or replay) a game. Must be called on the event loop.

        Returns:
            bool: True if a game started.
        """
        if not self.gate.is_open:
            GameLogger.warning("SESS", f"start() ignored - gate is {self.gate.phase}")
            return False
        self._loop = asyncio.get_running_loop()
        started = self.machine.start()
        if started:
            self._notify()
        return started

    def stop(self):
        """Abort the current game. Takes effect immediately."""
        stopped = self.machine.stop()
        if stopped:
            self._notify()
        return stopped

    def on_beat(self):
        """Beat handler: advance the game and supervise the recognition stream."""
        changed = self.machine.on_beat()
        if self.machine.is_active:
            self.supervisor.check()
        if changed:
            self._notify()
        return changed

    def on_transcript(self, text):
        """Transcript handler. Returns True if the update scored a slot."""
        previous = self.matcher.last_transcript
        scored = self.matcher.handle_transcript(text)
        if scored or self.matcher.last_transcript != previous:
            self._notify()
        return scored

    def post_transcript(self, text):
        """Thread-safe variant of on_transcript() for engine callback threads."""
        loop = self._loop
        if loop is None or loop.is_closed():
            self.on_transcript(text)
            return
        loop.call_soon_threadsafe(self.on_transcript, text)

    async def close(self):
        """Stop the game and cancel any pending resource preparation."""
        self.machine.stop()
        self.clock.stop()
        await self.gate.close()
        GameLogger.info("SESS", "Session closed")

    # ------------------------------------------------------------------
    # UI state
    # ------------------------------------------------------------------

    def add_listener(self, callback):
        """Register ``callback(snapshot)``, called after every state change."""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def snapshot(self):
        """Plain-data view of everything the UI renders."""
        machine = self.machine
        return {
            "phase": self.phase,
            "round": machine.current_round,
            "total_rounds": machine.total_rounds,
            "score": machine.score,
            "countdown": machine.countdown,
            "active_slot": machine.active_slot,
            "beat_flash": self.clock.beat_flash,
            "deck": [
                {"key": p.key, "image": p.image, "word": p.word}
                for p in self.deck.prompts
            ],
            "feedback": list(machine.feedback),
            "resources": self.gate.status.as_dict(),
            "warnings": self.warnings,
            "transcript": self.matcher.last_transcript,
            "listening": self.stream.is_active(),
        }

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def _stream_expected(self):
        return self.machine.is_active and self.gate.status.speech

    def _on_stream_state(self, active):
        self.supervisor.on_state_change(active)
        self._notify()

    def _begin_services(self):
        """on_start hook: clock, recognition and music for a new game."""
        missing = self.gate.missing_resources()
        if missing:
            GameLogger.warning("SESS", f"Starting game with some resources not ready: {missing}")

        self.clock.start()
        self._call_service("stream.reset", self.stream.reset)
        if self.gate.status.speech:
            self._call_service("stream.start", self.stream.start, self.settings.speech_options)
        if self.gate.status.audio:
            self._call_service("playback.play", self.playback.play)

    def _end_services(self):
        """on_stop hook: runs on explicit stop and on natural finish."""
        self.clock.stop()
        self._call_service("stream.stop", self.stream.stop)
        self._call_service("playback.stop", self.playback.stop)

    def _call_service(self, name, method, *args):
        try:
            method(*args)
        except Exception as e:
            # Service faults degrade the game; the keep-alive retries the stream
            GameLogger.error("SESS", f"{name} failed: {e!r}")

    def _notify(self):
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for callback in list(self._listeners):
            try:
                callback(snapshot)
            except Exception as e:
                GameLogger.error("SESS", f"Listener {callback!r} failed: {e!r}")
