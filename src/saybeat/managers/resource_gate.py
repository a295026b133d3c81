# File: src/saybeat/managers/resource_gate.py
"""
ResourceGate - Permission and preload orchestration before gameplay.

The gate walks PERMISSION_PENDING -> LOADING -> READY (or PERMISSION_DENIED).
Loading prepares three independent resources concurrently:

    audio   - decode the background track
    speech  - short recognition self-test
    images  - prefetch the prompt catalog

Each preparation settles to True/False on its own. The gate opens once all
three have settled, whatever their outcome: a failed resource degrades the
game (no music, no scoring by voice, missing pictures) and is reported as a
warning, but never blocks play.
"""

import asyncio

from saybeat.utilities.errors import PermissionDeniedError, ResourceUnavailable
from saybeat.utilities.logger import GameLogger
from saybeat.utilities.phases import Phase, PermissionState


class ResourceStatus:
    """Readiness flags for the three preloaded resources."""

    NAMES = ("audio", "speech", "images")

    LABELS = {
        "audio": "background music",
        "speech": "speech recognition",
        "images": "images",
    }

    def __init__(self):
        self.audio = False
        self.speech = False
        self.images = False

    def set(self, name, ready):
        if name not in self.NAMES:
            raise KeyError(f"Unknown resource: {name}")
        setattr(self, name, bool(ready))

    @property
    def all_ready(self):
        return self.audio and self.speech and self.images

    def missing(self):
        """Names of the resources that are not ready, in load order."""
        return [name for name in self.NAMES if not getattr(self, name)]

    def as_dict(self):
        return {name: getattr(self, name) for name in self.NAMES}


class ResourceGate:
    """
    Gates entry to the game behind microphone permission and resource loading.

    Usage::

        gate = ResourceGate(permissions, stream, playback, images, settings, catalog)
        await gate.check_permission()      # at startup
        await gate.request_permission()    # when the user presses "allow"
        if gate.phase == Phase.READY: ...
    """

    def __init__(self, permissions, stream, playback, images, settings, catalog, on_change=None):
        self.permissions = permissions
        self.stream = stream
        self.playback = playback
        self.images = images
        self.settings = settings
        self.catalog = catalog
        self.on_change = on_change

        self.phase = Phase.PERMISSION_PENDING
        self.status = ResourceStatus()
        self.warnings = []
        self.errors = {}

        self._subscribed = False
        self._pending_task = None
        self._loop = None

        GameLogger.info("GATE", "[INIT] ResourceGate")

    # ------------------------------------------------------------------
    # Permission
    # ------------------------------------------------------------------

    async def check_permission(self):
        """Inspect the current permission state and act on it.

        Returns:
            str: The gate phase afterwards.
        """
        self._loop = asyncio.get_running_loop()
        self._subscribe()
        try:
            state = await self.permissions.query()
        except NotImplementedError:
            GameLogger.warning("GATE", "Permission query unsupported, probing with a direct request")
            if await self._request():
                await self.prepare_resources()
            else:
                self._set_phase(Phase.PERMISSION_PENDING)
            return self.phase
        except Exception as e:
            GameLogger.error("GATE", f"Permission query failed: {e!r}")
            self._set_phase(Phase.PERMISSION_PENDING)
            return self.phase

        GameLogger.info("GATE", f"Permission state: {state}")
        if state == PermissionState.GRANTED:
            await self.prepare_resources()
        elif state == PermissionState.DENIED:
            self._deny()
        else:
            self._set_phase(Phase.PERMISSION_PENDING)
        return self.phase

    async def request_permission(self):
        """User-initiated permission request.

        Only honoured while PERMISSION_PENDING. A denial is terminal until
        the platform reports a permission change, and an open gate is never
        closed again by a failed request.

        Returns:
            str: The gate phase afterwards.
        """
        if self.phase != Phase.PERMISSION_PENDING:
            GameLogger.debug("GATE", f"request_permission() ignored in phase {self.phase}")
            return self.phase

        self._loop = asyncio.get_running_loop()
        self._subscribe()
        if await self._request():
            GameLogger.info("GATE", "Microphone permission granted")
            await self.prepare_resources()
        else:
            self._deny()
        return self.phase

    async def _request(self):
        try:
            return bool(await self.permissions.request())
        except Exception as e:
            GameLogger.warning("GATE", f"Permission request failed: {e!r}")
            return False

    def _deny(self):
        GameLogger.warning("GATE", str(PermissionDeniedError("microphone access was denied")))
        self._set_phase(Phase.PERMISSION_DENIED)

    def _subscribe(self):
        if self._subscribed:
            return
        try:
            self.permissions.on_change(self._on_permission_change)
            self._subscribed = True
        except NotImplementedError:
            GameLogger.debug("GATE", "Permission change notifications unsupported")

    def _on_permission_change(self, state):
        """Platform callback, possibly on a foreign thread; handled on the loop."""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        loop = self._loop
        if loop is not None and running is not loop and not loop.is_closed():
            loop.call_soon_threadsafe(self._apply_permission_change, state)
            return
        self._apply_permission_change(state)

    def _apply_permission_change(self, state):
        """A later grant opens the gate, a denial closes it."""
        GameLogger.info("GATE", f"Permission changed to: {state}")
        if state == PermissionState.GRANTED:
            if self.phase not in (Phase.PERMISSION_PENDING, Phase.PERMISSION_DENIED):
                return
            if self._pending_task is not None and not self._pending_task.done():
                GameLogger.debug("GATE", "Preparation already scheduled")
                return
            loop = self._loop
            if loop is None or loop.is_closed():
                GameLogger.warning("GATE", "Permission granted with no event loop to prepare on")
                return
            self._pending_task = loop.create_task(self.prepare_resources())
        elif state == PermissionState.DENIED:
            if self.phase == Phase.PERMISSION_PENDING:
                self._deny()
        elif self.phase == Phase.PERMISSION_DENIED:
            self._set_phase(Phase.PERMISSION_PENDING)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def prepare_resources(self):
        """Prepare audio, speech and images, then open the gate.

        Returns:
            ResourceStatus: Final readiness flags.
        """
        if self.phase in (Phase.LOADING, Phase.READY):
            GameLogger.debug("GATE", f"prepare_resources() ignored in phase {self.phase}")
            return self.status

        self.status = ResourceStatus()
        self.warnings = []
        self.errors = {}
        self._set_phase(Phase.LOADING)
        GameLogger.info("GATE", "Preparing resources...")

        await asyncio.gather(
            self._settle("audio", self._prepare_audio()),
            self._settle("speech", self._test_speech()),
            self._settle("images", self._prepare_images()),
        )

        missing = self.status.missing()
        if missing:
            GameLogger.warning("GATE", f"Starting degraded, unavailable: {missing}")
        else:
            GameLogger.note("GATE", "All resources ready")
        self._set_phase(Phase.READY)
        return self.status

    async def _settle(self, name, preparation):
        """Run one preparation; any failure is recorded, never raised."""
        try:
            ready = bool(await preparation)
            reason = "" if ready else "preparation reported failure"
        except Exception as e:
            ready = False
            reason = e.reason if isinstance(e, ResourceUnavailable) else repr(e)

        self.status.set(name, ready)
        if ready:
            GameLogger.info("GATE", f"{name} ready")
        else:
            error = ResourceUnavailable(ResourceStatus.LABELS[name], reason)
            self.errors[name] = error
            self.warnings.append(str(error))
            GameLogger.warning("GATE", str(error))
        self._notify()

    async def _prepare_audio(self):
        return await self.playback.prepare(self.settings.background_music)

    async def _prepare_images(self):
        return await self.images.prepare(self.catalog)

    async def _test_speech(self):
        """Recognition self-test, bounded; a timeout counts as success."""
        if not getattr(self.stream, "supported", True):
            raise ResourceUnavailable("speech recognition", "not supported on this platform")
        try:
            return await asyncio.wait_for(self._speech_probe(), self.settings.self_test_timeout_s)
        except asyncio.TimeoutError:
            GameLogger.info("GATE", "Speech self-test timed out - assuming success")
            return True

    async def _speech_probe(self):
        self.stream.start(self.settings.self_test_options)
        try:
            await asyncio.sleep(self.settings.self_test_settle_s)
        finally:
            self.stream.stop()
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def is_open(self):
        return self.phase == Phase.READY

    def missing_resources(self):
        return self.status.missing()

    async def close(self):
        """Cancel any preparation started by a permission change."""
        task, self._pending_task = self._pending_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _set_phase(self, phase):
        if phase != self.phase:
            GameLogger.debug("GATE", f"{self.phase} -> {phase}")
            self.phase = phase
        self._notify()

    def _notify(self):
        if self.on_change:
            self.on_change()
