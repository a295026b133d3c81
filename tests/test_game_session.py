#!/usr/bin/env python3
"""Integration tests for GameSession with dummy platform services.

The session is built with a one-beat-per-minute tempo so the real clock
never ticks during a test; beats are driven by calling on_beat() directly.
"""

import asyncio
import threading

import pytest

from saybeat.dummies import AudioPlayback, ImagePrefetch, PermissionService, TranscriptStream
from saybeat.game_session import GameSession
from saybeat.utilities.catalog import Prompt
from saybeat.utilities.config import GameSettings
from saybeat.utilities.phases import Feedback, Phase, PermissionState

DOG_CATALOG = (Prompt("dog", "assets/animal/dog.png", "dog"),)


def _make_session(permission=PermissionState.GRANTED, stream=None, playback=None, slots=4, rounds=1, countdown=2):
    settings = GameSettings(
        tempo_bpm=1,
        slot_count=slots,
        total_rounds=rounds,
        pre_game_countdown=countdown,
        intermission_countdown=2,
        self_test_settle_s=0.01,
        self_test_timeout_s=0.5,
    )
    return GameSession(
        PermissionService(state=permission),
        stream or TranscriptStream(),
        playback or AudioPlayback(),
        ImagePrefetch(),
        settings=settings,
        catalog=DOG_CATALOG,
        seed=3,
    )


def _beats(session, count):
    for _ in range(count):
        session.on_beat()


@pytest.mark.asyncio
async def test_initialize_opens_gate():
    session = _make_session()
    assert session.phase == Phase.PERMISSION_PENDING
    await session.initialize()
    assert session.phase == Phase.READY
    await session.close()


@pytest.mark.asyncio
async def test_start_refused_before_gate_opens():
    session = _make_session(permission=PermissionState.PROMPT)
    await session.initialize()
    assert session.phase == Phase.PERMISSION_PENDING
    assert session.start() is False
    await session.request_permission()
    assert session.phase == Phase.READY
    assert session.start() is True
    await session.close()


@pytest.mark.asyncio
async def test_full_game_flow():
    """Countdown, one spoken word, three timeouts, finished with score 1."""
    stream = TranscriptStream()
    playback = AudioPlayback()
    session = _make_session(stream=stream, playback=playback)
    await session.initialize()

    assert session.start() is True
    assert session.phase == Phase.COUNTDOWN
    assert session.clock.is_running
    assert stream.is_active(), "Recognition starts with the game"
    assert stream.start_calls[-1]["continuous"] is True
    assert playback.playing

    _beats(session, 2)
    assert session.phase == Phase.RUNNING

    stream.speak("  DOG please ")
    assert session.machine.score == 1
    assert stream.reset_count >= 2, "Buffer reset at start and after the match"

    _beats(session, 4)
    assert session.phase == Phase.FINISHED
    assert session.machine.feedback == (
        Feedback.CORRECT, Feedback.INCORRECT, Feedback.INCORRECT, Feedback.INCORRECT
    )
    assert not session.clock.is_running, "Clock stops when the game finishes"
    assert not stream.is_active()
    assert not playback.playing
    await session.close()


@pytest.mark.asyncio
async def test_keep_alive_restarts_dropped_stream():
    stream = TranscriptStream()
    session = _make_session(stream=stream)
    await session.initialize()
    session.start()

    stream.drop()
    assert stream.is_active(), "Dropped stream restarted immediately"
    assert session.supervisor.restart_count == 1
    await session.close()


@pytest.mark.asyncio
async def test_keep_alive_on_beat():
    """A stream that stopped silently is restarted on the next beat."""
    stream = TranscriptStream()
    session = _make_session(stream=stream)
    await session.initialize()
    session.start()

    stream.active = False  # engine died without a state event
    session.on_beat()
    assert stream.is_active()
    await session.close()


@pytest.mark.asyncio
async def test_stop_discards_late_events():
    stream = TranscriptStream()
    session = _make_session(stream=stream)
    await session.initialize()
    session.start()
    _beats(session, 3)

    assert session.stop() is True
    assert session.phase == Phase.READY
    snapshot = session.snapshot()

    session.on_beat()
    session.on_transcript("dog")
    after = session.snapshot()
    assert after["feedback"] == snapshot["feedback"]
    assert after["score"] == snapshot["score"]
    assert after["active_slot"] == -1
    assert not stream.is_active(), "Stopped game never restarts the stream"
    await session.close()


@pytest.mark.asyncio
async def test_replay_after_finish():
    session = _make_session(slots=1, countdown=0)
    await session.initialize()
    session.start()
    session.on_beat()
    session.on_transcript("dog")
    session.on_beat()
    assert session.phase == Phase.FINISHED
    assert session.machine.score == 1

    assert session.start() is True
    assert session.machine.score == 0
    assert session.phase == Phase.COUNTDOWN
    await session.close()


@pytest.mark.asyncio
async def test_degraded_session_plays_without_speech():
    stream = TranscriptStream(supported=False)
    session = _make_session(stream=stream)
    await session.initialize()

    assert session.phase == Phase.READY
    assert any("speech recognition" in w for w in session.warnings)
    assert session.start() is True
    assert not stream.is_active(), "Unavailable speech is never started"
    assert session.supervisor.check() is False
    await session.close()


@pytest.mark.asyncio
async def test_post_transcript_from_thread():
    session = _make_session(countdown=0)
    await session.initialize()
    session.start()
    session.on_beat()

    worker = threading.Thread(target=session.post_transcript, args=("dog",))
    worker.start()
    worker.join()
    await asyncio.sleep(0.01)

    assert session.machine.score == 1
    await session.close()


@pytest.mark.asyncio
async def test_listeners_receive_snapshots():
    session = _make_session()
    received = []
    session.add_listener(received.append)
    await session.initialize()
    session.start()

    assert received, "Listener called on state changes"
    assert received[-1]["phase"] == Phase.COUNTDOWN

    session.remove_listener(received.append)
    count = len(received)
    session.on_beat()
    assert len(received) == count
    await session.close()


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_game():
    session = _make_session()

    def broken(snapshot):
        raise ValueError("render failed")

    session.add_listener(broken)
    await session.initialize()
    assert session.start() is True
    session.on_beat()
    assert session.machine.countdown == 1
    await session.close()


@pytest.mark.asyncio
async def test_snapshot_contents():
    session = _make_session()
    await session.initialize()
    snap = session.snapshot()

    assert snap["phase"] == Phase.READY
    assert snap["total_rounds"] == 1
    assert len(snap["deck"]) == 4
    assert snap["deck"][0] == {"key": "dog", "image": "assets/animal/dog.png", "word": "dog"}
    assert snap["feedback"] == [Feedback.PENDING] * 4
    assert snap["resources"] == {"audio": True, "speech": True, "images": True}
    assert snap["listening"] is False
    await session.close()


@pytest.mark.asyncio
async def test_real_clock_drives_game():
    """With a fast tempo the clock alone carries the game to FINISHED."""
    settings = GameSettings(
        tempo_bpm=3000,
        slot_count=2,
        total_rounds=1,
        pre_game_countdown=1,
        self_test_settle_s=0.01,
        self_test_timeout_s=0.5,
    )
    session = GameSession(
        PermissionService(), TranscriptStream(), AudioPlayback(), ImagePrefetch(),
        settings=settings, catalog=DOG_CATALOG,
    )
    await session.initialize()
    session.start()
    await asyncio.sleep(0.3)

    assert session.phase == Phase.FINISHED
    assert not session.clock.is_running
    await session.close()


def test_from_config_injects_dummies():
    config = {
        "slot_count": 3,
        "total_rounds": 2,
        "log_level": "WARNING",
        "hardware_features": {"speech": False},
    }
    session = GameSession.from_config(config, catalog=DOG_CATALOG)
    assert session.settings.slot_count == 3
    assert session.stream.supported is False, "Disabled feature gets an unavailable dummy"
    assert isinstance(session.playback, AudioPlayback)
    assert len(session.deck) == 3


def test_from_config_keeps_provided_services():
    stream = TranscriptStream()
    session = GameSession.from_config({"log_level": "WARNING"}, services={"stream": stream})
    assert session.stream is stream


@pytest.mark.asyncio
async def test_request_permission_mid_game_keeps_phase():
    """A stray permission request during play never overrides the game phase."""
    permissions = PermissionService()
    session = GameSession(
        permissions, TranscriptStream(), AudioPlayback(), ImagePrefetch(),
        settings=GameSettings(tempo_bpm=1, pre_game_countdown=1, self_test_settle_s=0.01),
        catalog=DOG_CATALOG,
    )
    await session.initialize()
    session.start()
    session.on_beat()
    permissions.grant_on_request = False

    await session.request_permission()
    assert session.gate.phase == Phase.READY
    assert session.phase == Phase.RUNNING
    assert permissions.request_count == 0
    await session.close()


@pytest.mark.asyncio
async def test_late_transcript_after_stop_is_silent():
    session = _make_session(countdown=0)
    await session.initialize()
    session.start()
    session.on_beat()
    session.on_transcript("a cat")
    session.stop()

    received = []
    session.add_listener(received.append)
    session.on_transcript("a horse")
    assert session.snapshot()["transcript"] == "a cat", "Stopped game keeps its last transcript"
    assert received == [], "No listener call for a discarded update"
    await session.close()
