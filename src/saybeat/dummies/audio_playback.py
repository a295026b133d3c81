# File: src/saybeat/dummies/audio_playback.py
"""Dummy AudioPlayback - silent replacement for the music backend."""

from saybeat.services import AudioPlayback as BaseAudioPlayback


class AudioPlayback(BaseAudioPlayback):
    """Drop-in dummy for AudioPlayback. Tracks play state, makes no sound."""

    def __init__(self, ready=True):
        self.ready = ready
        self.prepared_asset = None
        self.playing = False
        self.play_count = 0
        self.stop_count = 0

    async def prepare(self, asset):
        self.prepared_asset = asset
        return self.ready

    def play(self):
        self.play_count += 1
        self.playing = True

    def stop(self):
        self.stop_count += 1
        self.playing = False
