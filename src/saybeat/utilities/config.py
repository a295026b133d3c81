# File: src/saybeat/utilities/config.py
"""Construction-time configuration for the game core.

Game constants (tempo, slot count, rounds, countdown lengths) are fixed when
a session is built. They can come from a config.json next to the host, but
are never runtime flags.
"""

import json
import os

from saybeat.utilities.logger import GameLogger

DEFAULT_CONFIG = {
    "tempo_bpm": 182,  # Beats per minute of the background track
    "slot_count": 8,  # Prompts shown per round
    "total_rounds": 10,  # Rounds per game
    "pre_game_countdown": 16,  # Beats before the first round
    "intermission_countdown": 8,  # Beats between rounds
    "speech_language": "th-TH",  # Recognition language
    "self_test_settle_s": 1.0,  # Recognition self-test listen time
    "self_test_timeout_s": 2.0,  # Self-test bound; a timeout counts as success
    "background_music": "assets/background-music.mp3",
    "log_level": "INFO",
    "log_to_file": False,
    "seed": None,  # Deck RNG seed (None = nondeterministic)
    "hardware_features": {}  # Empty dict means all platform services enabled
}


def file_exists(filename):
    """Check if a file exists on the filesystem."""
    try:
        os.stat(filename)
        return True
    except OSError:
        return False


def load_config(path="config.json"):
    """Load configuration from a JSON file if it exists, otherwise return defaults."""
    try:
        if file_exists(path):
            with open(path, "r", encoding="utf-8") as f:
                config_data = json.load(f)
            GameLogger.info("CONF", f"Configuration loaded from {path}")
            merged_config = DEFAULT_CONFIG.copy()
            merged_config.update(config_data)
            return merged_config
        GameLogger.warning("CONF", f"No {path} found. Using default configuration.")
        return DEFAULT_CONFIG.copy()
    except (OSError, ValueError) as e:
        GameLogger.error("CONF", f"Error loading {path}: {e}")
        GameLogger.warning("CONF", "Using default configuration.")
        return DEFAULT_CONFIG.copy()


class GameSettings:
    """Validated, read-only game constants.

    Attributes:
        tempo_bpm: Beat tempo; one game transition per beat.
        slot_count: N, the number of prompts per round.
        total_rounds: Rounds before the game finishes.
        pre_game_countdown: Beats counted down before round 1.
        intermission_countdown: Beats counted down between rounds.
        speech_language: Language tag handed to the recognition stream.
        self_test_settle_s: How long the recognition self-test listens.
        self_test_timeout_s: Upper bound on the self-test.
        background_music: Asset handed to AudioPlayback.prepare().
    """

    __slots__ = (
        "tempo_bpm",
        "slot_count",
        "total_rounds",
        "pre_game_countdown",
        "intermission_countdown",
        "speech_language",
        "self_test_settle_s",
        "self_test_timeout_s",
        "background_music",
    )

    def __init__(
        self,
        tempo_bpm=182,
        slot_count=8,
        total_rounds=10,
        pre_game_countdown=16,
        intermission_countdown=8,
        speech_language="th-TH",
        self_test_settle_s=1.0,
        self_test_timeout_s=2.0,
        background_music="assets/background-music.mp3",
    ):
        if tempo_bpm <= 0:
            raise ValueError(f"tempo_bpm must be positive, got {tempo_bpm}")
        if slot_count < 1:
            raise ValueError(f"slot_count must be at least 1, got {slot_count}")
        if total_rounds < 1:
            raise ValueError(f"total_rounds must be at least 1, got {total_rounds}")
        if pre_game_countdown < 0 or intermission_countdown < 0:
            raise ValueError("countdown lengths must not be negative")
        if self_test_settle_s < 0 or self_test_timeout_s <= 0:
            raise ValueError("self-test timings must be positive")

        object.__setattr__(self, "tempo_bpm", tempo_bpm)
        object.__setattr__(self, "slot_count", int(slot_count))
        object.__setattr__(self, "total_rounds", int(total_rounds))
        object.__setattr__(self, "pre_game_countdown", int(pre_game_countdown))
        object.__setattr__(self, "intermission_countdown", int(intermission_countdown))
        object.__setattr__(self, "speech_language", speech_language)
        object.__setattr__(self, "self_test_settle_s", float(self_test_settle_s))
        object.__setattr__(self, "self_test_timeout_s", float(self_test_timeout_s))
        object.__setattr__(self, "background_music", background_music)

    def __setattr__(self, name, value):
        raise AttributeError(f"GameSettings is read-only (tried to set '{name}')")

    @property
    def ms_per_beat(self):
        return 60000.0 / self.tempo_bpm

    @property
    def speech_options(self):
        """Recognition options for gameplay: continuous, with interim results."""
        return {
            "continuous": True,
            "interim_results": True,
            "language": self.speech_language,
        }

    @property
    def self_test_options(self):
        """Recognition options for the loading self-test (single shot)."""
        options = self.speech_options
        options["continuous"] = False
        return options

    @classmethod
    def from_config(cls, config):
        """Build settings from a loaded config dict, ignoring unrelated keys."""
        kwargs = {name: config[name] for name in cls.__slots__ if name in config}
        return cls(**kwargs)

    def __repr__(self):
        return (
            f"GameSettings(bpm={self.tempo_bpm}, slots={self.slot_count}, "
            f"rounds={self.total_rounds}, countdown={self.pre_game_countdown}, "
            f"intermission={self.intermission_countdown})"
        )
