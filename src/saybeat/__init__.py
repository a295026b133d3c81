"""
SayBeat - beat-synchronized speech game core.

Images flash on a fixed musical tempo and the player must say the matching
word before the beat moves on.
"""

from .game_session import GameSession
from .managers import (
    BeatClock,
    GameStateMachine,
    ResourceGate,
    RoundDeck,
    StreamSupervisor,
    TranscriptMatcher,
)
from .utilities import (
    DEFAULT_CATALOG,
    Feedback,
    GameLogger,
    GameSettings,
    Phase,
    Prompt,
    load_config,
)

__version__ = "0.3.0"
__all__ = [
    "BeatClock",
    "DEFAULT_CATALOG",
    "Feedback",
    "GameLogger",
    "GameSession",
    "GameSettings",
    "GameStateMachine",
    "Phase",
    "Prompt",
    "ResourceGate",
    "RoundDeck",
    "StreamSupervisor",
    "TranscriptMatcher",
    "load_config",
]
