# File: src/saybeat/managers/__init__.py
"""Game core managers."""

from .beat_clock import BeatClock
from .game_state_machine import GameStateMachine
from .resource_gate import ResourceGate, ResourceStatus
from .round_deck import RoundDeck, draw
from .stream_supervisor import StreamSupervisor
from .transcript_matcher import TranscriptMatcher, contains_word, normalize

__all__ = [
    "BeatClock",
    "GameStateMachine",
    "ResourceGate",
    "ResourceStatus",
    "RoundDeck",
    "StreamSupervisor",
    "TranscriptMatcher",
    "contains_word",
    "draw",
    "normalize",
]
