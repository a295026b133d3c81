# File: src/saybeat/utilities/__init__.py
"""Shared constants, configuration and logging for the game core."""

from .catalog import DEFAULT_CATALOG, Prompt, build_catalog
from .config import DEFAULT_CONFIG, GameSettings, load_config
from .errors import (
    PermissionDeniedError,
    ResourceUnavailable,
    SayBeatError,
    StaleCallback,
    StreamDropped,
)
from .logger import GameLogger, LogLevel
from .phases import Feedback, Phase, PermissionState

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_CONFIG",
    "Feedback",
    "GameLogger",
    "GameSettings",
    "LogLevel",
    "PermissionDeniedError",
    "PermissionState",
    "Phase",
    "Prompt",
    "ResourceUnavailable",
    "SayBeatError",
    "StaleCallback",
    "StreamDropped",
    "build_catalog",
    "load_config",
]
