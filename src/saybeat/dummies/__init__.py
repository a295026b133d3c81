# File: src/saybeat/dummies/__init__.py
"""
Dummy platform services for tests and for hosts that disable a feature.

These drop-in replacements mirror the service interfaces in
saybeat.services but talk to no real engine. build_services() swaps them in
for any service the host did not provide, or whose feature is switched off
in config["hardware_features"].
"""

from saybeat.utilities.logger import GameLogger

from .audio_playback import AudioPlayback
from .image_prefetch import ImagePrefetch
from .permission_service import PermissionService
from .transcript_stream import TranscriptStream

# Maps each feature flag to the service slot it controls
FEATURE_MAP = {
    "microphone": "permissions",
    "speech": "stream",
    "audio": "playback",
    "images": "images",
}


def _dummy_for(slot, disabled):
    """A dummy service. Disabled features report themselves unavailable."""
    if slot == "permissions":
        return PermissionService()
    if slot == "stream":
        return TranscriptStream(supported=not disabled)
    if slot == "playback":
        return AudioPlayback(ready=not disabled)
    return ImagePrefetch()


def build_services(config=None, provided=None):
    """Assemble the four platform services for a GameSession.

    Args:
        config: Loaded config dict; only ``hardware_features`` is read.
            Each entry maps a feature name (microphone, speech, audio,
            images) to a bool; False forces the dummy. Unknown keys are
            ignored.
        provided: dict of host implementations keyed by slot name
            (permissions, stream, playback, images).

    Returns:
        dict: slot name -> service instance.
    """
    features = (config or {}).get("hardware_features", {}) or {}
    services = dict(provided or {})

    disabled_slots = set()
    for feature, enabled in features.items():
        if enabled or feature not in FEATURE_MAP:
            continue
        disabled_slots.add(FEATURE_MAP[feature])

    for slot in FEATURE_MAP.values():
        disabled = slot in disabled_slots
        if disabled or services.get(slot) is None:
            services[slot] = _dummy_for(slot, disabled)
            GameLogger.info("SESS", f"Dummy injected: {slot}{' (disabled)' if disabled else ''}")

    return services


__all__ = [
    "AudioPlayback",
    "FEATURE_MAP",
    "ImagePrefetch",
    "PermissionService",
    "TranscriptStream",
    "build_services",
]
