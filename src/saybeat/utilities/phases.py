# File: src/saybeat/utilities/phases.py
"""Phase and feedback constants shared by the game components.

Centralizing these definitions keeps the state machine, the resource gate
and the UI snapshot speaking the same vocabulary.
"""


class Phase:
    """Every phase the game can be in. Exactly one is active at a time."""
    PERMISSION_PENDING = "PERMISSION_PENDING"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    LOADING = "LOADING"
    READY = "READY"
    COUNTDOWN = "COUNTDOWN"
    RUNNING = "RUNNING"
    INTERMISSION = "INTERMISSION"
    FINISHED = "FINISHED"

    # Phases owned by the ResourceGate
    GATE_PHASES = (PERMISSION_PENDING, PERMISSION_DENIED, LOADING, READY)

    # Phases in which the beat clock runs and the recognition stream is kept alive
    ACTIVE_PHASES = (COUNTDOWN, RUNNING, INTERMISSION)

    # Phases from which start() is accepted
    STARTABLE_PHASES = (READY, FINISHED)

    @classmethod
    def is_active(cls, phase):
        return phase in cls.ACTIVE_PHASES


class Feedback:
    """Per-slot outcome for the prompts of the current round."""
    PENDING = "PENDING"
    CORRECT = "CORRECT"
    INCORRECT = "INCORRECT"

    @classmethod
    def fresh(cls, count):
        """A new all-pending feedback array for `count` slots."""
        return [cls.PENDING] * count


class PermissionState:
    """Values reported by the platform PermissionService."""
    GRANTED = "granted"
    DENIED = "denied"
    PROMPT = "prompt"
