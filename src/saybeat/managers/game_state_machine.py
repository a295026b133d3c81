# File: src/saybeat/managers/game_state_machine.py
"""
GameStateMachine - Phase, round and slot bookkeeping for one game.

Every transition is driven by ``on_beat()``; there is no other loop. The
machine only knows about its deck and two hooks. Starting and stopping the
external services (recognition stream, music) is delegated to the owner
through ``on_start`` / ``on_stop``.

Beat-by-beat flow::

    READY/FINISHED --start()--> COUNTDOWN (pre_game_countdown beats)
    COUNTDOWN     --> RUNNING       slot 0 .. N-1, one slot per beat
    RUNNING       --> INTERMISSION  (intermission_countdown beats, new deck)
    INTERMISSION  --> RUNNING       round + 1
    RUNNING       --> FINISHED      after the last slot of the last round
    any active    --stop()--> READY
"""

from saybeat.utilities.errors import StaleCallback
from saybeat.utilities.logger import GameLogger
from saybeat.utilities.phases import Feedback, Phase


class GameStateMachine:
    """
    Owns the game phase, the counters and the per-slot feedback.

    Race policy with the transcript matcher is first-writer-wins: a slot
    already marked CORRECT is never overwritten by the beat, and a slot
    the beat has moved past is no longer the active slot, so a late
    ``mark_slot_correct()`` for it is ignored.
    """

    def __init__(self, settings, deck, on_start=None, on_stop=None):
        self.settings = settings
        self.deck = deck
        self.on_start = on_start
        self.on_stop = on_stop

        self.phase = Phase.READY
        self.score = 0
        self.current_round = 0
        self.active_slot = -1
        self.countdown = settings.pre_game_countdown
        self.games_played = 0

        self._feedback = Feedback.fresh(settings.slot_count)

        GameLogger.info("GAME", f"[INIT] GameStateMachine - {settings!r}")

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def slot_count(self):
        return self.settings.slot_count

    @property
    def total_rounds(self):
        return self.settings.total_rounds

    @property
    def feedback(self):
        """Snapshot of the per-slot feedback for the current round."""
        return tuple(self._feedback)

    def feedback_at(self, index):
        return self._feedback[index]

    @property
    def is_active(self):
        return Phase.is_active(self.phase)

    @property
    def active_word(self):
        """Word expected for the active slot, or None outside RUNNING."""
        if self.phase != Phase.RUNNING:
            return None
        return self.deck.word_at(self.active_slot)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self):
        """Begin a new game from READY, or replay from FINISHED.

        Returns:
            bool: True if a game was started.
        """
        if self.phase not in Phase.STARTABLE_PHASES:
            GameLogger.warning("GAME", f"start() ignored in phase {self.phase}")
            return False

        self.score = 0
        self.current_round = 1
        self.active_slot = -1
        self.countdown = self.settings.pre_game_countdown
        self._feedback = Feedback.fresh(self.slot_count)
        self.deck.reshuffle()
        self.games_played += 1
        self.phase = Phase.COUNTDOWN

        GameLogger.note("GAME", f"Game #{self.games_played} starting - countdown {self.countdown} beats")
        if self.on_start:
            self.on_start()
        return True

    def stop(self):
        """Abort an active game and return to READY.

        Returns:
            bool: True if an active game was stopped.
        """
        if not self.is_active:
            GameLogger.debug("GAME", f"stop() ignored in phase {self.phase}")
            return False

        GameLogger.note("GAME", f"Game stopped in {self.phase} (round {self.current_round}, score {self.score})")
        self.phase = Phase.READY
        self.active_slot = -1
        if self.on_stop:
            self.on_stop()
        return True

    def mark_slot_correct(self, index):
        """Record a correct answer for the active slot.

        Silently ignored unless the game is RUNNING, ``index`` is the active
        slot and the slot has not been answered correctly already. Calls
        that lose a race against the beat land here and are dropped.

        Returns:
            bool: True if the score was incremented.
        """
        if self.phase != Phase.RUNNING or index != self.active_slot:
            GameLogger.debug("GAME", str(StaleCallback(
                "match", f"(slot {index}, active {self.active_slot}, phase {self.phase})"
            )))
            return False
        if self._feedback[index] == Feedback.CORRECT:
            return False

        self._feedback[index] = Feedback.CORRECT
        self.score += 1
        GameLogger.info("GAME", f"Slot {index} correct - score {self.score}")
        return True

    # ------------------------------------------------------------------
    # Beat handling
    # ------------------------------------------------------------------

    def on_beat(self):
        """Advance the game by one beat.

        Returns:
            bool: True if the beat changed any state.
        """
        if self.phase == Phase.COUNTDOWN:
            self._count_down()
            if self.countdown == 0:
                self._enter_running()
            return True

        if self.phase == Phase.INTERMISSION:
            self._count_down()
            if self.countdown == 0:
                self.current_round += 1
                self._enter_running()
            return True

        if self.phase == Phase.RUNNING:
            self._advance_slot()
            return True

        GameLogger.debug("GAME", str(StaleCallback("beat", f"(phase {self.phase})")))
        return False

    def _count_down(self):
        self.countdown = max(0, self.countdown - 1)

    def _enter_running(self):
        self.phase = Phase.RUNNING
        self.active_slot = 0
        GameLogger.info("GAME", f"Round {self.current_round}/{self.total_rounds} running")

    def _advance_slot(self):
        vacated = self.active_slot
        if self._feedback[vacated] == Feedback.PENDING:
            # Timeout: the player did not say the word within the beat
            self._feedback[vacated] = Feedback.INCORRECT

        next_slot = (vacated + 1) % self.slot_count
        if next_slot != 0:
            self.active_slot = next_slot
            return

        self.active_slot = -1
        if self.current_round >= self.total_rounds:
            self._finish()
            return

        self.deck.reshuffle()
        self._feedback = Feedback.fresh(self.slot_count)
        self.countdown = self.settings.intermission_countdown
        self.phase = Phase.INTERMISSION
        GameLogger.info("GAME", f"Round {self.current_round} over - score {self.score}, intermission {self.countdown} beats")
        if self.countdown == 0:
            self.current_round += 1
            self._enter_running()

    def _finish(self):
        self.phase = Phase.FINISHED
        GameLogger.note("GAME", f"Game finished - final score {self.score}")
        if self.on_stop:
            self.on_stop()
