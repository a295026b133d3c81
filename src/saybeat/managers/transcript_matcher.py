# File: src/saybeat/managers/transcript_matcher.py
"""Matches the live transcript against the word of the active slot."""

from saybeat.utilities.logger import GameLogger
from saybeat.utilities.phases import Feedback, Phase


def normalize(text):
    """Lowercase and trim a transcript or target word. None becomes ''."""
    if text is None:
        return ""
    return str(text).strip().lower()


def contains_word(transcript, word):
    """True if the normalized word appears anywhere in the normalized transcript."""
    target = normalize(word)
    if not target:
        return False
    return target in normalize(transcript)


class TranscriptMatcher:
    """
    Watches transcript updates and scores the active slot on a match.

    Matching is plain substring containment on the cumulative transcript,
    interim results included, with no debouncing: the first update that
    contains the word scores it. After a hit the stream's buffer is reset so
    the next slot starts from an empty transcript.
    """

    def __init__(self, machine, stream=None):
        self.machine = machine
        self.stream = stream
        self.last_transcript = ""
        self.match_count = 0
        GameLogger.info("MTCH", "[INIT] TranscriptMatcher")

    def handle_transcript(self, text):
        """Process one transcript update.

        Returns:
            bool: True if the update scored the active slot.
        """
        machine = self.machine
        if machine.phase != Phase.RUNNING:
            return False

        self.last_transcript = text or ""

        index = machine.active_slot
        if index < 0 or machine.feedback_at(index) == Feedback.CORRECT:
            return False

        word = machine.active_word
        if not contains_word(text, word):
            return False

        if not machine.mark_slot_correct(index):
            return False

        self.match_count += 1
        GameLogger.debug("MTCH", f"Matched '{word}' in '{normalize(text)}'")
        if self.stream is not None:
            self.stream.reset()
        self.last_transcript = ""
        return True
