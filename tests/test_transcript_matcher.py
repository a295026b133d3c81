#!/usr/bin/env python3
"""Unit tests for TranscriptMatcher and its normalization helpers."""

from saybeat.dummies import TranscriptStream
from saybeat.managers.game_state_machine import GameStateMachine
from saybeat.managers.round_deck import RoundDeck
from saybeat.managers.transcript_matcher import TranscriptMatcher, contains_word, normalize
from saybeat.utilities.catalog import Prompt
from saybeat.utilities.config import GameSettings
from saybeat.utilities.phases import Feedback, Phase

DOG_CATALOG = (Prompt("dog", "assets/animal/dog.png", "dog"),)


def _running_matcher(catalog=DOG_CATALOG, slots=4, rounds=2):
    settings = GameSettings(slot_count=slots, total_rounds=rounds, pre_game_countdown=0, intermission_countdown=2)
    machine = GameStateMachine(settings, RoundDeck(catalog, slots, seed=1))
    stream = TranscriptStream()
    matcher = TranscriptMatcher(machine, stream)
    machine.start()
    machine.on_beat()
    assert machine.phase == Phase.RUNNING
    return machine, stream, matcher


def test_normalize():
    assert normalize("  DOG please ") == "dog please"
    assert normalize(None) == ""
    assert normalize("") == ""


def test_contains_word_is_substring_match():
    assert contains_word("  DOG please ", "dog") is True
    assert contains_word("hotdog", "dog") is True, "Plain containment, no word boundaries"
    assert contains_word("cat", "dog") is False
    assert contains_word("anything", "") is False, "Empty target never matches"
    assert contains_word("anything", None) is False


def test_contains_word_thai():
    assert contains_word("นั่นคือ สุนัข ครับ", "สุนัข") is True


def test_match_scores_active_slot_and_resets_stream():
    machine, stream, matcher = _running_matcher()
    assert matcher.handle_transcript("  DOG please ") is True
    assert machine.feedback_at(0) == Feedback.CORRECT
    assert machine.score == 1
    assert stream.reset_count == 1, "Buffer cleared after a match"
    assert matcher.last_transcript == ""
    assert matcher.match_count == 1


def test_no_match_leaves_slot_pending():
    machine, stream, matcher = _running_matcher()
    assert matcher.handle_transcript("a cat") is False
    assert machine.feedback_at(0) == Feedback.PENDING
    assert matcher.last_transcript == "a cat", "Latest transcript kept for display"
    assert stream.reset_count == 0


def test_repeated_updates_score_once():
    machine, _, matcher = _running_matcher()
    matcher.handle_transcript("dog")
    assert matcher.handle_transcript("dog dog") is False, "Slot already correct"
    assert machine.score == 1


def test_no_scoring_outside_running():
    settings = GameSettings(slot_count=2, total_rounds=2, pre_game_countdown=3)
    machine = GameStateMachine(settings, RoundDeck(DOG_CATALOG, 2, seed=1))
    matcher = TranscriptMatcher(machine, TranscriptStream())

    assert matcher.handle_transcript("dog") is False, "READY never scores"
    machine.start()
    assert matcher.handle_transcript("dog") is False, "COUNTDOWN never scores"
    assert machine.score == 0


def test_no_scoring_during_intermission():
    machine, _, matcher = _running_matcher(slots=2)
    machine.on_beat()
    machine.on_beat()
    assert machine.phase == Phase.INTERMISSION
    assert matcher.handle_transcript("dog") is False
    assert machine.score == 0


def test_matcher_without_stream():
    settings = GameSettings(slot_count=2, total_rounds=1, pre_game_countdown=0)
    machine = GameStateMachine(settings, RoundDeck(DOG_CATALOG, 2, seed=1))
    matcher = TranscriptMatcher(machine)
    machine.start()
    machine.on_beat()
    assert matcher.handle_transcript("DOG") is True


def test_transcript_outside_running_not_recorded():
    machine, _, matcher = _running_matcher()
    matcher.handle_transcript("a cat")
    machine.stop()
    matcher.handle_transcript("a horse")
    assert matcher.last_transcript == "a cat"
