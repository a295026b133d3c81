# File: src/saybeat/managers/round_deck.py
"""Selects the prompts shown in each round."""

import random

from saybeat.utilities.logger import GameLogger


def draw(catalog, n, rng=None):
    """Draw ``n`` prompts uniformly at random, with replacement.

    Duplicates within one draw are expected: the same animal may appear in
    several slots of a round.

    Args:
        catalog: Sequence of Prompt.
        n: Number of prompts to draw.
        rng: Optional random.Random; the module RNG is used when omitted.

    Raises:
        ValueError: If the catalog is empty or n is negative.
    """
    if not catalog:
        raise ValueError("Cannot draw from an empty catalog")
    if n < 0:
        raise ValueError(f"Cannot draw a negative number of prompts ({n})")
    rng = rng or random
    return [catalog[rng.randrange(len(catalog))] for _ in range(n)]


class RoundDeck:
    """The ordered prompts assigned to the slots of the current round.

    A deck is re-drawn at game start and at every round boundary; it is
    never edited in place while a round is being played. Pass a ``seed`` to
    make the sequence of draws reproducible.
    """

    def __init__(self, catalog, slot_count, seed=None):
        if not catalog:
            raise ValueError("RoundDeck needs a non-empty catalog")
        if slot_count < 1:
            raise ValueError(f"slot_count must be at least 1, got {slot_count}")

        self.catalog = tuple(catalog)
        self.slot_count = slot_count
        self._rng = random.Random(seed)
        self._prompts = ()
        self.draw_count = 0

        GameLogger.info("DECK", f"[INIT] RoundDeck - catalog: {len(self.catalog)} prompts, slots: {slot_count}")
        self.reshuffle()

    def reshuffle(self):
        """Replace the current deck with a fresh draw and return it."""
        self._prompts = tuple(draw(self.catalog, self.slot_count, self._rng))
        self.draw_count += 1
        GameLogger.debug("DECK", f"Draw #{self.draw_count}: {[p.key for p in self._prompts]}")
        return self._prompts

    @property
    def prompts(self):
        return self._prompts

    def word_at(self, index):
        """The expected word for a slot, or None for an out-of-range index."""
        if 0 <= index < len(self._prompts):
            return self._prompts[index].word
        return None

    def __len__(self):
        return len(self._prompts)

    def __getitem__(self, index):
        return self._prompts[index]

    def __iter__(self):
        return iter(self._prompts)
