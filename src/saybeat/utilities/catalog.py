# File: src/saybeat/utilities/catalog.py
"""Prompt catalog.

A Prompt is an immutable reference datum: an id, the image asset shown on
the card, and the word the player has to say. The catalog is shared and
read-only; decks only ever hold references into it.
"""

from collections import namedtuple

Prompt = namedtuple("Prompt", ["key", "image", "word"])

ASSET_ROOT = "assets/animal"


def _animal(key, word):
    return Prompt(key, f"{ASSET_ROOT}/{key}.png", word)


# Default catalog: "หมู หมา กา ไก่" (pig, dog, crow, chicken) and friends
DEFAULT_CATALOG = (
    _animal("pig", "หมู"),
    _animal("dog", "หมา"),
    _animal("crow", "กา"),
    _animal("chicken", "ไก่"),
    _animal("cat", "แมว"),
    _animal("ant", "มด"),
    _animal("snake", "งู"),
    _animal("horse", "ม้า"),
    _animal("fish", "ปลา"),
)


def build_catalog(entries):
    """Build a catalog tuple from an iterable of dicts or (key, image, word) rows.

    Example::

        build_catalog([{"key": "dog", "image": "dog.png", "word": "dog"}])

    Raises:
        ValueError: If the result is empty or an entry has no word.
    """
    prompts = []
    for entry in entries:
        if isinstance(entry, Prompt):
            prompt = entry
        elif isinstance(entry, dict):
            prompt = Prompt(entry["key"], entry.get("image", ""), entry["word"])
        else:
            prompt = Prompt(*entry)
        if not prompt.word or not prompt.word.strip():
            raise ValueError(f"Prompt '{prompt.key}' has no word")
        prompts.append(prompt)

    if not prompts:
        raise ValueError("Catalog must contain at least one prompt")
    return tuple(prompts)
