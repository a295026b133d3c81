# File: src/saybeat/dummies/image_prefetch.py
"""Dummy ImagePrefetch - pretends every image is cached."""

from saybeat.services import ImagePrefetch as BaseImagePrefetch


class ImagePrefetch(BaseImagePrefetch):
    """Drop-in dummy for ImagePrefetch.

    Keys listed in ``failing`` are counted as failed loads; like the real
    prefetcher, partial failure still reports the prefetch as usable.
    """

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.loaded = []
        self.failed = []

    async def prepare(self, catalog):
        self.loaded = []
        self.failed = []
        for prompt in catalog:
            if prompt.key in self.failing:
                self.failed.append(prompt.key)
            else:
                self.loaded.append(prompt.key)
        return True
