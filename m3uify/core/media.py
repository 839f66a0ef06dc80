"""Disc-image file classification."""
from __future__ import annotations

from typing import Iterable


# Matched as literal trailing substrings, not dotted extensions:
# "archive.bin" matches, and so does "foobin".
MEDIA_SUFFIXES = ("chd", "cue", "bin")


class MediaClassifier:
    """Decides which file names are disc images to relocate."""

    def __init__(self, suffixes: Iterable[str] = MEDIA_SUFFIXES):
        self._suffixes = tuple(suffixes)

    @property
    def suffixes(self) -> tuple[str, ...]:
        return self._suffixes

    def is_media_file(self, name: str) -> bool:
        return name.endswith(self._suffixes)


def is_media_file(name: str) -> bool:
    return name.endswith(MEDIA_SUFFIXES)
