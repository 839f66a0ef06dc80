"""Path composition from ordered string segments."""
from __future__ import annotations

import os
from typing import Sequence

from .errors import InvalidArgumentError


class PathComposer:
    """Joins path segments with a fixed separator.

    This is a pure string operation: no normalization, no existence checks,
    and never a trailing separator. The separator is injected so playlists
    can be produced for another platform than the host.
    """

    def __init__(self, separator: str = os.sep):
        """Initialize the composer.

        Args:
            separator: Single character placed between segments.
        """
        if not isinstance(separator, str) or len(separator) != 1:
            raise InvalidArgumentError(
                f"Separator must be a single character, got {separator!r}"
            )
        self._separator = separator

    @property
    def separator(self) -> str:
        return self._separator

    def compose(self, segments: Sequence[str]) -> str:
        """Join segments into a path string.

        Args:
            segments: Ordered, non-empty path segments.

        Returns:
            The joined path.

        Raises:
            InvalidArgumentError: If there are no segments or one is empty.
        """
        if isinstance(segments, str) or not segments:
            raise InvalidArgumentError("At least one path segment is required")

        parts = [str(segment) for segment in segments]
        if any(not part for part in parts):
            raise InvalidArgumentError(f"Path segments must be non-empty: {parts!r}")

        return self._separator.join(parts)


def compose(segments: Sequence[str], separator: str = os.sep) -> str:
    """Join segments with ``separator``."""
    return PathComposer(separator).compose(segments)
