"""Configuration dataclass with validation."""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Optional

from .errors import InvalidArgumentError
from .media import MEDIA_SUFFIXES


@dataclass(slots=True)
class OrganizerConfig:
    """Main configuration for the organizer.
    
    All fields are validated on construction.
    This is the only configuration object passed through the system.
    """
    # Path composition
    separator: str = os.sep
    playlist_separator: Optional[str] = None  # Defaults to separator
    
    # Naming
    media_suffixes: tuple[str, ...] = MEDIA_SUFFIXES
    playlist_extension: str = ".m3u"
    concealed_prefix: str = "."
    
    # Enumeration
    sort_entries: bool = False
    follow_symlinks: bool = False
    
    # Performance
    workers: int = 1
    
    # Execution mode
    dry_run: bool = False
    
    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("separator", "playlist_separator"):
            value = getattr(self, name)
            if value is None:
                continue
            if not isinstance(value, str) or len(value) != 1:
                raise InvalidArgumentError(
                    f"{name} must be a single character, got {value!r}"
                )
        
        self.media_suffixes = tuple(self.media_suffixes)
        if not self.media_suffixes or any(not s for s in self.media_suffixes):
            raise InvalidArgumentError("At least one non-empty media suffix is required")
        
        if not self.playlist_extension:
            raise InvalidArgumentError("Playlist extension must not be empty")
        
        if not self.concealed_prefix:
            raise InvalidArgumentError("Concealed prefix must not be empty")
        
        if self.workers < 1:
            raise InvalidArgumentError("Workers must be at least 1")
    
    @property
    def resolved_playlist_separator(self) -> str:
        return self.playlist_separator or self.separator
    
    def with_overrides(self, **kwargs) -> "OrganizerConfig":
        """Create a new config with some values overridden."""
        current = asdict(self)
        current.update(kwargs)
        return OrganizerConfig(**current)
