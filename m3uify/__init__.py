"""Disc-image folder organization with per-folder .m3u playlists.

Each child folder of a root directory gets its disc images moved into a
concealed subfolder and a playlist listing them.
"""

__version__ = "1.0.0"

# Core exports
from .core.config import OrganizerConfig
from .core.errors import M3uifyError, RootNotFoundError, InvalidArgumentError
from .core.models import (
    ChildAction,
    ChildEntry,
    ErrorKind,
    OrganizeError,
    OrganizeReport,
    RunStats,
)
from .core.paths import PathComposer, compose
from .core.media import MediaClassifier, is_media_file
from .core.protocols import FileOperations, ProgressReporter

# Service exports
from .services.file_ops import FileManager
from .services.organizer import ChildOrganizer
from .services.walker import DirectoryWalker

# Logging exports
from .logging.rich_logger import RichProgressReporter, QuietProgressReporter

__all__ = [
    # Core
    "OrganizerConfig",
    "M3uifyError",
    "RootNotFoundError",
    "InvalidArgumentError",
    "ChildAction",
    "ChildEntry",
    "ErrorKind",
    "OrganizeError",
    "OrganizeReport",
    "RunStats",
    "PathComposer",
    "compose",
    "MediaClassifier",
    "is_media_file",
    "FileOperations",
    "ProgressReporter",
    # Services
    "FileManager",
    "ChildOrganizer",
    "DirectoryWalker",
    # Logging
    "RichProgressReporter",
    "QuietProgressReporter",
]
