"""Core domain models and protocols."""
from .protocols import ProgressReporter, FileOperations
from .models import (
    ChildAction,
    ChildEntry,
    ErrorKind,
    OrganizeError,
    OrganizeReport,
    RunStats,
)
from .config import OrganizerConfig
from .errors import M3uifyError, RootNotFoundError, InvalidArgumentError
from .paths import PathComposer, compose
from .media import MediaClassifier, is_media_file, MEDIA_SUFFIXES

__all__ = [
    # Protocols
    "ProgressReporter",
    "FileOperations",
    # Models
    "ChildAction",
    "ChildEntry",
    "ErrorKind",
    "OrganizeError",
    "OrganizeReport",
    "RunStats",
    # Config
    "OrganizerConfig",
    # Errors
    "M3uifyError",
    "RootNotFoundError",
    "InvalidArgumentError",
    # Paths and classification
    "PathComposer",
    "compose",
    "MediaClassifier",
    "is_media_file",
    "MEDIA_SUFFIXES",
]
