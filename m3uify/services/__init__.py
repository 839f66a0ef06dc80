"""Service layer - business logic."""
from .file_ops import FileManager
from .organizer import ChildOrganizer
from .walker import DirectoryWalker

__all__ = [
    "FileManager",
    "ChildOrganizer",
    "DirectoryWalker",
]
