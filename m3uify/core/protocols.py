"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from typing import IO, Protocol

from .models import OrganizeReport


class FileOperations(Protocol):
    """Interface for the filesystem side effects of organizing a child.
    
    Implementations raise ``OSError`` on failure; the organizer decides
    whether a failure is fatal to the child or only to one file.
    """
    
    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a path exists."""
        ...
    
    @abstractmethod
    def ensure_directory(self, path: str) -> bool:
        """Create a directory. Returns False if it already existed."""
        ...
    
    @abstractmethod
    def open_playlist(self, path: str) -> IO[str]:
        """Create or truncate a playlist file for writing."""
        ...
    
    @abstractmethod
    def read_playlist(self, path: str) -> list[str]:
        """Read the lines of an existing playlist."""
        ...
    
    @abstractmethod
    def list_entries(self, path: str, sort: bool = False) -> list[tuple[str, bool]]:
        """List (name, is_directory) for entries directly inside path."""
        ...
    
    @abstractmethod
    def move_file(self, source: str, target: str) -> None:
        """Rename a file on the same volume."""
        ...


class ProgressReporter(Protocol):
    """Interface for progress reporting."""
    
    @abstractmethod
    def start_phase(self, name: str, total: int) -> None:
        """Start a new processing phase."""
        ...
    
    @abstractmethod
    def advance_phase(self, amount: int = 1) -> None:
        """Advance the current phase by an amount."""
        ...
    
    @abstractmethod
    def end_phase(self) -> None:
        """Complete current phase."""
        ...
    
    @abstractmethod
    def report_child(self, report: OrganizeReport) -> None:
        """Surface the outcome of one child, including per-file failures."""
        ...
    
    @abstractmethod
    def info(self, message: str) -> None:
        """Log an info message."""
        ...
    
    @abstractmethod
    def warning(self, message: str) -> None:
        """Log a warning message."""
        ...
    
    @abstractmethod
    def error(self, message: str) -> None:
        """Log an error message."""
        ...
