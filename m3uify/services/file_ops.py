"""File operations service."""
from __future__ import annotations

import errno
import logging
import os
from typing import IO


logger = logging.getLogger(__name__)


class FileManager:
    """Filesystem side effects used while organizing a child.
    
    Every method raises ``OSError`` on failure instead of returning a flag,
    so callers can record the underlying cause.
    """
    
    def __init__(self, encoding: str = "utf-8"):
        """Initialize file manager.
        
        Args:
            encoding: Text encoding for playlist files. Names that are not
                valid in it keep their raw bytes (surrogateescape).
        """
        self._encoding = encoding
    
    def exists(self, path: str) -> bool:
        return os.path.exists(path)
    
    def ensure_directory(self, path: str) -> bool:
        """Create a single directory level.
        
        Args:
            path: Directory to create. Its parent must exist.
        
        Returns:
            True if created, False if a directory was already there.
        
        Raises:
            FileExistsError: If a non-directory occupies the path.
        """
        try:
            os.mkdir(path)
        except FileExistsError:
            if os.path.isdir(path):
                return False
            raise
        logger.debug("Created directory %s", path)
        return True
    
    def open_playlist(self, path: str) -> IO[str]:
        """Create or truncate a playlist file.
        
        Lines are always terminated with ``\\n`` regardless of platform.
        """
        return open(
            path, "w", encoding=self._encoding, errors="surrogateescape", newline="\n"
        )
    
    def read_playlist(self, path: str) -> list[str]:
        """Read the lines of an existing playlist.
        
        Raises:
            FileNotFoundError: If there is no playlist yet.
        """
        with open(path, encoding=self._encoding, errors="surrogateescape", newline="\n") as handle:
            return handle.read().splitlines()
    
    def list_entries(self, path: str, sort: bool = False) -> list[tuple[str, bool]]:
        """List entries directly inside a directory.
        
        Args:
            path: Directory to list.
            sort: Order by name instead of filesystem order.
        
        Returns:
            (name, is_directory) pairs.
        """
        with os.scandir(path) as it:
            entries = [(entry.name, entry.is_dir()) for entry in it]
        if sort:
            entries.sort(key=lambda e: e[0])
        return entries
    
    def move_file(self, source: str, target: str) -> None:
        """Rename a file without copying.
        
        Cross-device moves fail rather than fall back to copy-and-delete.
        
        Raises:
            FileNotFoundError: If the source is gone.
            FileExistsError: If the target already exists.
            OSError: For any other rename failure.
        """
        if not os.path.lexists(source):
            raise FileNotFoundError(errno.ENOENT, "Source not found", source)
        if os.path.lexists(target):
            raise FileExistsError(errno.EEXIST, "Target already exists", target)
        os.rename(source, target)
        logger.debug("Moved %s -> %s", source, target)
