"""Exception types raised by the core."""
from __future__ import annotations

from pathlib import Path
from typing import Union


class M3uifyError(Exception):
    """Base class for all m3uify errors."""


class RootNotFoundError(M3uifyError, FileNotFoundError):
    """The root directory is missing or is not a directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = str(root)
        super().__init__(f"Root directory does not exist: {self.root}")


class InvalidArgumentError(M3uifyError, ValueError):
    """An argument or configuration value is invalid."""
