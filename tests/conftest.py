"""Shared fixtures: game folder trees built under tmp_path."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from m3uify.core.config import OrganizerConfig
from m3uify.core.models import ChildEntry


@dataclass
class GameFolder:
    """A child folder fixture that knows its expected output.

    Files are written with their own name as content so a moved file can be
    identified afterwards.
    """
    name: str
    media: list[str] = field(default_factory=list)
    other: list[str] = field(default_factory=list)

    def create(self, root: Path) -> Path:
        folder = root / self.name
        folder.mkdir(parents=True, exist_ok=True)
        for filename in self.media + self.other:
            (folder / filename).write_text(filename)
        return folder

    def entry(self, root: Path) -> ChildEntry:
        return ChildEntry(path=str(root / self.name), name=self.name)

    @property
    def concealed(self) -> str:
        return f".{self.name}"

    @property
    def playlist(self) -> str:
        return f"{self.name}.m3u"


def _read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """An empty root directory."""
    path = tmp_path / "roms"
    path.mkdir()
    return path


@pytest.fixture
def gamex() -> GameFolder:
    return GameFolder(
        name="GameX",
        media=["GameX.cue", "GameX.bin"],
        other=["cover.jpg"],
    )


@pytest.fixture
def read_playlist():
    """Return a helper that reads playlist lines."""
    return _read_lines


@pytest.fixture
def config() -> OrganizerConfig:
    return OrganizerConfig()


@pytest.fixture
def make_game():
    """Return the GameFolder factory for tests that need custom folders."""
    return GameFolder
