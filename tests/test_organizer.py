"""Tests for the per-child organizer."""
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from m3uify.core.config import OrganizerConfig
from m3uify.core.models import ChildAction, ChildEntry, ErrorKind
from m3uify.services.file_ops import FileManager
from m3uify.services.organizer import ChildOrganizer


SEP = os.sep


class FailingMoves(FileManager):
    """FileManager whose renames fail for selected file names."""

    def __init__(self, failing: set[str]):
        super().__init__()
        self.failing = failing

    def move_file(self, source: str, target: str) -> None:
        if os.path.basename(source) in self.failing:
            raise PermissionError(13, "Permission denied", source)
        super().move_file(source, target)


class BrokenHandle:
    """Playlist handle whose writes raise the given exception."""

    def __init__(self, exc: Exception):
        self.exc = exc

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return None

    def write(self, text):
        raise self.exc

    def flush(self):
        pass


class TestChildOrganizer:
    """Tests for ChildOrganizer.organize."""

    @pytest.fixture
    def organizer(self, config):
        return ChildOrganizer(config)

    def test_end_to_end(self, organizer, root, gamex, read_playlist):
        """Disc images are concealed, cover art stays put."""
        folder = gamex.create(root)

        report = organizer.organize(str(root), gamex.entry(root))

        concealed = folder / ".GameX"
        assert sorted(p.name for p in concealed.iterdir()) == ["GameX.bin", "GameX.cue"]
        assert (folder / "cover.jpg").read_text() == "cover.jpg"
        assert not (folder / "GameX.cue").exists()
        assert not (folder / "GameX.bin").exists()

        lines = read_playlist(folder / "GameX.m3u")
        assert sorted(lines) == [f".GameX{SEP}GameX.bin", f".GameX{SEP}GameX.cue"]
        assert lines == report.lines

        assert report.action == ChildAction.ORGANIZED
        assert report.moved == 2
        assert report.errors == []
        assert report.playlist_path == f"{root}{SEP}GameX{SEP}GameX.m3u"

    def test_playlist_follows_enumeration_order(self, root, make_game, read_playlist):
        game = make_game(name="Multi", media=["Multi (Disc 2).chd", "Multi (Disc 1).chd"])
        folder = game.create(root)
        expected = [
            f".Multi{SEP}{name}"
            for name in sorted(os.listdir(folder))
        ]

        organizer = ChildOrganizer(OrganizerConfig(sort_entries=True))
        organizer.organize(str(root), game.entry(root))

        assert read_playlist(folder / "Multi.m3u") == expected

    def test_playlist_is_sibling_of_concealed_folder(self, organizer, root, gamex):
        folder = gamex.create(root)

        organizer.organize(str(root), gamex.entry(root))

        assert (folder / "GameX.m3u").is_file()
        assert not (folder / ".GameX" / "GameX.m3u").exists()

    def test_playlist_uses_unix_newlines(self, organizer, root, gamex):
        folder = gamex.create(root)

        organizer.organize(str(root), gamex.entry(root))

        data = (folder / "GameX.m3u").read_bytes()
        assert b"\r\n" not in data
        assert data.endswith(b"\n")

    def test_idempotent(self, organizer, root, gamex, read_playlist):
        """A second run moves nothing and writes an equivalent playlist."""
        folder = gamex.create(root)
        first = organizer.organize(str(root), gamex.entry(root))
        first_lines = read_playlist(folder / "GameX.m3u")

        second = organizer.organize(str(root), gamex.entry(root))

        assert second.moved == 0
        assert second.already_relocated == 2
        assert second.errors == []
        assert read_playlist(folder / "GameX.m3u") == first_lines
        assert sorted(p.name for p in (folder / ".GameX").iterdir()) == ["GameX.bin", "GameX.cue"]
        assert first.moved == 2

    def test_rerun_keeps_previous_playlist_order(self, root, make_game, read_playlist):
        game = make_game(name="Multi", media=["Multi (Disc 1).chd", "Multi (Disc 2).chd"])
        folder = game.create(root)
        organizer = ChildOrganizer(OrganizerConfig(sort_entries=True))
        organizer.organize(str(root), game.entry(root))

        reordered = [f".Multi{SEP}Multi (Disc 2).chd", f".Multi{SEP}Multi (Disc 1).chd"]
        (folder / "Multi.m3u").write_text("".join(f"{line}\n" for line in reordered))

        report = organizer.organize(str(root), game.entry(root))

        assert report.already_relocated == 2
        assert read_playlist(folder / "Multi.m3u") == reordered

    def test_rerun_with_unlisted_relocated_file(self, root, make_game, read_playlist):
        """Files missing from the old playlist follow the ones it listed."""
        game = make_game(name="Game", media=["a.chd", "b.chd"])
        folder = game.create(root)
        organizer = ChildOrganizer(OrganizerConfig(sort_entries=True))
        organizer.organize(str(root), game.entry(root))
        (folder / "Game.m3u").write_text(f".Game{SEP}b.chd\n")

        organizer.organize(str(root), game.entry(root))

        assert read_playlist(folder / "Game.m3u") == [f".Game{SEP}b.chd", f".Game{SEP}a.chd"]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs byte file names")
    def test_undecodable_file_name(self, root, make_game):
        """Names that are not valid UTF-8 are moved and listed byte for byte."""
        game = make_game(name="Game", media=["b.bin", "c.bin"])
        folder = game.create(root)
        bad = os.path.join(os.fsencode(folder), b"a\xff.bin")
        with open(bad, "wb") as f:
            f.write(b"disc")
        organizer = ChildOrganizer(OrganizerConfig(sort_entries=True))
        sep = SEP.encode()
        expected = [b".Game" + sep + name for name in (b"a\xff.bin", b"b.bin", b"c.bin")]

        first = organizer.organize(str(root), game.entry(root))

        assert first.action == ChildAction.ORGANIZED
        assert first.moved == 3
        assert first.errors == []
        assert (folder / "Game.m3u").read_bytes().splitlines() == expected

        second = organizer.organize(str(root), game.entry(root))

        assert second.moved == 0
        assert second.already_relocated == 3
        assert second.errors == []
        assert (folder / "Game.m3u").read_bytes().splitlines() == expected

    def test_new_files_appended_after_relocated(self, organizer, root, make_game, read_playlist):
        game = make_game(name="Game", media=["Game (Disc 1).chd"])
        folder = game.create(root)
        organizer.organize(str(root), game.entry(root))

        (folder / "Game (Disc 2).chd").write_text("disc 2")
        report = organizer.organize(str(root), game.entry(root))

        assert report.moved == 1
        assert report.already_relocated == 1
        assert read_playlist(folder / "Game.m3u") == [
            f".Game{SEP}Game (Disc 1).chd",
            f".Game{SEP}Game (Disc 2).chd",
        ]

    def test_no_media_files(self, organizer, root, make_game):
        game = make_game(name="Empty", other=["readme.txt"])
        folder = game.create(root)

        report = organizer.organize(str(root), game.entry(root))

        assert report.action == ChildAction.ORGANIZED
        assert report.moved == 0
        assert (folder / ".Empty").is_dir()
        assert (folder / "Empty.m3u").read_text() == ""

    def test_subdirectory_with_media_suffix_not_moved(self, organizer, root, make_game):
        game = make_game(name="Game", media=["Game.chd"])
        folder = game.create(root)
        (folder / "extras.bin").mkdir()

        report = organizer.organize(str(root), game.entry(root))

        assert report.moved == 1
        assert (folder / "extras.bin").is_dir()

    def test_concealed_folder_with_media_suffix_name(self, organizer, root, make_game):
        """A child named like a suffix does not try to move its own concealed folder."""
        game = make_game(name="Xbin", media=["Xbin.bin"])
        folder = game.create(root)

        first = organizer.organize(str(root), game.entry(root))
        second = organizer.organize(str(root), game.entry(root))

        assert first.errors == []
        assert second.errors == []
        assert (folder / ".Xbin" / "Xbin.bin").exists()

    def test_literal_suffix_match(self, organizer, root, make_game):
        game = make_game(name="Odd", other=["foobin"])
        folder = game.create(root)

        report = organizer.organize(str(root), game.entry(root))

        assert report.moved == 1
        assert (folder / ".Odd" / "foobin").exists()

    def test_move_failure_recorded_and_skipped(self, root, gamex, read_playlist):
        """A failed rename is reported and never listed in the playlist."""
        folder = gamex.create(root)
        organizer = ChildOrganizer(OrganizerConfig(), file_ops=FailingMoves({"GameX.bin"}))

        report = organizer.organize(str(root), gamex.entry(root))

        assert report.action == ChildAction.PARTIAL
        assert report.moved == 1
        assert len(report.errors) == 1

        error = report.errors[0]
        assert error.kind == ErrorKind.MOVE_FAILED
        assert error.source == f"{root}{SEP}GameX{SEP}GameX.bin"
        assert error.destination == f"{root}{SEP}GameX{SEP}.GameX{SEP}GameX.bin"
        assert "PermissionError" in error.cause

        assert read_playlist(folder / "GameX.m3u") == [f".GameX{SEP}GameX.cue"]
        assert (folder / "GameX.bin").exists()

    def test_target_exists_is_move_failure(self, organizer, root, make_game):
        game = make_game(name="Game", media=["Game.chd"])
        folder = game.create(root)
        (folder / ".Game").mkdir()
        (folder / ".Game" / "Game.chd").write_text("older copy")

        report = organizer.organize(str(root), game.entry(root))

        assert [e.kind for e in report.errors] == [ErrorKind.MOVE_FAILED]
        assert report.already_relocated == 1
        assert (folder / "Game.chd").exists()
        assert (folder / ".Game" / "Game.chd").read_text() == "older copy"

    def test_concealed_creation_failure_abandons_child(self, organizer, root, gamex):
        folder = gamex.create(root)
        (folder / ".GameX").write_text("a file in the way")

        report = organizer.organize(str(root), gamex.entry(root))

        assert report.action == ChildAction.FAILED
        assert [e.kind for e in report.errors] == [ErrorKind.CONCEAL_FAILED]
        assert not (folder / "GameX.m3u").exists()
        assert (folder / "GameX.cue").exists()

    def test_playlist_failure_abandons_child(self, organizer, root, gamex):
        folder = gamex.create(root)

        with patch.object(FileManager, "open_playlist", side_effect=PermissionError("denied")):
            report = organizer.organize(str(root), gamex.entry(root))

        assert report.action == ChildAction.FAILED
        assert [e.kind for e in report.errors] == [ErrorKind.PLAYLIST_FAILED]
        assert (folder / "GameX.cue").exists()
        assert (folder / "GameX.bin").exists()

    def test_root_missing(self, organizer, tmp_path: Path):
        missing = tmp_path / "gone"
        child = ChildEntry(path=str(missing / "GameX"), name="GameX")

        report = organizer.organize(str(missing), child)

        assert [e.kind for e in report.errors] == [ErrorKind.ROOT_MISSING]
        assert not missing.exists()

    def test_write_failure_recorded(self, root, gamex):
        gamex.create(root)
        organizer = ChildOrganizer(OrganizerConfig())
        handle = BrokenHandle(OSError(28, "No space left on device"))

        with patch.object(FileManager, "open_playlist", return_value=handle):
            report = organizer.organize(str(root), gamex.entry(root))

        assert report.moved == 2
        assert report.lines == []
        assert [e.kind for e in report.errors] == [ErrorKind.WRITE_FAILED, ErrorKind.WRITE_FAILED]
        assert report.action == ChildAction.PARTIAL

    def test_encode_failure_is_write_failure(self, root, make_game):
        game = make_game(name="Game", media=["Game.chd"])
        folder = game.create(root)
        organizer = ChildOrganizer(OrganizerConfig())
        handle = BrokenHandle(UnicodeEncodeError("utf-8", "\udcff", 0, 1, "surrogates not allowed"))

        with patch.object(FileManager, "open_playlist", return_value=handle):
            report = organizer.organize(str(root), game.entry(root))

        assert report.moved == 1
        assert report.lines == []
        assert [e.kind for e in report.errors] == [ErrorKind.WRITE_FAILED]
        assert "UnicodeEncodeError" in report.errors[0].cause
        assert (folder / ".Game" / "Game.chd").exists()

    def test_unreadable_previous_playlist_is_replaced(self, organizer, root, gamex, read_playlist):
        folder = gamex.create(root)
        organizer.organize(str(root), gamex.entry(root))

        with patch.object(FileManager, "read_playlist", side_effect=PermissionError("denied")):
            report = organizer.organize(str(root), gamex.entry(root))

        assert report.errors == []
        assert report.already_relocated == 2
        assert sorted(read_playlist(folder / "GameX.m3u")) == [
            f".GameX{SEP}GameX.bin",
            f".GameX{SEP}GameX.cue",
        ]

    def test_dry_run_touches_nothing(self, root, gamex):
        folder = gamex.create(root)
        before = sorted(os.listdir(folder))
        organizer = ChildOrganizer(OrganizerConfig(dry_run=True))

        report = organizer.organize(str(root), gamex.entry(root))

        assert sorted(os.listdir(folder)) == before
        assert report.dry_run is True
        assert report.moved == 2
        assert sorted(report.lines) == [f".GameX{SEP}GameX.bin", f".GameX{SEP}GameX.cue"]

    def test_playlist_separator_override(self, root, gamex, read_playlist):
        folder = gamex.create(root)
        organizer = ChildOrganizer(OrganizerConfig(playlist_separator="\\"))

        organizer.organize(str(root), gamex.entry(root))

        assert sorted(read_playlist(folder / "GameX.m3u")) == [
            ".GameX\\GameX.bin",
            ".GameX\\GameX.cue",
        ]
        assert (folder / ".GameX" / "GameX.cue").exists()

    def test_accepts_pathlike_root(self, organizer, root, gamex):
        gamex.create(root)

        report = organizer.organize(root, gamex.entry(root))

        assert report.moved == 2
