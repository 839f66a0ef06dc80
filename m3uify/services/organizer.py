"""Per-child organizing: conceal disc images and write the playlist.

For a child folder ``Game`` under ``root`` the result is::

    root/Game/.Game/<disc images>
    root/Game/Game.m3u

where every playlist line is ``.Game<sep><file name>``. A line is only
written once the corresponding rename has succeeded, so the playlist never
lists a file that was left behind.
"""
from __future__ import annotations

import logging
import os
from contextlib import nullcontext
from typing import IO, Optional, Union

from ..core.config import OrganizerConfig
from ..core.media import MediaClassifier
from ..core.models import ChildEntry, ErrorKind, OrganizeError, OrganizeReport
from ..core.paths import PathComposer
from ..core.protocols import FileOperations
from .file_ops import FileManager


logger = logging.getLogger(__name__)


class ChildOrganizer:
    """Organizes the disc images of one child folder.

    Failures never raise; they are recorded on the returned report. Steps
    that leave nothing sensible to do (missing root, concealed folder or
    playlist cannot be created, child cannot be listed) end the child early.
    A failed rename only affects that file.
    """

    def __init__(
        self,
        config: Optional[OrganizerConfig] = None,
        file_ops: Optional[FileOperations] = None,
    ):
        """Initialize the organizer.

        Args:
            config: Organizer configuration.
            file_ops: Filesystem operations (defaults to FileManager).
        """
        self._config = config or OrganizerConfig()
        self._file_ops = file_ops or FileManager()
        self._paths = PathComposer(self._config.separator)
        self._playlist_paths = PathComposer(self._config.resolved_playlist_separator)
        self._classifier = MediaClassifier(self._config.media_suffixes)

    @property
    def config(self) -> OrganizerConfig:
        return self._config

    def concealed_name(self, child: ChildEntry) -> str:
        return f"{self._config.concealed_prefix}{child.name}"

    def playlist_name(self, child: ChildEntry) -> str:
        return f"{child.name}{self._config.playlist_extension}"

    def organize(self, root: Union[str, os.PathLike], child: ChildEntry) -> OrganizeReport:
        """Run the full workflow for one child.

        Args:
            root: Directory containing the child.
            child: The child folder to organize.

        Returns:
            OrganizeReport with moved count, playlist lines and errors.
        """
        root = os.fspath(root)
        dry_run = self._config.dry_run
        base = child.name
        concealed = self.concealed_name(child)

        child_dir = self._paths.compose([root, base])
        concealed_path = self._paths.compose([root, base, concealed])
        playlist_path = self._paths.compose([root, base, self.playlist_name(child)])

        report = OrganizeReport(
            child_name=base,
            child_path=child.path,
            playlist_path=playlist_path,
            dry_run=dry_run,
        )

        if not self._file_ops.exists(root):
            report.add_error(OrganizeError(
                kind=ErrorKind.ROOT_MISSING,
                message="Root directory disappeared",
                source=root,
            ))
            logger.warning("Root %s missing, skipping %s", root, base)
            return report

        if not dry_run:
            try:
                created = self._file_ops.ensure_directory(concealed_path)
            except OSError as e:
                report.add_error(OrganizeError.from_exception(
                    ErrorKind.CONCEAL_FAILED,
                    "Unable to create concealed folder",
                    e,
                    source=concealed_path,
                ))
                logger.warning("Cannot create %s: %s", concealed_path, e)
                return report
            if not created:
                logger.debug("Concealed folder %s already exists", concealed_path)

        previous = self._previous_order(playlist_path, concealed)
        playlist = self._open_playlist(playlist_path, report)
        if playlist is None:
            return report

        with playlist as handle:
            if not self._list_relocated(concealed_path, concealed, previous, handle, report):
                return report

            try:
                entries = self._file_ops.list_entries(child_dir, sort=self._config.sort_entries)
            except OSError as e:
                report.add_error(OrganizeError.from_exception(
                    ErrorKind.ENUMERATE_FAILED,
                    "Unable to list child folder",
                    e,
                    source=child_dir,
                ))
                return report

            for name, is_dir in entries:
                if is_dir or not self._classifier.is_media_file(name):
                    continue
                self._relocate(root, base, concealed, name, handle, report)

        logger.debug(
            "Organized %s: %d moved, %d already relocated, %d errors",
            base, report.moved, report.already_relocated, len(report.errors),
        )
        return report

    def _open_playlist(self, path: str, report: OrganizeReport):
        """Create/truncate the playlist, or a no-op sink in dry-run mode."""
        if self._config.dry_run:
            return nullcontext(None)
        try:
            return self._file_ops.open_playlist(path)
        except OSError as e:
            report.add_error(OrganizeError.from_exception(
                ErrorKind.PLAYLIST_FAILED,
                "Unable to create playlist",
                e,
                source=path,
            ))
            logger.warning("Cannot create playlist %s: %s", path, e)
            return None

    def _previous_order(self, playlist_path: str, concealed: str) -> list[str]:
        """File names listed by the playlist being replaced, in its order."""
        try:
            lines = self._file_ops.read_playlist(playlist_path)
        except FileNotFoundError:
            return []
        except (OSError, UnicodeError) as e:
            logger.warning("Cannot read previous playlist %s: %s", playlist_path, e)
            return []

        # Either separator, in case --playlist-separator changed since
        prefixes = (f"{concealed}/", f"{concealed}\\")
        return [
            line[len(concealed) + 1:]
            for line in lines
            if line.startswith(prefixes) and len(line) > len(concealed) + 1
        ]

    def _list_relocated(
        self,
        concealed_path: str,
        concealed: str,
        previous: list[str],
        handle: Optional[IO[str]],
        report: OrganizeReport,
    ) -> bool:
        """List media files already moved by an earlier run.

        Names the previous playlist listed keep their order and come first,
        so rerunning does not reshuffle discs.

        Returns False if the concealed folder could not be read.
        """
        if self._config.dry_run and not self._file_ops.exists(concealed_path):
            return True

        try:
            entries = self._file_ops.list_entries(concealed_path, sort=self._config.sort_entries)
        except OSError as e:
            report.add_error(OrganizeError.from_exception(
                ErrorKind.ENUMERATE_FAILED,
                "Unable to list concealed folder",
                e,
                source=concealed_path,
            ))
            return False

        rank = {name: i for i, name in enumerate(previous)}
        names = [
            name for name, is_dir in entries
            if not is_dir and self._classifier.is_media_file(name)
        ]
        names.sort(key=lambda name: rank.get(name, len(rank)))

        for name in names:
            report.already_relocated += 1
            self._write_line(handle, self._playlist_paths.compose([concealed, name]), report)
        return True

    def _relocate(
        self,
        root: str,
        base: str,
        concealed: str,
        name: str,
        handle: Optional[IO[str]],
        report: OrganizeReport,
    ) -> None:
        """Move one media file, then record its playlist line."""
        source = self._paths.compose([root, base, name])
        target = self._paths.compose([root, base, concealed, name])
        line = self._playlist_paths.compose([concealed, name])

        if self._config.dry_run:
            logger.debug("Would move %s -> %s", source, target)
            report.moved += 1
            report.lines.append(line)
            return

        try:
            self._file_ops.move_file(source, target)
        except OSError as e:
            report.add_error(OrganizeError.from_exception(
                ErrorKind.MOVE_FAILED,
                "Unable to move",
                e,
                source=source,
                destination=target,
            ))
            logger.warning("Unable to move %s to %s: %s", source, target, e)
            return

        report.moved += 1
        self._write_line(handle, line, report)

    def _write_line(
        self,
        handle: Optional[IO[str]],
        line: str,
        report: OrganizeReport,
    ) -> None:
        if handle is not None:
            try:
                handle.write(f"{line}\n")
                handle.flush()
            except (OSError, UnicodeError) as e:
                report.add_error(OrganizeError.from_exception(
                    ErrorKind.WRITE_FAILED,
                    "Unable to write playlist line",
                    e,
                    source=report.playlist_path,
                ))
                return
        report.lines.append(line)
