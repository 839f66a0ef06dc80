"""Root directory walking service."""
from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Union

from ..core.config import OrganizerConfig
from ..core.errors import RootNotFoundError
from ..core.models import ChildEntry, ErrorKind, OrganizeError, OrganizeReport
from ..core.paths import PathComposer
from ..core.protocols import ProgressReporter
from .organizer import ChildOrganizer


logger = logging.getLogger(__name__)


class DirectoryWalker:
    """Runs the organizer over every child folder of a root directory.

    One child failing never stops the walk. Reports come back in
    enumeration order whether children run sequentially or on a
    thread pool.
    """

    def __init__(
        self,
        config: Optional[OrganizerConfig] = None,
        organizer: Optional[ChildOrganizer] = None,
        reporter: Optional[ProgressReporter] = None,
    ):
        """Initialize the walker.

        Args:
            config: Organizer configuration.
            organizer: Per-child organizer (built from config if omitted).
            reporter: Optional progress reporter for user feedback.
        """
        self._config = config or OrganizerConfig()
        self._organizer = organizer or ChildOrganizer(self._config)
        self._reporter = reporter
        self._paths = PathComposer(self._config.separator)
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Stop before the next child starts. A running move is not interrupted."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def discover(self, root: Union[str, os.PathLike]) -> tuple[list[ChildEntry], list[OrganizeReport]]:
        """Enumerate immediate entries of root.

        Returns:
            (children, skipped) where skipped holds a report for every
            entry that is not a directory.

        Raises:
            RootNotFoundError: If root is missing or not a directory.
        """
        root = os.fspath(root)
        if not os.path.isdir(root):
            raise RootNotFoundError(root)

        try:
            with os.scandir(root) as it:
                entries = list(it)
        except FileNotFoundError as e:
            raise RootNotFoundError(root) from e

        if self._config.sort_entries:
            entries.sort(key=lambda e: e.name)

        children: list[ChildEntry] = []
        skipped: list[OrganizeReport] = []
        for entry in entries:
            path = self._paths.compose([root, entry.name])
            if entry.is_symlink() and not self._config.follow_symlinks:
                is_dir = False
            else:
                is_dir = entry.is_dir()

            if is_dir:
                children.append(ChildEntry(path=path, name=entry.name))
            else:
                logger.debug("Skipping non-directory entry %s", path)
                skipped.append(OrganizeReport(
                    child_name=entry.name,
                    child_path=path,
                    skipped=True,
                    dry_run=self._config.dry_run,
                ))

        return children, skipped

    def run(self, root: Union[str, os.PathLike]) -> list[OrganizeReport]:
        """Organize every child folder of root.

        Args:
            root: Directory whose immediate subdirectories are organized.

        Returns:
            One report per root entry: skipped non-directories first, then
            children in enumeration order. Children not started because of
            cancel() have no report.

        Raises:
            RootNotFoundError: If root does not exist; nothing is written.
        """
        root = os.fspath(root)
        children, skipped = self.discover(root)

        for report in skipped:
            self._notify(report)

        if not children:
            return skipped

        if self._reporter:
            self._reporter.start_phase("Organizing", len(children))
        try:
            if self._config.workers > 1 and len(children) > 1:
                reports = self._run_parallel(root, children)
            else:
                reports = self._run_sequential(root, children)
        finally:
            if self._reporter:
                self._reporter.end_phase()

        return skipped + reports

    def _run_sequential(self, root: str, children: list[ChildEntry]) -> list[OrganizeReport]:
        reports = []
        for child in children:
            if self._cancelled.is_set():
                logger.info("Cancelled before %s", child.name)
                break
            report = self._organize_safely(root, child)
            self._notify(report)
            reports.append(report)
        return reports

    def _run_parallel(self, root: str, children: list[ChildEntry]) -> list[OrganizeReport]:
        executor = ThreadPoolExecutor(max_workers=self._config.workers)
        try:
            futures = [
                executor.submit(self._organize_unless_cancelled, root, child)
                for child in children
            ]
            reports = []
            for future in futures:
                report = future.result()
                if report is None:
                    continue
                self._notify(report)
                reports.append(report)
            return reports
        except KeyboardInterrupt:
            self.cancel()
            raise
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _organize_unless_cancelled(self, root: str, child: ChildEntry) -> Optional[OrganizeReport]:
        if self._cancelled.is_set():
            return None
        return self._organize_safely(root, child)

    def _organize_safely(self, root: str, child: ChildEntry) -> OrganizeReport:
        """Organize one child, turning any unexpected exception into a report."""
        try:
            return self._organizer.organize(root, child)
        except Exception as e:
            logger.exception("Unexpected error organizing %s", child.name)
            report = OrganizeReport(
                child_name=child.name,
                child_path=child.path,
                dry_run=self._config.dry_run,
            )
            report.add_error(OrganizeError.from_exception(
                ErrorKind.UNEXPECTED,
                "Unexpected error",
                e,
                source=child.path,
            ))
            return report

    def _notify(self, report: OrganizeReport) -> None:
        if not self._reporter:
            return
        self._reporter.report_child(report)
        if not report.skipped:
            self._reporter.advance_phase()
