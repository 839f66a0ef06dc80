"""Domain models - data classes for children and their reports."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Which step of organizing a child failed."""
    ROOT_MISSING = "root_missing"
    CONCEAL_FAILED = "conceal_failed"
    PLAYLIST_FAILED = "playlist_failed"
    ENUMERATE_FAILED = "enumerate_failed"
    MOVE_FAILED = "move_failed"
    WRITE_FAILED = "write_failed"
    UNEXPECTED = "unexpected"


class ChildAction(Enum):
    """Overall outcome for one root entry."""
    ORGANIZED = "organized"
    PARTIAL = "partial"
    FAILED = "failed"
    SKIPPED_NON_DIRECTORY = "skipped_non_directory"


# Errors that stop a child before any file is considered
FATAL_KINDS = frozenset({
    ErrorKind.ROOT_MISSING,
    ErrorKind.CONCEAL_FAILED,
    ErrorKind.PLAYLIST_FAILED,
    ErrorKind.ENUMERATE_FAILED,
    ErrorKind.UNEXPECTED,
})


@dataclass(frozen=True, slots=True)
class ChildEntry:
    """An immediate member of the root found to be a directory."""
    path: str
    name: str


@dataclass(frozen=True, slots=True)
class OrganizeError:
    """A failure recorded while organizing a child."""
    kind: ErrorKind
    message: str
    source: Optional[str] = None
    destination: Optional[str] = None
    cause: Optional[str] = None
    
    @classmethod
    def from_exception(
        cls,
        kind: ErrorKind,
        message: str,
        exc: BaseException,
        source: Optional[str] = None,
        destination: Optional[str] = None,
    ) -> "OrganizeError":
        return cls(
            kind=kind,
            message=message,
            source=source,
            destination=destination,
            cause=f"{type(exc).__name__}: {exc}",
        )
    
    @property
    def is_fatal(self) -> bool:
        return self.kind in FATAL_KINDS
    
    def __str__(self) -> str:
        text = self.message
        if self.source and self.destination:
            text = f"{text}: {self.source} -> {self.destination}"
        elif self.source:
            text = f"{text}: {self.source}"
        if self.cause:
            text = f"{text} ({self.cause})"
        return text


@dataclass(slots=True)
class OrganizeReport:
    """Result of organizing a single child folder."""
    child_name: str
    child_path: str
    moved: int = 0
    already_relocated: int = 0
    lines: list[str] = field(default_factory=list)
    playlist_path: Optional[str] = None
    errors: list[OrganizeError] = field(default_factory=list)
    skipped: bool = False
    dry_run: bool = False
    
    def add_error(self, error: OrganizeError) -> None:
        self.errors.append(error)
    
    @property
    def action(self) -> ChildAction:
        if self.skipped:
            return ChildAction.SKIPPED_NON_DIRECTORY
        if not self.errors:
            return ChildAction.ORGANIZED
        if any(e.is_fatal for e in self.errors):
            return ChildAction.FAILED
        return ChildAction.PARTIAL
    
    @property
    def is_success(self) -> bool:
        return self.action in (ChildAction.ORGANIZED, ChildAction.SKIPPED_NON_DIRECTORY)
    
    @property
    def move_errors(self) -> list[OrganizeError]:
        return [e for e in self.errors if e.kind == ErrorKind.MOVE_FAILED]


@dataclass(slots=True)
class RunStats:
    """Mutable statistics for a run over a root directory."""
    children: int = 0
    organized: int = 0
    partial: int = 0
    failed: int = 0
    skipped: int = 0
    files_moved: int = 0
    already_relocated: int = 0
    errors: int = 0
    elapsed_seconds: float = 0.0
    
    def record(self, report: OrganizeReport) -> None:
        """Record a child report."""
        self.children += 1
        self.files_moved += report.moved
        self.already_relocated += report.already_relocated
        self.errors += len(report.errors)
        match report.action:
            case ChildAction.ORGANIZED:
                self.organized += 1
            case ChildAction.PARTIAL:
                self.partial += 1
            case ChildAction.FAILED:
                self.failed += 1
            case ChildAction.SKIPPED_NON_DIRECTORY:
                self.skipped += 1
    
    @classmethod
    def from_reports(cls, reports: list[OrganizeReport]) -> "RunStats":
        stats = cls()
        for report in reports:
            stats.record(report)
        return stats
    
    @property
    def has_failures(self) -> bool:
        return self.partial > 0 or self.failed > 0
    
    def summary(self) -> dict[str, int]:
        return {
            "children": self.children,
            "organized": self.organized,
            "partial": self.partial,
            "failed": self.failed,
            "skipped": self.skipped,
            "files_moved": self.files_moved,
            "already_relocated": self.already_relocated,
            "errors": self.errors,
        }
