"""Console output for m3uify runs, built on Rich."""
from __future__ import annotations

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from ..core.models import ChildAction, OrganizeReport, RunStats


ACTION_STYLES = {
    ChildAction.ORGANIZED: ("✓", "green"),
    ChildAction.PARTIAL: ("⚠", "yellow"),
    ChildAction.FAILED: ("✗", "red"),
    ChildAction.SKIPPED_NON_DIRECTORY: ("-", "dim"),
}

STAT_LABELS = {
    "children": "Children",
    "organized": "Organized",
    "partial": "Partial",
    "failed": "Failed",
    "skipped": "Skipped",
    "files_moved": "Files Moved",
    "already_relocated": "Already Relocated",
    "errors": "Errors",
}


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route library logging through Rich on stderr.

    Calling this again replaces the handler installed by the previous call.

    Args:
        verbose: Log DEBUG and up instead of WARNING and up.
        console: Console to attach to (defaults to a new stderr console).
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


class RichProgressReporter:
    """Progress bar, per-child notices and summary tables on a Rich console."""

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        self._console = console or Console(stderr=True)
        self._verbose = verbose
        self._quiet = quiet
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    @property
    def console(self) -> Console:
        return self._console

    def start_phase(self, name: str, total: int) -> None:
        if self._quiet:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
        )
        self._progress.start()
        self._task = self._progress.add_task(name, total=total)

    def advance_phase(self, amount: int = 1) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.advance(self._task, amount)

    def end_phase(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task = None

    def info(self, message: str) -> None:
        if not self._quiet:
            self._console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._console.print(f"[dim]  {escape(message)}[/dim]")

    def report_child(self, report: OrganizeReport) -> None:
        """Print the outcome of one child.

        Successful children are only listed in verbose mode. Errors are
        always printed, quiet or not.
        """
        if report.skipped:
            self.debug(f"Skipped non-directory {report.child_path}")
            return

        if not self._quiet and (self._verbose or report.errors):
            marker, style = ACTION_STYLES[report.action]
            verb = "would move" if report.dry_run else "moved"
            self._console.print(
                f"[{style}]{marker}[/{style}] {escape(report.child_name)}: "
                f"{verb} {report.moved}, already relocated {report.already_relocated}"
            )

        for error in report.errors:
            self.error(f"{report.child_name}: {error}")

        for line in report.lines:
            self.debug(line)

    def print_header(self, title: str) -> None:
        if not self._quiet:
            self._console.print(Panel(f"[bold cyan]{escape(title)}[/bold cyan]", border_style="cyan"))

    def print_config(self, config_items: dict) -> None:
        if self._quiet:
            return
        table = Table(title="Configuration", header_style="bold")
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for key, value in config_items.items():
            table.add_row(key, escape(str(value)))
        self._console.print(table)

    def print_reports(self, reports: list[OrganizeReport]) -> None:
        """Print one table row per child folder."""
        if self._quiet or not reports:
            return

        table = Table(title="Children", header_style="bold")
        table.add_column("Folder", style="cyan")
        table.add_column("Result")
        for heading in ("Moved", "Already", "Errors"):
            table.add_column(heading, justify="right")

        for report in reports:
            _, style = ACTION_STYLES[report.action]
            table.add_row(
                escape(report.child_name),
                f"[{style}]{report.action.value}[/{style}]",
                str(report.moved),
                str(report.already_relocated),
                str(len(report.errors)),
            )
        self._console.print(table)

    def print_stats(self, stats: RunStats) -> None:
        if self._quiet:
            return

        table = Table(title="Run Complete", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="green", justify="right")
        for key, value in stats.summary().items():
            table.add_row(STAT_LABELS[key], str(value))
        if stats.elapsed_seconds > 0:
            table.add_row("Time Elapsed", f"{stats.elapsed_seconds:.1f}s")
        self._console.print(table)


class QuietProgressReporter:
    """Prints nothing but warnings and errors, as plain text on stderr."""

    def start_phase(self, name: str, total: int) -> None:
        pass

    def advance_phase(self, amount: int = 1) -> None:
        pass

    def end_phase(self) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def debug(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        print(f"WARNING: {message}", file=sys.stderr)

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=sys.stderr)

    def report_child(self, report: OrganizeReport) -> None:
        for error in report.errors:
            self.error(f"{report.child_name}: {error}")

    def print_header(self, title: str) -> None:
        pass

    def print_config(self, config_items: dict) -> None:
        pass

    def print_reports(self, reports: list[OrganizeReport]) -> None:
        pass

    def print_stats(self, stats: RunStats) -> None:
        pass
