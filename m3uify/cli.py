"""CLI: organize a root directory of per-game folders."""
from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import Optional

from .core.config import OrganizerConfig
from .core.errors import InvalidArgumentError, RootNotFoundError
from .core.models import RunStats
from .logging.rich_logger import (
    QuietProgressReporter,
    RichProgressReporter,
    configure_logging,
)
from .services.walker import DirectoryWalker


EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="m3uify",
        description=(
            "Move disc images (.chd/.cue/.bin) of every game folder into a "
            "hidden subfolder and write a .m3u playlist next to it."
        ),
    )
    parser.add_argument(
        "root",
        type=Path,
        help="Directory whose subfolders each hold one game",
    )
    parser.add_argument(
        "-w", "-j", "--workers",
        dest="workers",
        type=int,
        default=1,
        help="Number of folders to organize in parallel (default: 1)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without moving or writing anything",
    )
    parser.add_argument(
        "--sort",
        action="store_true",
        help="Process entries by name instead of filesystem order",
    )
    parser.add_argument(
        "--playlist-separator",
        choices=["/", "\\"],
        default=None,
        help=f"Separator used inside playlists (default: {os.sep!r})",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Treat symlinked folders in the root as game folders",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    return parser


def build_config(args: argparse.Namespace) -> OrganizerConfig:
    """Build an OrganizerConfig from parsed arguments."""
    return OrganizerConfig(
        playlist_separator=args.playlist_separator,
        workers=args.workers,
        dry_run=args.dry_run,
        sort_entries=args.sort,
        follow_symlinks=args.follow_symlinks,
    )


def run(args: argparse.Namespace, reporter) -> int:
    """Organize the root directory and print the outcome."""
    config = build_config(args)
    root = args.root.expanduser()

    reporter.print_header("m3uify")
    reporter.print_config({
        "Root": str(root),
        "Workers": config.workers,
        "Playlist Separator": config.resolved_playlist_separator,
        "Dry Run": config.dry_run,
    })

    walker = DirectoryWalker(config=config, reporter=reporter)

    start = time.monotonic()
    reports = walker.run(root)

    stats = RunStats.from_reports(reports)
    stats.elapsed_seconds = time.monotonic() - start

    reporter.print_reports([r for r in reports if not r.skipped])
    reporter.print_stats(stats)

    if not reports:
        reporter.info(f"No folders found in {root}")

    return EXIT_FAILURES if stats.has_failures else EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.quiet:
        reporter = QuietProgressReporter()
        configure_logging(verbose=False)
    else:
        reporter = RichProgressReporter(verbose=args.verbose)
        configure_logging(verbose=args.verbose, console=reporter.console)

    try:
        return run(args, reporter)
    except RootNotFoundError as e:
        reporter.error(str(e))
        return EXIT_USAGE
    except InvalidArgumentError as e:
        reporter.error(f"Invalid argument: {e}")
        return EXIT_USAGE
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        return EXIT_INTERRUPTED
    except Exception as e:
        reporter.error(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
