"""Main entry point for sweeper."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .cleaner import Cleaner
from .config import SweeperConfig
from .errors import SweeperError
from .organizer import FileOrganizer
from .planner import ArchivePlan, build_archive_plan
from .resolver import OLDEST_MTIME
from .scanner import ScanReport, StaleScanner

LOGGER_NAME = "sweeper"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse. Uses ``sys.argv`` if None.

    Returns:
        Parsed arguments.

    """
    parser = argparse.ArgumentParser(
        prog="sweeper",
        description="Organize files and clean stale projects safely",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    organize_parser = subparsers.add_parser("organize", help="Organize files in a folder by type")
    organize_parser.add_argument("path", type=Path)
    organize_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show planned moves without applying them",
    )

    scan_parser = subparsers.add_parser("scan", help="Scan for stale project folders")
    scan_parser.add_argument("path", type=Path)
    scan_parser.add_argument(
        "--older-than",
        type=int,
        default=None,
        metavar="DAYS",
        help="Staleness threshold in days (default: 30)",
    )

    archive_parser = subparsers.add_parser(
        "archive",
        help="Archive stale project folders into YYYY-MM buckets",
    )
    archive_parser.add_argument("path", type=Path)
    archive_parser.add_argument(
        "--dest",
        type=Path,
        default=None,
        help="Archive root (default: archive.destination from config)",
    )
    archive_parser.add_argument("--older-than", type=int, default=None, metavar="DAYS")
    archive_parser.add_argument("--yes", action="store_true", help="Apply the plan")

    delete_parser = subparsers.add_parser(
        "delete",
        help="Send stale project folders to the system trash",
    )
    delete_parser.add_argument("path", type=Path)
    delete_parser.add_argument(
        "--older-than",
        type=int,
        default=None,
        metavar="DAYS",
        help="Staleness threshold in days (default: 90)",
    )
    delete_parser.add_argument("--yes", action="store_true", help="Move to trash")

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser.parse_args(argv)


def setup_logging(config: SweeperConfig) -> logging.Logger:
    """Set up the ``sweeper`` logger.

    Returns:
        Configured logger instance.

    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level_value)

    # Clear existing handlers to avoid duplicates when called again
    if logger.handlers:
        logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
    )
    console_handler.setLevel(config.log_level_value)
    logger.addHandler(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def fmt_time(when: datetime) -> str:
    """Format a timestamp in local time for display."""
    if when == OLDEST_MTIME:
        return "unknown"
    return when.astimezone().strftime("%Y-%m-%d %H:%M")


def print_report(console: Console, report: ScanReport) -> None:
    """Print a scan report."""
    console.print(f"Root: {escape(str(report.root))}")
    console.print(f"Scanned project folders: {report.scanned_count}")
    console.print(f"Stale threshold: {report.older_than_days} days")

    if not report.stale:
        console.print("[green]No stale folders found[/green]")
        return

    table = Table(title="Stale folders (oldest first)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Folder", style="cyan")
    table.add_column("Last modified", style="yellow")

    for idx, item in enumerate(report.stale, 1):
        table.add_row(str(idx), escape(str(item.path)), fmt_time(item.last_modified))

    console.print(table)


def print_plan(console: Console, plan: ArchivePlan) -> None:
    """Print an archive plan."""
    console.print(f"Archive destination: {escape(str(plan.dest_root))}")
    console.print(f"Month bucket: {plan.month_bucket}")
    console.print(f"Planned moves: {len(plan.moves)}")

    if not plan.moves:
        return

    table = Table()
    table.add_column("#", justify="right", style="dim")
    table.add_column("From", style="cyan")
    table.add_column("To", style="green")

    for idx, move in enumerate(plan.moves, 1):
        table.add_row(str(idx), escape(str(move.source)), escape(str(move.destination)))

    console.print(table)


def cmd_organize(config: SweeperConfig, args: argparse.Namespace) -> int:
    """Execute organize command.

    Args:
        config: Sweeper configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()
    organizer = FileOrganizer(config, logging.getLogger(LOGGER_NAME))

    moves = organizer.organize(args.path, dry_run=args.dry_run)

    if not moves:
        console.print("[green]Nothing to organize[/green]")
        return 0

    table = Table(title=f"{len(moves)} files")
    table.add_column("File", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Destination", style="green")

    for move in moves:
        table.add_row(escape(move.source.name), move.category, escape(str(move.destination)))

    console.print(table)

    if args.dry_run:
        console.print("[yellow]Dry-run only. Use without --dry-run to apply.[/yellow]")
    return 0


def cmd_scan(config: SweeperConfig, args: argparse.Namespace) -> int:
    """Execute scan command."""
    console = Console()
    report = StaleScanner(config).scan(args.path, args.older_than)
    print_report(console, report)
    return 0


def cmd_archive(config: SweeperConfig, args: argparse.Namespace) -> int:
    """Execute archive command.

    Args:
        config: Sweeper configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    dest = args.dest or config.archive_dest
    if dest is None:
        console.print("[red]No archive destination: use --dest or set archive.destination[/red]")
        return 1

    older_than = args.older_than if args.older_than is not None else config.archive_older_than_days
    report = StaleScanner(config).scan(args.path, older_than)
    plan = build_archive_plan(report, dest)
    print_plan(console, plan)

    if not args.yes:
        console.print("[yellow]Dry-run only. Use --yes to apply.[/yellow]")
        return 0

    cleaner = Cleaner(config, logging.getLogger(LOGGER_NAME))
    results = cleaner.apply_plan(plan)
    console.print(f"[green]Archived successfully ({len(results)} folders)[/green]")
    return 0


def cmd_delete(config: SweeperConfig, args: argparse.Namespace) -> int:
    """Execute delete command.

    Args:
        config: Sweeper configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    older_than = args.older_than if args.older_than is not None else config.delete_older_than_days
    report = StaleScanner(config).scan(args.path, older_than)

    if not report.stale:
        console.print("[green]Nothing to delete[/green]")
        return 0

    print_report(console, report)

    if not args.yes:
        console.print("[yellow]Dry-run only. Use --yes to move to trash.[/yellow]")
        return 0

    cleaner = Cleaner(config, logging.getLogger(LOGGER_NAME))
    results = cleaner.send_to_trash(report.stale)
    console.print(f"[green]Moved {len(results)} folders to trash[/green]")
    return 0


def cmd_config(config: SweeperConfig, args: argparse.Namespace) -> int:
    """Execute config command.

    Args:
        config: Sweeper configuration.
        args: Parsed arguments.

    Returns:
        Exit code.

    """
    console = Console()

    if args.init:
        config_path = args.config or SweeperConfig.get_config_path()
        if config_path.exists():
            console.print(f"[yellow]Config already exists: {escape(str(config_path))}[/yellow]")
            return 1
        config.save(config_path)
        console.print(f"[green]Created config: {escape(str(config_path))}[/green]")
        return 0

    if args.show:
        table = Table(title="Current Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Scan threshold", f"{config.scan_older_than_days} days")
        table.add_row("Max depth", str(config.max_depth))
        table.add_row("Archive destination", str(config.archive_dest or "-"))
        table.add_row("Archive threshold", f"{config.archive_older_than_days} days")
        table.add_row("Delete threshold", f"{config.delete_older_than_days} days")
        table.add_row(
            "Extra categories",
            "\n".join(f"{ext} -> {label}" for ext, label in config.categories.items()) or "-",
        )
        table.add_row("Log file", str(config.log_file or "-"))
        table.add_row("Log level", config.log_level)

        console.print(table)
        return 0

    console.print("[yellow]Use --init or --show[/yellow]")
    return 1


COMMANDS = {
    "organize": cmd_organize,
    "scan": cmd_scan,
    "archive": cmd_archive,
    "delete": cmd_delete,
    "config": cmd_config,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code.

    """
    args = parse_args(argv)
    console = Console(stderr=True)

    try:
        config = SweeperConfig.load(args.config)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return 1

    if args.command is None:
        console.print("[yellow]No command given, see --help[/yellow]")
        return 1

    try:
        setup_logging(config)
    except OSError as e:
        console.print(f"[red]Cannot open log file {escape(str(config.log_file))}: {escape(str(e))}[/red]")
        return 1

    try:
        return COMMANDS[args.command](config, args)
    except SweeperError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
