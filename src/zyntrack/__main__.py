"""CLI entry point for zyntrack."""

import argparse
import os
from pathlib import Path

from .config import Settings
from .logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="zyntrack",
        description="Local-first log tracker with optional GitHub sync",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for local storage (default: .zyntrack)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="Record a log entry")
    add.add_argument("timestamp", nargs="?", help="ISO-8601 time (default: now)")

    commands.add_parser("list", help="List logs, newest first")

    update = commands.add_parser("update", help="Change the time of a log entry")
    update.add_argument("id", type=int)
    update.add_argument("timestamp", help="ISO-8601 time")

    remove = commands.add_parser("remove", help="Delete a log entry")
    remove.add_argument("id", type=int)

    stats = commands.add_parser("stats", help="Show daily, weekly and monthly counts")
    stats.add_argument(
        "--window",
        default="30",
        help="Days covered by the daily counts, 1-365 (default: 30)",
    )

    export = commands.add_parser("export", help="Export logs as CSV")
    export.add_argument("-o", "--output", type=Path, default=None, help="File to write")

    sync = commands.add_parser("sync", help="Manage GitHub sync")
    sync_commands = sync.add_subparsers(dest="sync_command", required=True)

    configure = sync_commands.add_parser("configure", help="Sync with a GitHub repository")
    configure.add_argument("--owner", required=True)
    configure.add_argument("--repo", required=True)
    configure.add_argument("--branch", default=None, help="Branch (default: main)")
    configure.add_argument("--path", default=None, help="Document path (default: data/logs.json)")
    configure.add_argument(
        "--token",
        default=None,
        help="GitHub token (default: GITHUB_TOKEN environment variable)",
    )

    sync_commands.add_parser("clear", help="Disable sync and use local storage only")
    sync_commands.add_parser("reload", help="Reload logs from GitHub")
    sync_commands.add_parser("status", help="Show sync status")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    settings_kwargs: dict = {}
    if args.data_dir:
        settings_kwargs["data_dir"] = args.data_dir
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)

    setup_logging(settings.verbose, settings.log_file)

    # Import here to keep --help fast
    from .cli import logs, sync

    if args.command == "add":
        exit_code = logs.run_add(settings, args.timestamp)
    elif args.command == "list":
        exit_code = logs.run_list(settings)
    elif args.command == "update":
        exit_code = logs.run_update(settings, args.id, args.timestamp)
    elif args.command == "remove":
        exit_code = logs.run_remove(settings, args.id)
    elif args.command == "stats":
        exit_code = logs.run_stats(settings, args.window)
    elif args.command == "export":
        exit_code = logs.run_export(settings, args.output)
    elif args.sync_command == "configure":
        token = args.token if args.token is not None else os.environ.get("GITHUB_TOKEN", "")
        exit_code = sync.run_sync_configure(
            settings, args.owner, args.repo, args.branch, args.path, token
        )
    elif args.sync_command == "clear":
        exit_code = sync.run_sync_clear(settings)
    elif args.sync_command == "reload":
        exit_code = sync.run_sync_reload(settings)
    else:
        exit_code = sync.run_sync_status(settings)

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
