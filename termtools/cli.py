"""Command-line front door for termtools.

Parses the tool subcommand and its options, configures logging and settings,
then runs the interactive session and prints whatever the tool chose.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from .config import load_settings, save_preview_style
from .logs import configure_logging
from .tools import build_tool, git_status_report

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termtools",
        description="Interactive terminal browsers for files, content, processes, git, and more.",
    )
    parser.add_argument("--style", default=None, help="Pygments style for previews (saved for later runs).")
    parser.add_argument("--no-color", action="store_true", help="Disable syntax colouring in previews.")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level.")
    parser.add_argument("--log-file", default=None, help="Write log records to this file.")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    find = sub.add_parser("find", help="Fuzzy file finder with live preview")
    find.add_argument("-p", "--path", type=Path, default=Path("."), help="Starting directory to search")
    find.add_argument("-e", "--extensions", help="File extensions to filter (comma-separated)")
    find.add_argument("-s", "--search", help="Initial search term")

    search = sub.add_parser("search", help="Content search with ripgrep")
    search.add_argument("pattern", nargs="?", default=None, help="Search pattern (optional for live search)")
    search.add_argument("-p", "--path", type=Path, default=Path("."), help="Directory to search in")
    search.add_argument("-t", "--file-type", help="File type filter for ripgrep (e.g. py, rust)")
    search.add_argument("-i", "--ignore-case", action="store_true", help="Case insensitive search")

    kill = sub.add_parser("kill", help="Process manager and killer")
    kill.add_argument("-f", "--filter", help="Filter processes by name")

    git = sub.add_parser("git", help="Git operations and history browser")
    git.add_argument("subcommand", choices=("log", "branch", "status", "diff"))

    hist = sub.add_parser("hist", help="Command history browser")
    hist.add_argument("-l", "--limit", type=_positive_int, default=100, help="Number of recent commands to show")

    dir_parser = sub.add_parser("dir", help="Interactive file/directory explorer")
    dir_parser.add_argument("-p", "--path", type=Path, default=Path("."), help="Starting directory")

    env = sub.add_parser("env", help="Environment variable viewer")
    env.add_argument("-f", "--filter", help="Filter environment variables")

    recent = sub.add_parser("recent", help="Recent files browser")
    recent.add_argument("-l", "--limit", type=_positive_int, default=10, help="Number of recent files to show")

    man = sub.add_parser("man", help="Man page browser")
    man.add_argument("-s", "--search", help="Initial search term")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments and run the chosen tool.

    Output chosen inside the session (a path, a command, ``NAME=value``) is
    written to stdout after the terminal has been restored.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(log_file=args.log_file or settings.log_file, debug=args.debug)
    if args.style:
        save_preview_style(args.style)
        settings = replace(settings, preview_style=args.style)
    if args.no_color:
        settings = replace(settings, no_color=True)

    command = args.command
    initial_query = ""
    options: dict[str, object] = {}
    if command == "git":
        if args.subcommand == "status":
            print(git_status_report(timeout=settings.process_timeout))
            return
        command = f"git-{args.subcommand}"
    elif command in {"find", "dir"}:
        path = args.path
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")
        options["path"] = path
        if command == "find":
            options["extensions"] = args.extensions
            initial_query = args.search or ""
    elif command == "search":
        if not args.path.exists():
            raise SystemExit(f"Path not found: {args.path}")
        options.update(path=args.path, file_type=args.file_type, ignore_case=args.ignore_case)
        initial_query = args.pattern or ""
    elif command in {"kill", "env"}:
        initial_query = args.filter or ""
    elif command == "man":
        initial_query = args.search or ""
    elif command in {"hist", "recent"}:
        options["limit"] = args.limit

    if not _interactive():
        raise SystemExit("termtools needs an interactive terminal.")

    # Imported here so non-interactive paths never touch termios.
    from .session.loop import run_session

    tool = build_tool(command, settings, **options)
    logger.info("running %s", command)
    session = run_session(tool, settings, initial_query=initial_query)
    if session.output:
        print(session.output)


if __name__ == "__main__":
    main()
