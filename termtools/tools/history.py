"""Shell history browser; Enter prints the chosen command."""

from __future__ import annotations

import os
from pathlib import Path

from ..config import DEFAULT_PROCESS_TIMEOUT_SECONDS
from ..entry import Entry
from ..preview.model import Preview, text_preview
from ..process import run_command
from ..session.state import ActionResult, Suspend, Tool

DEFAULT_HISTORY_LIMIT = 100
HISTORY_FILES = (".bash_history", ".zsh_history")
HELP_PREVIEW_LINES = 20


def parse_history_line(line: str) -> str:
    """Strip the zsh extended-history prefix ``: <start>:<elapsed>;`` if present."""
    if line.startswith(": "):
        head, sep, command = line.partition(";")
        if sep and head[2:].split(":", 1)[0].strip().isdigit():
            return command
    return line


def recent_commands(lines: list[str], limit: int) -> list[str]:
    """The last ``limit`` lines newest first, blanks dropped, duplicates keep their newest use."""
    window = lines[-limit:] if limit > 0 else []
    seen: set[str] = set()
    commands = []
    for raw in reversed(window):
        command = parse_history_line(raw).strip()
        if not command or command in seen:
            continue
        seen.add(command)
        commands.append(command)
    return commands


def read_history(home: Path, limit: int) -> list[str]:
    for name in HISTORY_FILES:
        path = home / name
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        return recent_commands(content.splitlines(), limit)
    return []


class HistoryTool(Tool):
    name = "hist"
    title = "Command History"
    filterable = False
    help_text = "j/k Navigate • Enter Select • q Quit"

    def __init__(
        self,
        limit: int = DEFAULT_HISTORY_LIMIT,
        *,
        home: Path | None = None,
        timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS,
        runner=run_command,
    ) -> None:
        self.limit = limit
        self.home = home if home is not None else Path(os.path.expanduser("~"))
        self.timeout = timeout
        self.runner = runner

    def load_entries(self) -> list[Entry[str]]:
        return [Entry(label=command, payload=command) for command in read_history(self.home, self.limit)]

    def load_message(self, entries: list[Entry]) -> str:
        return f"Loaded {len(entries)} commands"

    def command_help(self, command: str) -> str:
        manual = self.runner("man", ["-f", command], timeout=self.timeout)
        if manual.ok and manual.stdout.strip():
            return f"Manual page for '{command}':\n\n{manual.stdout}"
        usage = self.runner(command, ["--help"], timeout=self.timeout)
        if usage.ok:
            lines = usage.stdout.splitlines()[:HELP_PREVIEW_LINES]
            return f"Help for '{command}':\n\n" + "\n".join(lines)
        return f"No help available for command: {command}"

    def preview(self, entry: Entry[str]) -> Preview:
        words = entry.payload.split()
        if not words:
            return text_preview("No command selected")
        return text_preview(self.command_help(words[0]))

    def activate(self, entry: Entry[str], suspend: Suspend) -> ActionResult:
        return ActionResult(quit=True, output=entry.payload)
