"""Manual page browser built on ``apropos``."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import DEFAULT_PROCESS_TIMEOUT_SECONDS
from ..editor import run_foreground
from ..entry import Entry
from ..preview.model import Preview, text_preview
from ..process import run_command
from ..session.state import ActionResult, Suspend, Tool

MAN_PREVIEW_LINES = 50
MAN_ENV = {"MANPAGER": "cat", "MANWIDTH": "80"}

COMMON_PAGES = (
    ("ls", "1", "list directory contents"),
    ("cd", "1", "change directory"),
    ("cp", "1", "copy files"),
    ("mv", "1", "move files"),
    ("rm", "1", "remove files"),
    ("cat", "1", "concatenate files"),
    ("grep", "1", "search text patterns"),
    ("find", "1", "search for files"),
    ("ps", "1", "show running processes"),
    ("top", "1", "display running processes"),
    ("kill", "1", "terminate processes"),
    ("man", "1", "display manual pages"),
    ("vim", "1", "text editor"),
    ("nano", "1", "text editor"),
    ("git", "1", "version control system"),
    ("ssh", "1", "secure shell"),
    ("wget", "1", "download files"),
    ("curl", "1", "transfer data"),
    ("tar", "1", "archive files"),
    ("chmod", "1", "change file permissions"),
    ("chown", "1", "change file ownership"),
)


@dataclass(frozen=True)
class ManPage:
    name: str
    section: str
    description: str


def parse_apropos_line(line: str) -> ManPage | None:
    """Parse ``name (section) - description``."""
    command_section, sep, description = line.partition(" - ")
    if not sep:
        return None
    paren_start = command_section.find(" (")
    paren_end = command_section.find(")")
    if paren_start < 0 or paren_end < paren_start:
        return None
    name = command_section[:paren_start].strip()
    section = command_section[paren_start + 2:paren_end]
    if not name:
        return None
    return ManPage(name=name, section=section, description=description)


def man_entry(page: ManPage) -> Entry[ManPage]:
    return Entry(
        label=f"{page.name}({page.section}) - {page.description}",
        payload=page,
        search_fields=(page.name, page.description),
        key=(page.name, page.section),
    )


class ManTool(Tool):
    name = "man"
    title = "Manual Pages"

    def __init__(self, *, timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS, runner=run_command, foreground=run_foreground) -> None:
        self.timeout = timeout
        self.runner = runner
        self.foreground = foreground

    def load_entries(self) -> list[Entry[ManPage]]:
        result = self.runner("apropos", ["."], timeout=self.timeout)
        pages: list[ManPage] = []
        if result.ok:
            for line in result.stdout.splitlines():
                page = parse_apropos_line(line)
                if page is not None:
                    pages.append(page)
        else:
            pages = [ManPage(*row) for row in COMMON_PAGES]
        pages.sort(key=lambda page: page.name)
        return [man_entry(page) for page in pages]

    def load_message(self, entries: list[Entry]) -> str:
        return f"Loaded {len(entries)} man pages"

    def preview(self, entry: Entry[ManPage]) -> Preview:
        page = entry.payload
        result = self.runner("man", [page.section, page.name], timeout=self.timeout, env=MAN_ENV)
        if result.ok:
            return text_preview(result.stdout, max_lines=MAN_PREVIEW_LINES)
        whatis = self.runner("whatis", [page.name], timeout=self.timeout)
        if whatis.ok:
            return text_preview(
                f"Manual page for: {page.name}\n\n{whatis.stdout.strip()}\n\n"
                f"Use 'man {page.name}' to view the full manual page."
            )
        return text_preview(
            f"Manual page for: {page.name}\nSection: {page.section}\n\n"
            f"No preview available.\nUse 'man {page.name}' to view the manual page."
        )

    def activate(self, entry: Entry[ManPage], suspend: Suspend) -> ActionResult:
        page = entry.payload
        error = self.foreground(["man", page.section, page.name], suspend)
        if error is not None:
            return ActionResult(message=f"Failed to open man page for {page.name}")
        return ActionResult(quit=True)
