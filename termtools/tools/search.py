"""Live content search: results come from ripgrep (or grep) as the query changes."""

from __future__ import annotations

import itertools
from pathlib import Path

from ..config import DEFAULT_PROCESS_TIMEOUT_SECONDS, DEFAULT_SEARCH_MAX_COUNT
from ..entry import Entry
from ..preview.model import ErrorPreview, Preview, text_preview
from ..search.content import ContentMatch, LiveContentSearch
from ..session.state import ActionResult, Suspend
from .common import PathTool

CONTEXT_LINES = 5
HIT_MARKER = ">>>"


def context_lines(lines: list[str], line: int, context: int = CONTEXT_LINES, first_line: int = 1) -> list[str]:
    """Lines around 1-based ``line`` with line numbers; the hit is marked.

    ``lines[0]`` is file line ``first_line``.
    """
    if not lines:
        return []
    hit = max(0, min(line - first_line, len(lines) - 1))
    start = max(0, hit - context)
    end = min(len(lines), hit + context + 1)
    out = []
    for idx in range(start, end):
        marker = HIT_MARKER if idx == hit else " " * len(HIT_MARKER)
        out.append(f"{marker} {idx + first_line:4}: {lines[idx]}")
    return out


def read_line_window(path: Path, first: int, last: int) -> list[str]:
    """Lines ``first``..``last`` (1-based, inclusive), streamed without reading past ``last``."""
    with path.open(encoding="utf-8", errors="replace", newline="\n") as handle:
        return [text.rstrip("\r\n") for text in itertools.islice(handle, first - 1, last)]


def build_context_preview(path: Path, line: int) -> Preview:
    first = max(1, line - CONTEXT_LINES)
    try:
        window = read_line_window(path, first, line + CONTEXT_LINES)
    except OSError:
        return ErrorPreview(f"Could not read file: {path}")
    return text_preview("\n".join(context_lines(window, line, first_line=first)))


class SearchTool(PathTool):
    name = "search"
    title = "Search"
    help_text = "Type to search • ↑/↓ Navigate • Enter Open • Esc Quit"

    def __init__(
        self,
        root: Path = Path("."),
        *,
        file_type: str | None = None,
        ignore_case: bool = False,
        max_count: int = DEFAULT_SEARCH_MAX_COUNT,
        timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS,
        runner=None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.root = root
        self.file_type = file_type
        self.ignore_case = ignore_case
        self.max_count = max_count
        self.timeout = timeout
        self.runner = runner

    def make_filter(self) -> LiveContentSearch:
        options = {}
        if self.runner is not None:
            options["runner"] = self.runner
        return LiveContentSearch(
            self.root,
            file_type=self.file_type,
            ignore_case=self.ignore_case,
            max_count=self.max_count,
            timeout=self.timeout,
            which=self.which,
            **options,
        )

    def load_message(self, entries: list[Entry]) -> None:
        return None

    def match_text(self, entry: Entry[ContentMatch]) -> str:
        return entry.payload.matched_text

    def preview(self, entry: Entry[ContentMatch]) -> Preview:
        return build_context_preview(entry.payload.path, entry.payload.line)

    def activate(self, entry: Entry[ContentMatch], suspend: Suspend) -> ActionResult:
        return self.open_path(entry.payload.path, suspend, entry.payload.line)
