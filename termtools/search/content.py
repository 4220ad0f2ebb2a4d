"""Live content search backed by ripgrep, with a grep fallback.

Each qualifying query spawns one external search and parses its
``path:line:content`` output. Lines that do not have that shape are dropped.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..config import DEFAULT_PROCESS_TIMEOUT_SECONDS, DEFAULT_SEARCH_MAX_COUNT, MIN_LIVE_QUERY_LENGTH
from ..entry import Entry
from ..process import STATUS_SPAWN_ERROR, STATUS_TIMEOUT, CommandResult, run_command
from .static import FilterOutcome

logger = logging.getLogger(__name__)

PRIMARY_BACKEND = "rg"
FALLBACK_BACKEND = "grep"
IDLE_MESSAGE = "Type to search with ripgrep..."
SHORT_QUERY_MESSAGE = f"Type at least {MIN_LIVE_QUERY_LENGTH} characters to search..."

Runner = Callable[..., CommandResult]


@dataclass(frozen=True)
class ContentMatch:
    path: Path
    line: int  # 1-based
    content: str
    matched_text: str


@dataclass(frozen=True)
class SearchOutcome:
    matches: list[ContentMatch]
    backend: str
    error: str | None = None
    skipped_lines: int = 0
    truncated: bool = False
    timed_out: bool = False


def extract_match(content: str, query: str) -> str:
    """Return the first case-insensitive occurrence of ``query`` in ``content``.

    Falls back to the query itself when the backend matched by regex and the
    literal text does not occur.
    """
    start = content.lower().find(query.lower())
    if start >= 0:
        end = start + len(query)
        if end <= len(content):
            return content[start:end]
    return query


def parse_search_line(line: str, query: str = "") -> ContentMatch | None:
    """Parse one ``path:line_number:content`` output line, or ``None`` if malformed."""
    parts = line.split(":", 2)
    if len(parts) < 3 or not parts[0]:
        return None
    try:
        line_number = int(parts[1])
    except ValueError:
        return None
    if line_number <= 0:
        return None
    content = parts[2]
    return ContentMatch(
        path=Path(parts[0]),
        line=line_number,
        content=content,
        matched_text=extract_match(content, query) if query else "",
    )


def build_rg_args(
    query: str,
    root: Path,
    file_type: str | None = None,
    ignore_case: bool = False,
    max_count: int | None = DEFAULT_SEARCH_MAX_COUNT,
) -> list[str]:
    args = [
        "--line-number",
        "--with-filename",
        "--no-heading",
        "--color=never",
    ]
    if max_count is not None:
        args.append(f"--max-count={max(1, max_count)}")
    if ignore_case:
        args.append("--ignore-case")
    if file_type:
        args.extend(["--type", file_type])
    args.extend(["--regexp", query, str(root)])
    return args


def build_grep_args(
    query: str,
    root: Path,
    ignore_case: bool = False,
    max_count: int | None = DEFAULT_SEARCH_MAX_COUNT,
) -> list[str]:
    args = ["-rnH"]
    if ignore_case:
        args.append("-i")
    if max_count is not None:
        args.append(f"--max-count={max(1, max_count)}")
    args.extend(["-e", query, str(root)])
    return args


def _parse_output(stdout: str, query: str, max_results: int | None) -> tuple[list[ContentMatch], int, bool]:
    matches: list[ContentMatch] = []
    skipped = 0
    truncated = False
    for raw in stdout.splitlines():
        if not raw:
            continue
        match = parse_search_line(raw, query)
        if match is None:
            skipped += 1
            continue
        if max_results is not None and len(matches) >= max_results:
            truncated = True
            break
        matches.append(match)
    if skipped:
        logger.debug("dropped %d unparseable search lines", skipped)
    return matches, skipped, truncated


def search_content(
    query: str,
    root: Path,
    *,
    file_type: str | None = None,
    ignore_case: bool = False,
    max_count: int = DEFAULT_SEARCH_MAX_COUNT,
    timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS,
    runner: Runner = run_command,
    which: Callable[[str], str | None] = shutil.which,
) -> SearchOutcome:
    """Run one content search and parse its hits.

    ripgrep is preferred; grep is used when ``rg`` is not on ``PATH`` or cannot
    be spawned. Exit status 1 means "no matches" for both backends. The file
    type filter only applies to ripgrep.
    """
    result: CommandResult | None = None
    backend = PRIMARY_BACKEND
    if which(PRIMARY_BACKEND) is not None:
        result = runner(
            PRIMARY_BACKEND,
            build_rg_args(query, root, file_type, ignore_case, max_count),
            timeout=timeout,
        )
        if result.status == STATUS_SPAWN_ERROR:
            result = None
    if result is None:
        backend = FALLBACK_BACKEND
        result = runner(
            FALLBACK_BACKEND,
            build_grep_args(query, root, ignore_case, max_count),
            timeout=timeout,
        )

    matches, skipped, truncated = _parse_output(result.stdout, query, max_count)
    if result.status == STATUS_TIMEOUT:
        # Whatever was printed before the kill is kept, flagged as partial.
        return SearchOutcome(
            matches=matches,
            backend=backend,
            error=result.error,
            skipped_lines=skipped,
            truncated=truncated,
            timed_out=True,
        )
    if result.exit_code not in (0, 1) and not matches:
        return SearchOutcome(matches=[], backend=backend, error=result.error, skipped_lines=skipped)
    return SearchOutcome(matches=matches, backend=backend, skipped_lines=skipped, truncated=truncated)


def match_entry(match: ContentMatch) -> Entry[ContentMatch]:
    label = f"{match.path.name}:{match.line} {match.content.strip()}"
    return Entry(
        label=label,
        payload=match,
        search_fields=(str(match.path), match.content),
        key=(match.path, match.line),
    )


class LiveContentSearch:
    """Filter policy that re-runs an external search for every query change.

    Queries shorter than ``MIN_LIVE_QUERY_LENGTH`` clear the results without
    spawning anything.
    """

    live = True

    def __init__(
        self,
        root: Path,
        *,
        file_type: str | None = None,
        ignore_case: bool = False,
        max_count: int = DEFAULT_SEARCH_MAX_COUNT,
        timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS,
        runner: Runner = run_command,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self.root = root
        self.file_type = file_type
        self.ignore_case = ignore_case
        self.max_count = max_count
        self.timeout = timeout
        self._runner = runner
        self._which = which
        self.last_outcome: SearchOutcome | None = None

    def apply(self, query: str) -> FilterOutcome:
        if not query:
            self.last_outcome = None
            return FilterOutcome(entries=[], message=IDLE_MESSAGE)
        if len(query) < MIN_LIVE_QUERY_LENGTH:
            self.last_outcome = None
            return FilterOutcome(entries=[], message=SHORT_QUERY_MESSAGE)

        outcome = search_content(
            query,
            self.root,
            file_type=self.file_type,
            ignore_case=self.ignore_case,
            max_count=self.max_count,
            timeout=self.timeout,
            runner=self._runner,
            which=self._which,
        )
        self.last_outcome = outcome
        entries = [match_entry(match) for match in outcome.matches]
        if outcome.timed_out:
            message = f"Search timed out ({len(entries)} partial matches)"
        elif outcome.error is not None:
            message = f"Search error: {outcome.error}"
        else:
            message = f"Found {len(entries)} matches for '{query}'"
            if outcome.backend == FALLBACK_BACKEND:
                message += " using grep fallback"
            if outcome.truncated:
                message += " (truncated)"
        return FilterOutcome(entries=entries, message=message, spawned=True, truncated=outcome.truncated)
