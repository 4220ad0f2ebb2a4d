"""Recently used files, from the shared MRU list or recent modification times."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from ..entry import Entry
from .common import PathTool, display_path

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 10
MRU_RELATIVE_PATH = Path(".cache") / "fzf-mru.txt"
RECENT_WINDOW_SECONDS = 7 * 24 * 60 * 60


def read_mru(mru_file: Path, limit: int) -> list[Path] | None:
    """Newest ``limit`` existing paths from an oldest-first MRU file, or ``None`` if unreadable."""
    try:
        content = mru_file.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    paths: list[Path] = []
    for line in reversed(content.splitlines()):
        if len(paths) >= limit:
            break
        stripped = line.strip()
        if not stripped:
            continue
        path = Path(stripped)
        if path.exists():
            paths.append(path)
    return paths


def recently_modified(root: Path, limit: int, now: float | None = None) -> list[Path]:
    """Non-hidden files under ``root`` modified within the last week, newest first."""
    cutoff = (time.time() if now is None else now) - RECENT_WINDOW_SECONDS
    found: list[tuple[float, Path]] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if not name.startswith(".")]
        for name in filenames:
            if name.startswith("."):
                continue
            path = Path(dirpath) / name
            try:
                mtime = path.stat().st_mtime
            except OSError:
                continue
            if mtime >= cutoff and path.is_file():
                found.append((mtime, path))
    found.sort(key=lambda item: item[0], reverse=True)
    return [path for _, path in found[:limit]]


class RecentTool(PathTool):
    name = "recent"
    title = "Recent Files"
    filterable = False
    help_text = "j/k Navigate • Enter Open • q Quit"

    def __init__(
        self,
        limit: int = DEFAULT_RECENT_LIMIT,
        *,
        home: Path | None = None,
        cwd: Path | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.limit = limit
        self.home = home if home is not None else Path(os.path.expanduser("~"))
        self.cwd = cwd

    def recent_paths(self) -> list[Path]:
        paths = read_mru(self.home / MRU_RELATIVE_PATH, self.limit)
        if paths is not None:
            return paths
        for root in (self.cwd or Path.cwd(), self.home):
            if root.is_dir():
                logger.debug("no MRU list, scanning %s for recent files", root)
                return recently_modified(root, self.limit)
        return []

    def load_entries(self) -> list[Entry[Path]]:
        return [
            Entry(label=f"{path.name}  {display_path(path.parent, self.cwd)}", payload=path, key=str(path))
            for path in self.recent_paths()
        ]

    def load_message(self, entries: list[Entry]) -> str:
        return f"Found {len(entries)} recent files"
