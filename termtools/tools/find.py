"""File finder: every file under a root, filtered by path substring."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..entry import Entry
from .common import PathTool, display_path

logger = logging.getLogger(__name__)

SKIPPED_DIRS = frozenset({".git", "node_modules", "target", ".vscode"})


def parse_extensions(raw: str | None) -> frozenset[str] | None:
    """``"rs, TOML"`` -> ``{"rs", "toml"}``; ``None`` or blank means no filter."""
    if not raw:
        return None
    exts = frozenset(part.strip().lstrip(".").lower() for part in raw.split(",") if part.strip())
    return exts or None


def matches_extension(path: Path, extensions: frozenset[str] | None) -> bool:
    if extensions is None:
        return True
    suffix = path.suffix
    if len(suffix) <= 1:
        return False
    return suffix[1:].lower() in extensions


def walk_files(root: Path, extensions: frozenset[str] | None = None) -> list[Path]:
    """Files under ``root``, following links, skipping VCS and build directories.

    Symlinked directories that resolve to an already visited directory are not
    entered twice.
    """
    files: list[Path] = []
    seen: set[tuple[int, int]] = set()

    def on_error(exc: OSError) -> None:
        logger.debug("skipping unreadable directory: %s", exc)

    for dirpath, dirnames, filenames in os.walk(root, followlinks=True, onerror=on_error):
        try:
            st = os.stat(dirpath)
        except OSError:
            dirnames[:] = []
            continue
        marker = (st.st_dev, st.st_ino)
        if marker in seen:
            dirnames[:] = []
            continue
        seen.add(marker)
        dirnames[:] = sorted(name for name in dirnames if name not in SKIPPED_DIRS)
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if not path.is_file():
                continue
            if matches_extension(path, extensions):
                files.append(path)
    return files


class FindTool(PathTool):
    name = "find"
    title = "Files"

    def __init__(self, root: Path = Path("."), extensions: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.root = root
        self.extensions = parse_extensions(extensions)

    def load_entries(self) -> list[Entry[Path]]:
        entries = []
        for path in walk_files(self.root, self.extensions):
            label = display_path(path)
            entries.append(Entry(label=label, payload=path, search_fields=(str(path),)))
        return entries

    def load_message(self, entries: list[Entry]) -> str:
        return f"Found {len(entries)} files"
