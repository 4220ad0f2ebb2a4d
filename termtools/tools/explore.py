"""Directory explorer: one directory at a time, Enter descends or opens."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..entry import Entry
from ..session.state import ActionResult, Suspend
from .common import PathTool, format_size


@dataclass(frozen=True)
class DirEntry:
    name: str
    path: Path
    is_dir: bool
    size: int | None = None
    is_parent: bool = False


def list_directory(directory: Path) -> list[DirEntry]:
    """Visible children of ``directory``, directories first, then case-insensitive by name.

    A ``..`` entry leads the list whenever ``directory`` has a parent.
    """
    entries: list[DirEntry] = []
    resolved = directory.resolve()
    if resolved.parent != resolved:
        entries.append(DirEntry(name="..", path=resolved.parent, is_dir=True, is_parent=True))

    children: list[DirEntry] = []
    with os.scandir(resolved) as it:
        for item in it:
            if item.name.startswith("."):
                continue
            path = Path(item.path)
            is_dir = path.is_dir()
            size = None
            if not is_dir:
                try:
                    size = item.stat().st_size
                except OSError:
                    size = None
            children.append(DirEntry(name=item.name, path=path, is_dir=is_dir, size=size))
    children.sort(key=lambda entry: (not entry.is_dir, entry.name.lower()))
    entries.extend(children)
    return entries


def dir_entry_label(entry: DirEntry) -> str:
    if entry.is_parent:
        return "../"
    if entry.is_dir:
        return f"{entry.name}/"
    if entry.size is not None:
        return f"{entry.name} ({format_size(entry.size)})"
    return entry.name


class ExploreTool(PathTool):
    name = "dir"
    title = "Files & Directories"
    help_text = "↑/↓ Navigate • Enter Open • Esc Quit"

    def __init__(self, root: Path = Path("."), **kwargs) -> None:
        super().__init__(**kwargs)
        self.current_dir = root.resolve()
        self.load_error: str | None = None

    def parent_entries(self) -> list[Entry[Path]]:
        parent = self.current_dir.parent
        if parent == self.current_dir:
            return []
        return [Entry(label="../", payload=parent, search_fields=("..",), key=str(parent))]

    def load_entries(self) -> list[Entry[Path]]:
        self.load_error = None
        try:
            items = list_directory(self.current_dir)
        except PermissionError:
            self.load_error = f"[Permission denied] {self.current_dir}"
            return self.parent_entries()
        except OSError as exc:
            self.load_error = f"Could not list {self.current_dir}: {exc.strerror or exc}"
            return self.parent_entries()
        return [
            Entry(label=dir_entry_label(item), payload=item.path, search_fields=(item.name,), key=str(item.path))
            for item in items
        ]

    def load_message(self, entries: list[Entry]) -> str:
        if self.load_error is not None:
            return self.load_error
        return f"Directory: {self.current_dir} ({len(entries)} items)"

    def activate(self, entry: Entry[Path], suspend: Suspend) -> ActionResult:
        if entry.payload.is_dir():
            self.current_dir = entry.payload.resolve()
            return ActionResult(reload=True, reset_query=True)
        return self.open_path(entry.payload, suspend)
