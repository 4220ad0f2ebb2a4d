"""Shared pieces for tools whose entries are filesystem paths."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from ..config import DEFAULT_EDITORS
from ..editor import launch_editor
from ..entry import Entry
from ..preview.dispatcher import PreviewDispatcher
from ..preview.model import Preview
from ..session.state import ActionResult, Suspend, Tool

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(size: int) -> str:
    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(SIZE_UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return f"{value:.0f}{SIZE_UNITS[unit]}"
    return f"{value:.1f}{SIZE_UNITS[unit]}"


def display_path(path: Path, base: Path | None = None) -> str:
    """``path`` relative to ``base`` (default: cwd) when it lies beneath it."""
    base = Path.cwd() if base is None else base
    try:
        rel = os.path.relpath(path, base)
    except ValueError:
        return str(path)
    return str(path) if rel.startswith("..") else rel


class PathTool(Tool):
    """Tool whose entry payloads are paths previewed by the dispatcher and opened in an editor."""

    def __init__(
        self,
        *,
        dispatcher: PreviewDispatcher | None = None,
        editors: Sequence[str] = DEFAULT_EDITORS,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self.dispatcher = dispatcher if dispatcher is not None else PreviewDispatcher()
        self.editors = tuple(editors)
        self.which = which

    def preview(self, entry: Entry) -> Preview:
        return self.dispatcher.preview_path(entry.payload)

    def open_path(self, path: Path, suspend: Suspend, line: int | None = None) -> ActionResult:
        """Open ``path`` and quit; print the path instead when no editor is available."""
        error = launch_editor(path, suspend, line, editors=self.editors, which=self.which)
        if error is not None:
            return ActionResult(quit=True, output=str(path))
        return ActionResult(quit=True)

    def activate(self, entry: Entry, suspend: Suspend) -> ActionResult:
        return self.open_path(entry.payload, suspend)
