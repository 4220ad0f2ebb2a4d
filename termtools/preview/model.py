"""Preview value types produced for the selected entry.

A preview is replaced wholesale whenever the selection changes; each kind
knows how to lay itself out as plain text lines for the preview pane.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .syntax import sanitize_terminal_text

PREVIEW_TEXT = "text"
PREVIEW_BINARY = "binary"
PREVIEW_DIRECTORY = "directory"
PREVIEW_IMAGE = "image"
PREVIEW_ERROR = "error"
PREVIEW_EMPTY = "empty"


def format_timestamp(value: float | None) -> str:
    if value is None:
        return "unknown"
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(value))


@dataclass(frozen=True)
class TextPreview:
    """First lines of a text source; ``truncated`` marks a longer original.

    ``syntax_hint`` is a file name used to pick a highlighter, if any.
    """

    lines: tuple[str, ...]
    truncated: bool = False
    syntax_hint: str | None = None
    kind = PREVIEW_TEXT

    def text_lines(self) -> list[str]:
        out = list(self.lines)
        if self.truncated:
            out.append("")
            out.append("... (truncated)")
        return out


@dataclass(frozen=True)
class BinaryInfoPreview:
    path: Path
    size: int
    modified: float | None
    note: str = "Preview unavailable: binary file or read error"
    kind = PREVIEW_BINARY

    def text_lines(self) -> list[str]:
        return [
            f"File: {self.path}",
            f"Size: {self.size} bytes",
            f"Modified: {format_timestamp(self.modified)}",
            "",
            f"[{self.note}]",
        ]


@dataclass(frozen=True)
class DirectoryItem:
    name: str
    is_dir: bool

    def text_line(self) -> str:
        return f"{'d' if self.is_dir else 'f'} {self.name}{'/' if self.is_dir else ''}"


@dataclass(frozen=True)
class DirectoryPreview:
    path: Path
    items: tuple[DirectoryItem, ...]
    truncated: bool = False
    kind = PREVIEW_DIRECTORY

    def text_lines(self) -> list[str]:
        if not self.items:
            return ["[Empty directory]"]
        out = [item.text_line() for item in self.items]
        if self.truncated:
            out.append("...")
        return out


@dataclass(frozen=True)
class ImagePreview:
    """ASCII rendition of an image plus its header facts.

    ``art`` is ``None`` when the header decoded but the art could not be drawn;
    ``note`` then says why.
    """

    path: Path
    width: int
    height: int
    channels: int
    art: str | None
    note: str | None = None
    kind = PREVIEW_IMAGE

    def text_lines(self) -> list[str]:
        out = [
            f"Image: {self.path.name}",
            f"Dimensions: {self.width}x{self.height}",
            f"Channels: {self.channels}",
            "",
        ]
        if self.art is not None:
            out.extend(self.art.splitlines())
        if self.note:
            out.append(self.note)
        return out


@dataclass(frozen=True)
class ErrorPreview:
    message: str
    kind = PREVIEW_ERROR

    def text_lines(self) -> list[str]:
        return self.message.splitlines() or [""]


@dataclass(frozen=True)
class EmptyPreview:
    """Placeholder shown while nothing is selected."""

    kind = PREVIEW_EMPTY

    def text_lines(self) -> list[str]:
        return []


Preview = Union[TextPreview, BinaryInfoPreview, DirectoryPreview, ImagePreview, ErrorPreview, EmptyPreview]


def text_preview(text: str, max_lines: int | None = None, syntax_hint: str | None = None) -> TextPreview:
    """Wrap already-produced text (command output, details) as a ``TextPreview``."""
    lines = [sanitize_terminal_text(line) for line in text.splitlines()]
    truncated = False
    if max_lines is not None and len(lines) > max_lines:
        lines = lines[: max(0, max_lines)]
        truncated = True
    return TextPreview(lines=tuple(lines), truncated=truncated, syntax_hint=syntax_hint)
