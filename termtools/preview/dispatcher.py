"""Bounded preview generation for filesystem paths.

Precedence: directory listing, image art, leading text lines, then a
metadata summary when the content cannot be read as text. Every branch reads
a bounded amount of data and never recurses into directory contents.
"""

from __future__ import annotations

import codecs
import logging
import os
from pathlib import Path

from ..errors import FileReadError
from .image import AsciiImageRenderer, is_image_file
from .model import (
    BinaryInfoPreview,
    DirectoryItem,
    DirectoryPreview,
    ErrorPreview,
    Preview,
    TextPreview,
)
from .syntax import sanitize_terminal_text

logger = logging.getLogger(__name__)

MAX_TEXT_LINES = 50
MAX_DIRECTORY_ENTRIES = 20
TEXT_READ_CHUNK_BYTES = 16 * 1024
TEXT_READ_MAX_BYTES = 512 * 1024


def build_directory_preview(path: Path, max_entries: int = MAX_DIRECTORY_ENTRIES) -> Preview:
    """List up to ``max_entries`` immediate children of ``path``.

    Unreadable directories produce an ``ErrorPreview``; an empty listing is a
    ``DirectoryPreview`` with no items.
    """
    items: list[DirectoryItem] = []
    truncated = False
    try:
        with os.scandir(path) as entries:
            for entry in entries:
                if len(items) >= max_entries:
                    truncated = True
                    break
                try:
                    is_dir = entry.is_dir()
                except OSError:
                    is_dir = False
                items.append(DirectoryItem(name=sanitize_terminal_text(entry.name), is_dir=is_dir))
    except PermissionError:
        return ErrorPreview(f"[Permission denied] {path}")
    except OSError as exc:
        return ErrorPreview(f"Could not list {path}: {exc.strerror or exc}")
    return DirectoryPreview(path=path, items=tuple(items), truncated=truncated)


def read_text_head(path: Path, max_lines: int = MAX_TEXT_LINES) -> tuple[list[str], bool]:
    """Decode the first ``max_lines`` lines of ``path`` as strict UTF-8.

    Reads incrementally and stops once enough lines are decoded, so large files
    are never loaded in full. Raises ``FileReadError`` for non-regular files,
    undecodable or NUL-containing content, and OS errors.
    """
    try:
        if not path.is_file():
            raise FileReadError(f"{path} is not a regular file")
        handle = path.open("rb")
    except OSError as exc:
        raise FileReadError(f"Could not read {path}: {exc.strerror or exc}") from exc

    decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
    buffered = ""
    consumed = 0
    at_eof = False
    with handle:
        while True:
            try:
                chunk = handle.read(TEXT_READ_CHUNK_BYTES)
            except OSError as exc:
                raise FileReadError(f"Could not read {path}: {exc.strerror or exc}") from exc
            at_eof = not chunk
            consumed += len(chunk)
            if b"\x00" in chunk:
                raise FileReadError(f"{path} looks like binary content")
            try:
                buffered += decoder.decode(chunk, final=at_eof)
            except UnicodeDecodeError as exc:
                raise FileReadError(f"{path} is not valid UTF-8 text") from exc
            if at_eof or buffered.count("\n") > max_lines or consumed >= TEXT_READ_MAX_BYTES:
                break

    lines = buffered.splitlines()
    truncated = len(lines) > max_lines or not at_eof
    return lines[:max_lines], truncated


def build_text_preview(path: Path, max_lines: int = MAX_TEXT_LINES) -> TextPreview:
    lines, truncated = read_text_head(path, max_lines)
    return TextPreview(
        lines=tuple(sanitize_terminal_text(line) for line in lines),
        truncated=truncated,
        syntax_hint=path.name,
    )


def build_binary_info(path: Path) -> Preview:
    """Summarize size and modification time for content that is not previewable."""
    try:
        stat = path.stat()
    except OSError as exc:
        return ErrorPreview(f"[Could not read file] {path}: {exc.strerror or exc}")
    return BinaryInfoPreview(path=path, size=stat.st_size, modified=stat.st_mtime)


class PreviewDispatcher:
    """Choose and build the preview kind for a path."""

    def __init__(
        self,
        image_renderer: AsciiImageRenderer | None = None,
        max_text_lines: int = MAX_TEXT_LINES,
        max_directory_entries: int = MAX_DIRECTORY_ENTRIES,
    ) -> None:
        self.image_renderer = image_renderer if image_renderer is not None else AsciiImageRenderer()
        self.max_text_lines = max_text_lines
        self.max_directory_entries = max_directory_entries

    def preview_path(self, path: Path) -> Preview:
        if path.is_dir():
            return build_directory_preview(path, self.max_directory_entries)
        if is_image_file(path):
            return self.image_renderer.preview(path)
        try:
            return build_text_preview(path, self.max_text_lines)
        except FileReadError as exc:
            logger.debug("text preview unavailable: %s", exc)
            return build_binary_info(path)

    __call__ = preview_path
