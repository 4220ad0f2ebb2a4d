"""Frame composition for the two-pane browser layout.

``compose_frame`` is pure and returns the rows for a given session and size;
``draw_frame`` writes them to the terminal in one call.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..ansi import ANSI_ESCAPE_RE, clip_ansi_line, pad_ansi_line
from ..preview.model import TextPreview
from ..preview.syntax import DEFAULT_STYLE, colorize_lines, sanitize_terminal_text
from .state import Session

MIN_LIST_WIDTH = 20
DIVIDER = "│"
QUERY_PROMPT = "> "


@dataclass(frozen=True)
class FrameOptions:
    width: int = 80
    height: int = 24
    style: str = DEFAULT_STYLE
    no_color: bool = False


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def highlight_match(text: str, needle: str | None) -> str:
    """Emphasize the first case-insensitive occurrence of ``needle`` in plain ``text``."""
    if not needle:
        return text
    start = text.lower().find(needle.lower())
    if start < 0:
        return text
    end = start + len(needle)
    return f"{text[:start]}\033[1;38;5;214m{text[start:end]}\033[0m{text[end:]}"


def row_text(text: str) -> str:
    """Single-row plain text: control bytes escaped, line breaks and tabs flattened."""
    return sanitize_terminal_text(text).replace("\r", " ").replace("\n", " ").replace("\t", " ")


def list_pane_width(width: int) -> int:
    """Left pane takes roughly 40% of the screen, never below a usable minimum."""
    if width <= MIN_LIST_WIDTH + 2:
        return max(1, width // 2)
    return max(MIN_LIST_WIDTH, (width * 2) // 5)


def build_status_line(left_text: str, width: int, right_text: str = "") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def preview_lines(session: Session, options: FrameOptions) -> list[str]:
    preview = session.preview
    lines = preview.text_lines()
    if isinstance(preview, TextPreview) and not options.no_color and preview.syntax_hint:
        body = colorize_lines(list(preview.lines), preview.syntax_hint, options.style)
        lines = body + lines[len(preview.lines):]
    return lines


def compose_frame(session: Session, options: FrameOptions, list_start: int = 0) -> tuple[list[str], int]:
    """Build screen rows and return them with the list scroll offset used.

    Row 0 holds the query line (or the tool title when it has no query), the
    last row holds the status bar, and the rows between hold the entry list on
    the left and the preview on the right.
    """
    width = max(2, options.width)
    height = max(3, options.height)
    left_width = list_pane_width(width)
    right_width = max(1, width - left_width - 1)
    body_rows = height - 2

    if session.pending_confirmation is not None:
        header = f"\033[1;38;5;214m{session.confirmation_prompt}\033[0m"
    elif session.tool.filterable:
        header = f"\033[1;38;5;81m{QUERY_PROMPT}{session.query}_\033[0m"
    else:
        header = f"\033[1;38;5;81m{session.tool.title}\033[0m"
    rows = [clip_ansi_line(header, width - 1)]

    list_start = session.selection.visible_window(list_start, body_rows)
    preview = preview_lines(session, options)
    for row in range(body_rows):
        idx = list_start + row
        if idx < len(session.entries):
            needle = session.tool.match_text(session.entries[idx])
            label = highlight_match(row_text(session.entries[idx].label), row_text(needle) if needle else None)
            cell = pad_ansi_line(f" {label}", left_width)
            if idx == session.selection.selected:
                cell = selected_with_ansi(cell)
        else:
            cell = " " * left_width
        text = clip_ansi_line(preview[row], right_width) if row < len(preview) else ""
        if ANSI_ESCAPE_RE.search(text):
            text += "\033[0m"
        rows.append(f"{cell}\033[2m{DIVIDER}\033[0m{text}")

    if session.tool.filterable and not session.live:
        count = f"{len(session.entries)}/{len(session.all_entries)}"
    else:
        count = str(len(session.entries))
    status = build_status_line(row_text(session.status_message), width, f"{count} │ {session.tool.help_text}")
    rows.append(f"\033[7m{status}\033[0m")
    return rows, list_start


def draw_frame(rows: list[str], fd: int | None = None) -> None:
    out = ["\033[H\033[J", "\r\n".join(rows)]
    target = sys.stdout.fileno() if fd is None else fd
    os.write(target, "".join(out).encode("utf-8", errors="replace"))
