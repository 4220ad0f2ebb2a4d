"""Preview text sanitization and syntax highlighting.

Neutralizes terminal control bytes so previews cannot move the cursor or ring
the bell, then colours lines with Pygments when a lexer can be chosen.
"""

from __future__ import annotations

import re

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
DEFAULT_STYLE = "monokai"


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _normalize_style(style: str) -> str:
    """Validate/canonicalize requested style name with cache-backed checks."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = TerminalFormatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def colorize_lines(lines: list[str], syntax_hint: str | None, style: str = DEFAULT_STYLE) -> list[str]:
    """Return ``lines`` with ANSI colouring for the lexer matching ``syntax_hint``.

    Lines come back unchanged when there is no hint, no lexer matches, or the
    highlighter does not preserve the line count.
    """
    if not lines or not syntax_hint:
        return lines
    source = "\n".join(lines)
    try:
        lexer = get_lexer_for_filename(syntax_hint, source, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return lines
    try:
        rendered = highlight(source, lexer, _formatter_for_style(_normalize_style(style)))
    except Exception:
        return lines
    colored = rendered.split("\n")
    if colored and colored[-1] == "" and len(colored) == len(lines) + 1:
        colored.pop()
    if len(colored) != len(lines):
        return lines
    return colored
