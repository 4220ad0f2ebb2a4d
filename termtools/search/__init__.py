"""Filter policies: in-memory substring matching and live external search."""

from __future__ import annotations

from .content import (
    ContentMatch,
    LiveContentSearch,
    SearchOutcome,
    build_grep_args,
    build_rg_args,
    extract_match,
    match_entry,
    parse_search_line,
    search_content,
)
from .static import FilterOutcome, StaticFilter, entry_matches, filter_entries

__all__ = [
    "ContentMatch",
    "FilterOutcome",
    "LiveContentSearch",
    "SearchOutcome",
    "StaticFilter",
    "build_grep_args",
    "build_rg_args",
    "entry_matches",
    "extract_match",
    "filter_entries",
    "match_entry",
    "parse_search_line",
    "search_content",
]
