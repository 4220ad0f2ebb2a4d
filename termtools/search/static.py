"""In-memory substring filtering over a loaded entry set."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..entry import Entry


@dataclass(frozen=True)
class FilterOutcome:
    """Result of one filter recomputation.

    ``entries`` fully replaces the previous filtered set. ``spawned`` records
    whether an external process was started to produce it.
    """

    entries: list[Entry] = field(default_factory=list)
    message: str | None = None
    spawned: bool = False
    truncated: bool = False


def entry_matches(entry: Entry, query_lower: str) -> bool:
    """Return whether any searchable field of ``entry`` contains ``query_lower``."""
    if not query_lower:
        return True
    return any(query_lower in text.lower() for text in entry.searchable_texts())


def filter_entries(entries: Iterable[Entry], query: str) -> list[Entry]:
    """Case-insensitive, unanchored substring filter preserving input order."""
    query_lower = query.lower()
    return [entry for entry in entries if entry_matches(entry, query_lower)]


class StaticFilter:
    """Filter policy that recomputes matches synchronously from memory."""

    live = False

    def __init__(self, entries: Sequence[Entry] = ()) -> None:
        self._entries: list[Entry] = list(entries)

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    def set_entries(self, entries: Sequence[Entry]) -> None:
        self._entries = list(entries)

    def apply(self, query: str) -> FilterOutcome:
        matched = filter_entries(self._entries, query)
        if query:
            message = f"{len(matched)} of {len(self._entries)} match '{query}'"
        else:
            message = f"{len(self._entries)} entries"
        return FilterOutcome(entries=matched, message=message)
