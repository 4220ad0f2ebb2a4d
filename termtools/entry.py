"""Listable entries shared by every browsing tool."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

P = TypeVar("P")


@dataclass(frozen=True)
class Entry(Generic[P]):
    """One selectable row: a display label plus a tool-specific payload.

    ``search_fields`` lists the texts the static filter matches against and
    defaults to the label. ``key`` identifies the entry for selection purposes
    when labels are not unique.
    """

    label: str
    payload: P
    search_fields: tuple[str, ...] = ()
    key: Hashable | None = None

    def searchable_texts(self) -> tuple[str, ...]:
        return self.search_fields if self.search_fields else (self.label,)
