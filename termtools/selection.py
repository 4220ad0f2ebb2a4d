"""Selection and pagination state for filtered entry lists.

``SelectableList`` holds only the filtered length and the selected index; the
entries themselves stay with the owning session, which passes the new length
to ``reset`` whenever its filtered set changes.
"""

from __future__ import annotations


class SelectableList:
    """Selection over ``length`` items with non-wrapping moves and clamped paging.

    Invariant: ``selected`` is ``None`` exactly when ``length == 0``, and is
    otherwise an index in ``[0, length - 1]``.
    """

    __slots__ = ("_length", "_selected")

    def __init__(self, length: int = 0) -> None:
        self._length = 0
        self._selected: int | None = None
        self.reset(length)

    @property
    def length(self) -> int:
        return self._length

    @property
    def selected(self) -> int | None:
        return self._selected

    def __len__(self) -> int:
        return self._length

    def reset(self, length: int) -> int | None:
        """Replace the filtered length and select the first item when non-empty."""
        self._length = max(0, int(length))
        self._selected = 0 if self._length > 0 else None
        return self._selected

    def select(self, index: int | None) -> int | None:
        """Select ``index`` clamped into range; ``None`` is only kept for empty lists."""
        if self._length == 0:
            self._selected = None
        elif index is None:
            self._selected = 0
        else:
            self._selected = max(0, min(int(index), self._length - 1))
        return self._selected

    def select_next(self) -> bool:
        """Move down one row. Returns whether the selection changed."""
        if self._selected is None:
            if self._length == 0:
                return False
            self._selected = 0
            return True
        if self._selected + 1 >= self._length:
            return False
        self._selected += 1
        return True

    def select_prev(self) -> bool:
        """Move up one row. Returns whether the selection changed."""
        if self._selected is None or self._selected == 0:
            return False
        self._selected -= 1
        return True

    def page_forward(self, page_size: int) -> bool:
        """Move down by ``page_size`` rows, stopping on the last item."""
        if self._length == 0:
            return False
        previous = self._selected
        if self._selected is None:
            self._selected = 0
        else:
            step = max(0, int(page_size))
            self._selected = min(self._selected + step, self._length - 1)
        return self._selected != previous

    def page_backward(self, page_size: int) -> bool:
        """Move up by ``page_size`` rows, stopping on the first item.

        Without a current selection this is a no-op.
        """
        if self._selected is None:
            return False
        previous = self._selected
        step = max(0, int(page_size))
        self._selected = max(0, self._selected - step)
        return self._selected != previous

    def visible_window(self, start: int, rows: int) -> int:
        """Return a scroll start that keeps the selection inside ``rows`` visible rows."""
        rows = max(1, rows)
        max_start = max(0, self._length - rows)
        start = max(0, min(start, max_start))
        if self._selected is None:
            return start
        if self._selected < start:
            return self._selected
        if self._selected >= start + rows:
            return self._selected - rows + 1
        return start
