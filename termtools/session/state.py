"""Generic browsing session shared by every tool.

A ``Session`` owns the loaded entries, the query, the filter policy, the
selection and the current preview. Tools only supply entry loading, the
preview for one entry, and the action run on Enter.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Protocol

from ..config import DEFAULT_PAGE_SIZE
from ..entry import Entry
from ..errors import TermToolsError
from ..preview.model import EmptyPreview, ErrorPreview, Preview
from ..search.static import FilterOutcome, StaticFilter
from ..selection import SelectableList
from .keys import (
    KEY_BACKSPACE,
    KEY_CTRL_B,
    KEY_CTRL_C,
    KEY_CTRL_F,
    KEY_CTRL_N,
    KEY_CTRL_P,
    KEY_CTRL_U,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESC,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_UP,
    KeyComboBinding,
    KeyComboRegistry,
    is_printable_key,
)

logger = logging.getLogger(__name__)

Suspend = Callable[[], AbstractContextManager]


class FilterPolicy(Protocol):
    live: bool

    def apply(self, query: str) -> FilterOutcome: ...


@dataclass(frozen=True)
class ActionResult:
    """What a tool action asks the session to do next.

    ``output`` is printed after the terminal is restored. ``confirm`` holds a
    prompt; the session then waits for ``y`` before calling ``Tool.confirm``.
    """

    quit: bool = False
    message: str | None = None
    output: str | None = None
    reload: bool = False
    reset_query: bool = False
    confirm: str | None = None


class Tool:
    """Base class for one browser. Subclasses override the hooks they need."""

    name = "tool"
    title = "Entries"
    filterable = True
    help_text = "↑/↓ Navigate • Ctrl-F/B Page • Enter Select • Esc Quit"

    def load_entries(self) -> list[Entry]:
        return []

    def make_filter(self) -> FilterPolicy:
        return StaticFilter()

    def load_message(self, entries: list[Entry]) -> str | None:
        return f"Loaded {len(entries)} entries"

    def match_text(self, entry: Entry) -> str | None:
        """Text inside the label to emphasize, if any."""
        return None

    def preview(self, entry: Entry) -> Preview:
        return EmptyPreview()

    def activate(self, entry: Entry, suspend: Suspend) -> ActionResult:
        return ActionResult(quit=True, output=entry.label)

    def confirm(self, entry: Entry, suspend: Suspend) -> ActionResult:
        return ActionResult()


def _no_suspend() -> AbstractContextManager:
    return contextlib.nullcontext()


class Session:
    """Query, filtered entries, selection and preview for one tool run."""

    def __init__(
        self,
        tool: Tool,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        initial_query: str = "",
        suspend: Suspend = _no_suspend,
    ) -> None:
        self.tool = tool
        self.page_size = max(1, page_size)
        self.suspend = suspend
        self.query = ""
        self.filter = tool.make_filter()
        self.all_entries: list[Entry] = []
        self.entries: list[Entry] = []
        self.selection = SelectableList()
        self.preview: Preview = EmptyPreview()
        self.status_message = ""
        self.should_quit = False
        self.output: str | None = None
        self.pending_confirmation: Entry | None = None
        self.confirmation_prompt = ""
        self.dirty = True
        self._registry = self._build_registry()
        self.reload()
        if initial_query:
            self.set_query(initial_query)

    @property
    def live(self) -> bool:
        return bool(getattr(self.filter, "live", False))

    def _build_registry(self) -> KeyComboRegistry:
        return KeyComboRegistry().register_bindings(
            KeyComboBinding((KEY_ESC, KEY_CTRL_C), self.quit),
            KeyComboBinding((KEY_UP, KEY_CTRL_P), self.select_prev),
            KeyComboBinding((KEY_DOWN, KEY_CTRL_N), self.select_next),
            KeyComboBinding((KEY_CTRL_F, KEY_PAGE_DOWN), self.page_forward),
            KeyComboBinding((KEY_CTRL_B, KEY_PAGE_UP), self.page_backward),
            KeyComboBinding((KEY_ENTER,), self.activate),
            KeyComboBinding((KEY_BACKSPACE,), self.backspace),
            KeyComboBinding((KEY_CTRL_U,), self.clear_query),
        )

    # Entry set and filtering

    def reload(self) -> None:
        """Reload entries from the tool and re-apply the current query."""
        try:
            entries = list(self.tool.load_entries())
        except TermToolsError as exc:
            logger.warning("%s failed to load entries: %s", self.tool.name, exc)
            entries = []
            self.status_message = f"Error: {exc}"
        else:
            self.status_message = self.tool.load_message(entries) or ""
        self.all_entries = entries
        if isinstance(self.filter, StaticFilter):
            self.filter.set_entries(entries)
        self.refilter(keep_status=not self.live)

    def refilter(self, keep_status: bool = False) -> None:
        """Recompute the filtered set for the current query and reset the selection."""
        outcome = self.filter.apply(self.query)
        message = None if keep_status and not self.query else outcome.message
        self._replace_entries(outcome.entries, message)

    def _replace_entries(self, entries: list[Entry], message: str | None) -> None:
        self.entries = entries
        self.selection.reset(len(entries))
        if message is not None:
            self.status_message = message
        self.refresh_preview()

    def set_query(self, query: str) -> None:
        self.query = query
        self.refilter()

    def type_char(self, ch: str) -> bool:
        self.query += ch
        self.refilter()
        return True

    def backspace(self) -> bool:
        if not self.query:
            return False
        self.query = self.query[:-1]
        self.refilter()
        return True

    def clear_query(self) -> bool:
        if not self.query:
            return False
        self.query = ""
        self.refilter()
        return True

    # Selection

    def selected_entry(self) -> Entry | None:
        index = self.selection.selected
        if index is None or index >= len(self.entries):
            return None
        return self.entries[index]

    def refresh_preview(self) -> None:
        """Rebuild the preview for the current selection; failures become error previews."""
        entry = self.selected_entry()
        self.dirty = True
        if entry is None:
            self.preview = EmptyPreview()
            return
        try:
            self.preview = self.tool.preview(entry)
        except TermToolsError as exc:
            self.preview = ErrorPreview(str(exc))
        except Exception as exc:
            logger.exception("preview failed for %s", entry.label)
            self.preview = ErrorPreview(f"Preview failed: {exc}")

    def _after_move(self, moved: bool) -> bool:
        if moved:
            self.refresh_preview()
        return moved

    def select_next(self) -> bool:
        return self._after_move(self.selection.select_next())

    def select_prev(self) -> bool:
        return self._after_move(self.selection.select_prev())

    def page_forward(self) -> bool:
        return self._after_move(self.selection.page_forward(self.page_size))

    def page_backward(self) -> bool:
        return self._after_move(self.selection.page_backward(self.page_size))

    # Actions

    def quit(self) -> bool:
        self.should_quit = True
        return True

    def _apply_action(self, result: ActionResult) -> None:
        if result.message is not None:
            self.status_message = result.message
        if result.output is not None:
            self.output = result.output
        if result.reset_query:
            self.query = ""
            if not result.reload:
                self.refilter(keep_status=True)
        if result.reload:
            keep = self.status_message
            self.reload()
            if result.message is not None:
                self.status_message = keep
        if result.quit:
            self.should_quit = True
        self.dirty = True

    def _run_action(self, action: Callable[[Entry, Suspend], ActionResult], entry: Entry) -> ActionResult:
        try:
            return action(entry, self.suspend)
        except TermToolsError as exc:
            return ActionResult(message=f"Error: {exc}")
        except Exception as exc:
            logger.exception("%s action failed for %s", self.tool.name, entry.label)
            return ActionResult(message=f"Error: {exc}")

    def activate(self) -> bool:
        entry = self.selected_entry()
        if entry is None:
            return False
        result = self._run_action(self.tool.activate, entry)
        if result.confirm is not None:
            self.pending_confirmation = entry
            self.confirmation_prompt = result.confirm
            self.status_message = result.confirm
            self.dirty = True
            return True
        self._apply_action(result)
        return True

    def _answer_confirmation(self, key: str) -> bool:
        entry = self.pending_confirmation
        self.pending_confirmation = None
        self.confirmation_prompt = ""
        if entry is not None and key in {"y", "Y", KEY_ENTER}:
            self._apply_action(self._run_action(self.tool.confirm, entry))
        else:
            self.status_message = "Cancelled"
            self.dirty = True
        return True

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token. Returns whether it was handled."""
        if not key:
            return False
        if self.pending_confirmation is not None:
            return self._answer_confirmation(key)
        handled = self._registry.dispatch(key)
        if handled is not None:
            self.dirty = True
            return bool(handled)
        if self.tool.filterable and is_printable_key(key):
            return self.type_char(key)
        if not self.tool.filterable:
            if key == "q":
                return self.quit()
            if key == "j":
                return self.select_next()
            if key == "k":
                return self.select_prev()
        return False
