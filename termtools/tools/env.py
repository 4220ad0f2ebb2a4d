"""Environment variable viewer."""

from __future__ import annotations

import os
from collections.abc import Mapping

from ..entry import Entry
from ..preview.model import Preview, text_preview
from ..session.state import ActionResult, Suspend, Tool


def is_path_list(value: str) -> bool:
    return ":" in value and "/" in value


def value_lines(value: str) -> list[str]:
    """PATH-like values are shown one element per line."""
    if is_path_list(value):
        return [part for part in value.split(":") if part]
    return [value]


class EnvTool(Tool):
    name = "env"
    title = "Environment Variables"

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.environ = environ

    def load_entries(self) -> list[Entry[tuple[str, str]]]:
        env = os.environ if self.environ is None else self.environ
        return [
            Entry(label=f"{key}={value}", payload=(key, value), search_fields=(key, value), key=key)
            for key, value in sorted(env.items())
        ]

    def load_message(self, entries: list[Entry]) -> str:
        return f"Found {len(entries)} environment variables"

    def preview(self, entry: Entry[tuple[str, str]]) -> Preview:
        key, value = entry.payload
        return text_preview("\n".join([f"Value: {key}", "", *value_lines(value)]))

    def activate(self, entry: Entry[tuple[str, str]], suspend: Suspend) -> ActionResult:
        key, value = entry.payload
        return ActionResult(quit=True, output=f"{key}={value}")
