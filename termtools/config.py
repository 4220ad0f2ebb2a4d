"""Persistent JSON config helpers.

Stores paging, subprocess, live-search, preview and editor preferences.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "termtools"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_PAGE_SIZE = 10
DEFAULT_PROCESS_TIMEOUT_SECONDS = 5.0
DEFAULT_SEARCH_MAX_COUNT = 100
MIN_LIVE_QUERY_LENGTH = 2
DEFAULT_PREVIEW_STYLE = "monokai"
DEFAULT_EDITORS: tuple[str, ...] = ("nvim", "vim", "nano", "code")


@dataclass(frozen=True)
class Settings:
    """Validated runtime settings shared by every tool."""

    page_size: int = DEFAULT_PAGE_SIZE
    process_timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS
    search_max_count: int = DEFAULT_SEARCH_MAX_COUNT
    preview_style: str = DEFAULT_PREVIEW_STYLE
    no_color: bool = False
    editors: tuple[str, ...] = field(default=DEFAULT_EDITORS)
    log_file: str | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _coerce_positive_int(value: object, default: int) -> int:
    """Accept strictly positive integers; booleans and other types fall back."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value > 0 else default


def _coerce_positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def _coerce_editors(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return DEFAULT_EDITORS
    editors = tuple(item.strip() for item in value if isinstance(item, str) and item.strip())
    return editors or DEFAULT_EDITORS


def _coerce_optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_settings() -> Settings:
    """Build ``Settings`` from config, replacing every invalid value with its default."""
    data = load_config()
    no_color = data.get("no_color")
    return Settings(
        page_size=_coerce_positive_int(data.get("page_size"), DEFAULT_PAGE_SIZE),
        process_timeout=_coerce_positive_float(
            data.get("process_timeout_seconds"),
            DEFAULT_PROCESS_TIMEOUT_SECONDS,
        ),
        search_max_count=_coerce_positive_int(data.get("search_max_count"), DEFAULT_SEARCH_MAX_COUNT),
        preview_style=_coerce_optional_str(data.get("preview_style")) or DEFAULT_PREVIEW_STYLE,
        no_color=no_color if isinstance(no_color, bool) else False,
        editors=_coerce_editors(data.get("editors")),
        log_file=_coerce_optional_str(data.get("log_file")),
    )


def save_preview_style(style: str) -> None:
    """Persist the Pygments style used for text previews."""
    stripped = str(style).strip()
    if not stripped:
        return
    config = load_config()
    config["preview_style"] = stripped
    save_config(config)
