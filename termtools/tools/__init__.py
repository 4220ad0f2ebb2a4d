"""Browsing tools built on the shared session.

``build_tool`` maps a CLI tool name plus its options onto a configured
``Tool`` instance.
"""

from __future__ import annotations

from pathlib import Path

from ..config import Settings
from ..session.state import Tool
from .env import EnvTool
from .explore import ExploreTool
from .find import FindTool
from .git import GitBranchTool, GitDiffTool, GitLogTool, git_status_report
from .history import DEFAULT_HISTORY_LIMIT, HistoryTool
from .kill import KillTool
from .man import ManTool
from .recent import DEFAULT_RECENT_LIMIT, RecentTool
from .search import SearchTool

TOOL_NAMES = ("find", "search", "kill", "git-log", "git-branch", "git-diff", "dir", "hist", "env", "man", "recent")


def build_tool(name: str, settings: Settings, **options) -> Tool:
    """Instantiate tool ``name``; unknown names raise ``ValueError``."""
    timeout = settings.process_timeout
    editors = settings.editors
    if name == "find":
        return FindTool(Path(options.get("path") or "."), options.get("extensions"), editors=editors)
    if name == "search":
        return SearchTool(
            Path(options.get("path") or "."),
            file_type=options.get("file_type"),
            ignore_case=bool(options.get("ignore_case")),
            max_count=settings.search_max_count,
            timeout=timeout,
            editors=editors,
        )
    if name == "kill":
        return KillTool(timeout=timeout)
    if name == "git-log":
        return GitLogTool(timeout=timeout)
    if name == "git-branch":
        return GitBranchTool(timeout=timeout)
    if name == "git-diff":
        return GitDiffTool(timeout=timeout, editors=editors)
    if name == "dir":
        return ExploreTool(Path(options.get("path") or "."), editors=editors)
    if name == "hist":
        return HistoryTool(options.get("limit") or DEFAULT_HISTORY_LIMIT, timeout=timeout)
    if name == "env":
        return EnvTool()
    if name == "man":
        return ManTool(timeout=timeout)
    if name == "recent":
        return RecentTool(options.get("limit") or DEFAULT_RECENT_LIMIT, editors=editors)
    raise ValueError(f"unknown tool: {name}")


__all__ = [
    "EnvTool",
    "ExploreTool",
    "FindTool",
    "GitBranchTool",
    "GitDiffTool",
    "GitLogTool",
    "HistoryTool",
    "KillTool",
    "ManTool",
    "RecentTool",
    "SearchTool",
    "TOOL_NAMES",
    "build_tool",
    "git_status_report",
]
