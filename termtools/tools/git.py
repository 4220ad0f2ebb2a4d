"""Git browsers: commit log, branch switcher, changed files, and a status report."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import DEFAULT_PROCESS_TIMEOUT_SECONDS
from ..entry import Entry
from ..preview.model import Preview, text_preview
from ..process import STATUS_FAILED, run_command
from ..session.state import ActionResult, Suspend, Tool
from .common import PathTool

LOG_FORMAT = "--pretty=format:%H|%h|%s|%an|%ar"
LOG_LIMIT = 50
PATCH_PREVIEW_LINES = 100
STAT_TIMEOUT_SECONDS = 3.0
NOT_A_REPO_MESSAGE = "Error: Not a git repository or git not found"


@dataclass(frozen=True)
class Commit:
    hash: str
    short_hash: str
    message: str
    author: str
    date: str


@dataclass(frozen=True)
class Branch:
    name: str
    is_current: bool
    is_remote: bool


def parse_log(output: str) -> list[Commit]:
    """Parse ``hash|short|subject|author|date`` rows; subjects may contain ``|``."""
    commits = []
    for line in output.splitlines():
        parts = line.split("|")
        if len(parts) < 5:
            continue
        subject = "|".join(parts[2:-2])
        commits.append(Commit(parts[0], parts[1], subject, parts[-2], parts[-1]))
    return commits


def parse_branches(output: str) -> list[Branch]:
    """Parse ``git branch -a``; a local branch hides its ``origin`` twin."""
    branches: list[Branch] = []
    seen: set[str] = set()
    for raw in output.splitlines():
        line = raw.strip()
        if not line or "HEAD ->" in line:
            continue
        is_current = line.startswith("*")
        is_remote = "remotes/" in line
        name = line.lstrip("*").strip()
        if name.startswith("remotes/origin/"):
            name = name[len("remotes/origin/"):]
        if name in seen:
            continue
        seen.add(name)
        branches.append(Branch(name=name, is_current=is_current, is_remote=is_remote))
    return branches


def limit_lines(text: str, limit: int, hint: str) -> str:
    lines = text.splitlines()
    if len(lines) <= limit:
        return "\n".join(lines)
    shown = "\n".join(lines[:limit])
    return f"{shown}\n\n... (showing first {limit} of {len(lines)} lines total)\n{hint}"


class GitTool(Tool):
    def __init__(self, *, timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS, runner=run_command, cwd: Path | None = None) -> None:
        self.timeout = timeout
        self.runner = runner
        self.cwd = cwd

    def git(self, *args: str, timeout: float | None = None):
        return self.runner("git", list(args), timeout=self.timeout if timeout is None else timeout, cwd=self.cwd)


class GitLogTool(GitTool):
    name = "git-log"
    title = "Git Log"

    def load_entries(self) -> list[Entry[Commit]]:
        output = self.git("log", LOG_FORMAT, f"-{LOG_LIMIT}").check()
        return [
            Entry(
                label=f"{commit.short_hash} {commit.message} ({commit.date}) {commit.author}",
                payload=commit,
                search_fields=(commit.message, commit.author, commit.hash),
                key=commit.hash,
            )
            for commit in parse_log(output)
        ]

    def load_message(self, entries: list[Entry]) -> str:
        return f"Loaded {len(entries)} commits"

    def preview(self, entry: Entry[Commit]) -> Preview:
        commit_hash = entry.payload.hash
        stat = self.git("show", "--color=never", "--stat", "--no-patch", commit_hash, timeout=STAT_TIMEOUT_SECONDS)
        text = stat.stdout if stat.ok else f"Commit: {commit_hash}\n"
        text += "\n--- Diff Preview (limited) ---\n"
        patch = self.git("show", "--color=never", "--patch", "--unified=3", commit_hash)
        if patch.ok:
            text += limit_lines(patch.stdout, PATCH_PREVIEW_LINES, f"Use 'git show {commit_hash}' for full diff")
        else:
            text += "Failed to load commit diff (timeout or error)"
        return text_preview(text, syntax_hint="commit.diff")

    def activate(self, entry: Entry[Commit], suspend: Suspend) -> ActionResult:
        return ActionResult(quit=True, output=entry.payload.hash)


class GitBranchTool(GitTool):
    name = "git-branch"
    title = "Git Branches"
    filterable = False
    help_text = "j/k Navigate • Enter Switch • q Quit"

    def load_entries(self) -> list[Entry[Branch]]:
        output = self.git("branch", "-a").check()
        entries = []
        for branch in parse_branches(output):
            label = f"{'*' if branch.is_current else ' '} {branch.name}"
            if branch.is_remote:
                label += " (remote)"
            entries.append(Entry(label=label, payload=branch, key=branch.name))
        return entries

    def load_message(self, entries: list[Entry]) -> str:
        return f"Loaded {len(entries)} branches"

    def preview(self, entry: Entry[Branch]) -> Preview:
        result = self.git("log", "--oneline", "-n", "10", entry.payload.name)
        return text_preview(result.stdout if result.ok else (result.error or ""))

    def activate(self, entry: Entry[Branch], suspend: Suspend) -> ActionResult:
        branch = entry.payload
        if branch.is_current:
            return ActionResult(message="Already on this branch")
        result = self.git("checkout", branch.name)
        if result.ok:
            return ActionResult(quit=True, output=f"Switched to branch '{branch.name}'")
        detail = result.stderr.strip() if result.status == STATUS_FAILED else result.error
        return ActionResult(message=f"Failed to switch: {detail}")


class GitDiffTool(PathTool):
    """One entry per changed file; the preview shows that file's diff."""

    name = "git-diff"
    title = "Git Diff"
    filterable = False
    help_text = "j/k Navigate • Enter Edit • q Quit"

    def __init__(self, *, timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS, runner=run_command, cwd: Path | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.timeout = timeout
        self.runner = runner
        self.cwd = cwd

    def load_entries(self) -> list[Entry[Path]]:
        result = self.runner("git", ["diff", "--name-only"], timeout=self.timeout, cwd=self.cwd)
        base = self.cwd or Path(".")
        return [
            Entry(label=name, payload=base / name)
            for name in result.check().splitlines()
            if name.strip()
        ]

    def load_message(self, entries: list[Entry]) -> str:
        if not entries:
            return "No changes"
        return f"{len(entries)} changed files"

    def preview(self, entry: Entry[Path]) -> Preview:
        result = self.runner("git", ["diff", "--color=never", "--", entry.label], timeout=self.timeout, cwd=self.cwd)
        if not result.ok:
            return text_preview(result.error or "")
        return text_preview(
            limit_lines(result.stdout, PATCH_PREVIEW_LINES, f"Use 'git diff {entry.label}' for the full diff"),
            syntax_hint="changes.diff",
        )


def git_status_report(*, timeout: float = DEFAULT_PROCESS_TIMEOUT_SECONDS, runner=run_command, cwd: Path | None = None) -> str:
    """Plain-text ``git status --porcelain`` summary."""
    result = runner("git", ["status", "--porcelain"], timeout=timeout, cwd=cwd)
    if not result.ok:
        return NOT_A_REPO_MESSAGE
    if not result.stdout.strip():
        return "Working tree clean"
    return "\n".join(["Git Status:", *result.stdout.splitlines()])
