"""Editor launch helper for opening selected files.

Runs the first available editor while the TUI is suspended. ``$EDITOR`` is
tried before the configured fallback chain. Returns an error message string
instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Callable, Mapping, Sequence
from contextlib import AbstractContextManager
from pathlib import Path

from .config import DEFAULT_EDITORS

logger = logging.getLogger(__name__)

NO_EDITOR_MESSAGE = "No editor found"


def editor_argv(editor: Sequence[str], target: Path, line: int | None = None) -> list[str]:
    """Build the command line for ``editor`` opening ``target``, at ``line`` when given.

    VS Code takes ``--goto path:line``; vi-style editors take ``+line``.
    Other editors ignore the line number.
    """
    cmd = list(editor)
    name = os.path.basename(cmd[0]) if cmd else ""
    if line is None or line <= 0:
        return [*cmd, str(target)]
    if name == "code":
        return [*cmd, "--goto", f"{target}:{line}"]
    if name in {"nvim", "vim", "vi", "nano"}:
        return [*cmd, f"+{line}", str(target)]
    return [*cmd, str(target)]


def editor_candidates(
    editors: Sequence[str] = DEFAULT_EDITORS,
    environ: Mapping[str, str] | None = None,
) -> list[list[str]]:
    env = os.environ if environ is None else environ
    candidates: list[list[str]] = []
    editor_env = env.get("EDITOR", "").strip()
    if editor_env:
        cmd = shlex.split(editor_env)
        if cmd:
            candidates.append(cmd)
    candidates.extend([name] for name in editors if name)
    return candidates


def run_foreground(argv: Sequence[str], suspend: Callable[[], AbstractContextManager]) -> str | None:
    """Run an interactive program with the terminal handed over to it."""
    with suspend():
        try:
            subprocess.run(list(argv), check=False)
        except OSError as exc:
            logger.warning("failed to run %s: %s", argv[0], exc)
            return f"Failed to run {argv[0]}: {exc.strerror or exc}"
    return None


def launch_editor(
    target: Path,
    suspend: Callable[[], AbstractContextManager],
    line: int | None = None,
    *,
    editors: Sequence[str] = DEFAULT_EDITORS,
    environ: Mapping[str, str] | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> str | None:
    """Open ``target`` in the first editor that can be found on ``PATH``."""
    for cmd in editor_candidates(editors, environ):
        if which(cmd[0]) is None:
            continue
        error = run_foreground(editor_argv(cmd, target, line), suspend)
        if error is None:
            return None
        logger.info("editor %s failed: %s", cmd[0], error)
    return NO_EDITOR_MESSAGE
