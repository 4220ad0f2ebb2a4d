"""Timeout-bounded external command invocation.

Every subprocess the browsing core needs (search backends, ``ps``, ``git``,
``man``) goes through ``run_command``. Results are plain values consumed once
by the caller; nothing here raises for ordinary process failures.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from .errors import ProcessExitError, ProcessSpawnError, ProcessTimeoutError

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_FAILED = "failed"
STATUS_TIMEOUT = "timeout"
STATUS_SPAWN_ERROR = "spawn_error"

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one ``run_command`` call.

    ``stdout`` holds decoded output on success; ``stderr`` holds the failure
    detail for non-zero exits. ``exit_code`` is ``None`` when the process never
    ran to completion (spawn error or timeout).
    """

    command: str
    args: tuple[str, ...]
    status: str
    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = None
    elapsed: float = 0.0
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    @property
    def error(self) -> str | None:
        """Human-readable failure description, or ``None`` on success."""
        if self.status == STATUS_OK:
            return None
        if self.status == STATUS_TIMEOUT:
            return f"{self.command} timed out after {self.timeout:g}s"
        if self.status == STATUS_SPAWN_ERROR:
            return f"failed to run {self.command}: {self.stderr.strip() or 'not found'}"
        detail = self.stderr.strip() or f"exit code {self.exit_code}"
        return f"{self.command} failed: {detail}"

    def check(self) -> str:
        """Return stdout, raising the matching ``TermToolsError`` on failure."""
        if self.status == STATUS_OK:
            return self.stdout
        if self.status == STATUS_TIMEOUT:
            raise ProcessTimeoutError(self.command, self.timeout)
        if self.status == STATUS_SPAWN_ERROR:
            raise ProcessSpawnError(self.command, self.stderr.strip() or "not found")
        raise ProcessExitError(self.command, self.exit_code if self.exit_code is not None else -1, self.stderr)


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def run_command(
    command: str,
    args: Sequence[str] = (),
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> CommandResult:
    """Run ``command`` with ``args`` to completion and capture its output.

    The child is killed once ``timeout`` elapses. ``env`` entries are layered
    over the inherited environment rather than replacing it. Output bytes that
    are not valid UTF-8 are replaced, never rejected.
    """
    argv = [command, *(str(arg) for arg in args)]
    bounded_timeout = max(0.001, float(timeout))
    merged_env = None
    if env:
        merged_env = dict(os.environ)
        merged_env.update(env)

    started = time.monotonic()
    try:
        proc = subprocess.run(
            argv,
            cwd=cwd,
            env=merged_env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=bounded_timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        elapsed = time.monotonic() - started
        logger.warning("%s timed out after %.2fs", command, elapsed)
        return CommandResult(
            command=command,
            args=tuple(argv[1:]),
            status=STATUS_TIMEOUT,
            stdout=_decode(exc.stdout),
            stderr=_decode(exc.stderr),
            elapsed=elapsed,
            timeout=bounded_timeout,
        )
    except OSError as exc:
        logger.warning("failed to spawn %s: %s", command, exc)
        return CommandResult(
            command=command,
            args=tuple(argv[1:]),
            status=STATUS_SPAWN_ERROR,
            stderr=exc.strerror or str(exc),
            elapsed=time.monotonic() - started,
            timeout=bounded_timeout,
        )

    elapsed = time.monotonic() - started
    status = STATUS_OK if proc.returncode == 0 else STATUS_FAILED
    if status != STATUS_OK:
        logger.debug("%s exited with %s", command, proc.returncode)
    return CommandResult(
        command=command,
        args=tuple(argv[1:]),
        status=status,
        stdout=_decode(proc.stdout),
        stderr=_decode(proc.stderr),
        exit_code=proc.returncode,
        elapsed=elapsed,
        timeout=bounded_timeout,
    )
