"""Error taxonomy shared by the browsing core.

Core calls raise these; UI boundaries (preview dispatch, filter policies,
tool actions) catch them and degrade to an error preview or status message.
"""

from __future__ import annotations


class TermToolsError(Exception):
    """Base class for recoverable failures inside a browsing session."""


class ProcessSpawnError(TermToolsError):
    """External command could not be started (missing or not executable)."""

    def __init__(self, command: str, detail: str) -> None:
        super().__init__(f"failed to run {command}: {detail}")
        self.command = command
        self.detail = detail


class ProcessTimeoutError(TermToolsError):
    """External command did not finish within its timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(f"{command} timed out after {timeout:g}s")
        self.command = command
        self.timeout = timeout


class ProcessExitError(TermToolsError):
    """External command exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int, stderr: str) -> None:
        detail = stderr.strip() or f"exit code {exit_code}"
        super().__init__(f"{command} failed: {detail}")
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class FileReadError(TermToolsError):
    """File could not be read as text (permissions, binary content, I/O)."""


class ImageDecodeError(TermToolsError):
    """Image container could not be decoded."""


class ImageDimensionError(TermToolsError):
    """Image dimensions are zero or beyond the sanity bound."""

    def __init__(self, width: int, height: int, message: str) -> None:
        super().__init__(message)
        self.width = width
        self.height = height
