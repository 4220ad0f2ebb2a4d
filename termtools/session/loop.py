"""Main interactive event loop for a browsing session.

Renders when the session is dirty or the terminal was resized, then polls
for one key and hands it to the session. Feature logic lives in the session
and its tool.
"""

from __future__ import annotations

import logging
import shutil
import sys

from ..config import Settings
from .keys import read_key
from .render import FrameOptions, compose_frame, draw_frame
from .state import Session, Tool
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_POLL_TIMEOUT_MS = 50


def run_main_loop(session: Session, terminal: TerminalController, options: FrameOptions) -> None:
    """Run until the session asks to quit."""
    list_start = 0
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while not session.should_quit:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                session.dirty = True
            if session.dirty:
                frame_options = FrameOptions(
                    width=term.columns,
                    height=term.lines,
                    style=options.style,
                    no_color=options.no_color,
                )
                rows, list_start = compose_frame(session, frame_options, list_start)
                draw_frame(rows, terminal.stdout_fd)
                session.dirty = False

            try:
                key = read_key(terminal.stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)
            except KeyboardInterrupt:
                key = "CTRL_C"
            if key == "":
                continue
            session.handle_key(key)


def run_session(
    tool: Tool,
    settings: Settings,
    *,
    initial_query: str = "",
    style: str | None = None,
    no_color: bool | None = None,
) -> Session:
    """Open a full-screen session for ``tool`` and return it once it ends.

    The returned session carries any ``output`` the tool produced; callers
    print it after the terminal has been restored.
    """
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    session = Session(
        tool,
        page_size=settings.page_size,
        initial_query=initial_query,
        suspend=terminal.suspended,
    )
    options = FrameOptions(
        style=style or settings.preview_style,
        no_color=settings.no_color if no_color is None else no_color,
    )
    logger.debug("starting %s session with %d entries", tool.name, len(session.all_entries))
    run_main_loop(session, terminal, options)
    return session
