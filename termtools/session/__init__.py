"""Interactive browsing session: state machine, rendering and terminal loop."""

from __future__ import annotations

from .render import FrameOptions, compose_frame
from .state import ActionResult, Session, Tool

__all__ = ["ActionResult", "FrameOptions", "Session", "Tool", "compose_frame"]
