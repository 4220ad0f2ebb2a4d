"""Terminal key decoding and key-combo dispatch.

Reads raw bytes from stdin and translates them into normalized key tokens;
printable characters are returned as themselves.
"""

from __future__ import annotations

import os
import select
from collections.abc import Callable
from dataclasses import dataclass

ESC_SEQUENCE_TIMEOUT_MS = 25

KEY_UP = "UP"
KEY_DOWN = "DOWN"
KEY_LEFT = "LEFT"
KEY_RIGHT = "RIGHT"
KEY_PAGE_UP = "PAGE_UP"
KEY_PAGE_DOWN = "PAGE_DOWN"
KEY_ENTER = "ENTER"
KEY_BACKSPACE = "BACKSPACE"
KEY_ESC = "ESC"
KEY_TAB = "TAB"
KEY_CTRL_B = "CTRL_B"
KEY_CTRL_C = "CTRL_C"
KEY_CTRL_F = "CTRL_F"
KEY_CTRL_N = "CTRL_N"
KEY_CTRL_P = "CTRL_P"
KEY_CTRL_U = "CTRL_U"

_CONTROL_BYTES: dict[bytes, str] = {
    b"\x02": KEY_CTRL_B,
    b"\x03": KEY_CTRL_C,
    b"\x06": KEY_CTRL_F,
    b"\x0e": KEY_CTRL_N,
    b"\x10": KEY_CTRL_P,
    b"\x15": KEY_CTRL_U,
    b"\t": KEY_TAB,
    b"\x08": KEY_BACKSPACE,
    b"\x7f": KEY_BACKSPACE,
    b"\r": KEY_ENTER,
    b"\n": KEY_ENTER,
}

_CSI_FINAL: dict[bytes, str] = {
    b"A": KEY_UP,
    b"B": KEY_DOWN,
    b"C": KEY_RIGHT,
    b"D": KEY_LEFT,
}

_CSI_TILDE: dict[bytes, str] = {
    b"5": KEY_PAGE_UP,
    b"6": KEY_PAGE_DOWN,
}

_PENDING_BYTES: list[bytes] = []


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, first: bytes) -> str:
    """Complete a multi-byte UTF-8 character started by ``first``."""
    lead = first[0]
    if lead >= 0xF0:
        missing = 3
    elif lead >= 0xE0:
        missing = 2
    elif lead >= 0xC0:
        missing = 1
    else:
        missing = 0
    data = first
    for _ in range(missing):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token, or ``""`` when nothing arrives within ``timeout_ms``."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    token = _CONTROL_BYTES.get(ch)
    if token is not None:
        return token

    if ch != b"\x1b":
        if ch[0] >= 0x80:
            return _read_utf8_tail(fd, ch)
        return ch.decode("utf-8", errors="replace")

    # Escape / arrow key sequences.
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return KEY_ESC
    if seq not in {b"[", b"O"}:
        _PENDING_BYTES.append(seq)
        return KEY_ESC
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return KEY_ESC
    token = _CSI_FINAL.get(seq)
    if token is not None:
        return token
    token = _CSI_TILDE.get(seq)
    if token is not None:
        tail = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if tail == b"~":
            return token
    return KEY_ESC


def is_printable_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> bool | None:
        """Invoke bound handler for ``key``; ``None`` means no binding matched."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()
