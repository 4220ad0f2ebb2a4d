"""Regression tests for raw-key decoding and key-combo dispatch.

Covers ESC timing, arrow and page sequences, and control-key token mapping.
"""

import os
import time
import unittest

from termtools.session import keys as keys_mod


def _read_all(data: bytes, count: int) -> list[str]:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, data)
        return [keys_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
    finally:
        os.close(read_fd)
        os.close(write_fd)


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        keys_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        keys_mod._PENDING_BYTES.clear()

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        key = _read_all(b"\x1b", 1)[0]
        elapsed = time.monotonic() - started

        self.assertEqual(key, "ESC")
        self.assertLess(elapsed, 0.2)

    def test_arrow_and_page_sequences(self) -> None:
        self.assertEqual(_read_all(b"\x1b[A\x1b[B", 2), ["UP", "DOWN"])
        self.assertEqual(_read_all(b"\x1b[5~\x1b[6~", 2), ["PAGE_UP", "PAGE_DOWN"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(_read_all(b"\x1ba", 2), ["ESC", "a"])

    def test_control_bytes_map_to_tokens(self) -> None:
        self.assertEqual(
            _read_all(b"\x06\x02\x0e\x10\x15\r\x7f\x03", 8),
            ["CTRL_F", "CTRL_B", "CTRL_N", "CTRL_P", "CTRL_U", "ENTER", "BACKSPACE", "CTRL_C"],
        )

    def test_multibyte_character_is_one_key(self) -> None:
        self.assertEqual(_read_all("é".encode("utf-8"), 1), ["é"])

    def test_timeout_returns_empty_token(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            self.assertEqual(keys_mod.read_key(read_fd, timeout_ms=10), "")
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_printable_check(self) -> None:
        self.assertTrue(keys_mod.is_printable_key("x"))
        self.assertTrue(keys_mod.is_printable_key(" "))
        self.assertFalse(keys_mod.is_printable_key("UP"))
        self.assertFalse(keys_mod.is_printable_key("\x01"))


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_invokes_bound_handler(self) -> None:
        calls: list[str] = []
        registry = keys_mod.KeyComboRegistry().register_bindings(
            keys_mod.KeyComboBinding(("UP", "CTRL_P"), lambda: calls.append("up") or True),
        )

        self.assertTrue(registry.dispatch("CTRL_P"))
        self.assertEqual(calls, ["up"])
        self.assertIsNone(registry.dispatch("DOWN"))

    def test_later_binding_overrides_earlier(self) -> None:
        registry = keys_mod.KeyComboRegistry()
        registry.register_binding(keys_mod.KeyComboBinding(("ENTER",), lambda: False))
        registry.register_binding(keys_mod.KeyComboBinding(("ENTER",), lambda: True))
        self.assertTrue(registry.dispatch("ENTER"))


if __name__ == "__main__":
    unittest.main()
