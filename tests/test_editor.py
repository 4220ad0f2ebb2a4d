from __future__ import annotations

import contextlib
import unittest
from pathlib import Path
from unittest import mock

from termtools.editor import (
    NO_EDITOR_MESSAGE,
    editor_argv,
    editor_candidates,
    launch_editor,
    run_foreground,
)


class _Suspend:
    def __init__(self) -> None:
        self.entered = 0

    @contextlib.contextmanager
    def __call__(self):
        self.entered += 1
        yield


class EditorArgvTests(unittest.TestCase):
    def test_vi_style_editors_take_plus_line(self) -> None:
        self.assertEqual(editor_argv(["nvim"], Path("a.py"), 12), ["nvim", "+12", "a.py"])
        self.assertEqual(editor_argv(["/usr/bin/nano"], Path("a.py"), 3), ["/usr/bin/nano", "+3", "a.py"])

    def test_vscode_takes_goto(self) -> None:
        self.assertEqual(editor_argv(["code"], Path("a.py"), 7), ["code", "--goto", "a.py:7"])

    def test_without_line_only_path_is_appended(self) -> None:
        self.assertEqual(editor_argv(["code", "-w"], Path("a.py")), ["code", "-w", "a.py"])
        self.assertEqual(editor_argv(["emacs"], Path("a.py"), 4), ["emacs", "a.py"])


class EditorLaunchTests(unittest.TestCase):
    def test_editor_env_is_tried_first(self) -> None:
        candidates = editor_candidates(("vim",), {"EDITOR": "hx --vsplit"})
        self.assertEqual(candidates, [["hx", "--vsplit"], ["vim"]])

    def test_first_available_editor_runs_suspended(self) -> None:
        suspend = _Suspend()
        available = {"vim"}
        with mock.patch("termtools.editor.subprocess.run") as run_mock:
            error = launch_editor(
                Path("notes.md"),
                suspend,
                5,
                editors=("nvim", "vim", "nano"),
                environ={},
                which=lambda name: f"/usr/bin/{name}" if name in available else None,
            )

        self.assertIsNone(error)
        run_mock.assert_called_once_with(["vim", "+5", "notes.md"], check=False)
        self.assertEqual(suspend.entered, 1)

    def test_no_editor_found_is_reported(self) -> None:
        error = launch_editor(
            Path("notes.md"),
            _Suspend(),
            editors=("nvim",),
            environ={},
            which=lambda name: None,
        )
        self.assertEqual(error, NO_EDITOR_MESSAGE)

    def test_spawn_failure_returns_message(self) -> None:
        with mock.patch("termtools.editor.subprocess.run", side_effect=PermissionError(13, "Permission denied")):
            error = run_foreground(["vim", "x"], _Suspend())
        self.assertEqual(error, "Failed to run vim: Permission denied")


if __name__ == "__main__":
    unittest.main()
