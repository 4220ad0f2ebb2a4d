"""Tests for the individual browsing tools and their parsers."""

from __future__ import annotations

import os
import tempfile
import time
import unittest
from pathlib import Path
from unittest import mock

from termtools.config import Settings
from termtools.entry import Entry
from termtools.preview.model import ErrorPreview, TextPreview
from termtools.process import STATUS_FAILED, STATUS_OK, STATUS_SPAWN_ERROR, CommandResult
from termtools.session import Session
from termtools.session.keys import KEY_DOWN, KEY_ENTER
from termtools.tools import (
    EnvTool,
    ExploreTool,
    FindTool,
    HistoryTool,
    KillTool,
    ManTool,
    RecentTool,
    SearchTool,
    TOOL_NAMES,
    build_tool,
)
from termtools.tools.common import display_path, format_size
from termtools.tools.env import value_lines
from termtools.tools.explore import dir_entry_label, list_directory
from termtools.tools.find import matches_extension, parse_extensions, walk_files
from termtools.tools.history import parse_history_line, read_history, recent_commands
from termtools.tools.kill import parse_ps_line, parse_ps_output
from termtools.tools.man import COMMON_PAGES, MAN_ENV, parse_apropos_line
from termtools.tools.recent import read_mru, recently_modified
from termtools.tools.search import build_context_preview, context_lines, read_line_window


class _Runner:
    def __init__(self, **responses: CommandResult) -> None:
        self.responses = responses
        self.calls: list[tuple[str, list[str], dict | None]] = []

    def __call__(self, command, args=(), *, timeout=5.0, env=None, cwd=None):
        self.calls.append((command, list(args), env))
        return self.responses.get(command, _failed(command))


def _ok(command: str, stdout: str = "") -> CommandResult:
    return CommandResult(command=command, args=(), status=STATUS_OK, stdout=stdout, exit_code=0)


def _failed(command: str) -> CommandResult:
    return CommandResult(command=command, args=(), status=STATUS_FAILED, exit_code=1)


def _no_editor(name: str) -> str | None:
    return None


class CommonHelperTests(unittest.TestCase):
    def test_format_size_units(self) -> None:
        self.assertEqual(format_size(512), "512B")
        self.assertEqual(format_size(2048), "2.0KB")
        self.assertEqual(format_size(5 * 1024 * 1024), "5.0MB")

    def test_display_path_is_relative_under_base(self) -> None:
        self.assertEqual(display_path(Path("/a/b/c.txt"), Path("/a")), os.path.join("b", "c.txt"))
        self.assertEqual(display_path(Path("/x/y"), Path("/a")), "/x/y")


class FindToolTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "src").mkdir()
        (self.root / "src" / "main.rs").write_text("fn main() {}\n", encoding="utf-8")
        (self.root / "src" / "lib.RS").write_text("\n", encoding="utf-8")
        (self.root / "README.md").write_text("# readme\n", encoding="utf-8")
        (self.root / ".git").mkdir()
        (self.root / ".git" / "config").write_text("", encoding="utf-8")
        (self.root / "node_modules").mkdir()
        (self.root / "node_modules" / "dep.rs").write_text("", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_extension_parsing(self) -> None:
        self.assertEqual(parse_extensions(" rs, .TOML ,"), frozenset({"rs", "toml"}))
        self.assertIsNone(parse_extensions(""))
        self.assertFalse(matches_extension(Path("Makefile"), frozenset({"rs"})))

    def test_walk_skips_vcs_and_build_dirs(self) -> None:
        names = sorted(path.name for path in walk_files(self.root))
        self.assertEqual(names, ["README.md", "lib.RS", "main.rs"])

    def test_walk_filters_extensions_case_insensitively(self) -> None:
        names = sorted(path.name for path in walk_files(self.root, frozenset({"rs"})))
        self.assertEqual(names, ["lib.RS", "main.rs"])

    def test_symlink_loops_are_not_followed_twice(self) -> None:
        os.symlink(self.root / "src", self.root / "src" / "loop")
        names = [path.name for path in walk_files(self.root, frozenset({"rs"}))]
        self.assertEqual(sorted(names), ["lib.RS", "main.rs"])

    def test_session_filters_paths(self) -> None:
        session = Session(FindTool(self.root, "rs,md", which=_no_editor), initial_query="main")
        self.assertEqual(len(session.all_entries), 3)
        self.assertEqual([entry.payload.name for entry in session.entries], ["main.rs"])
        self.assertIsInstance(session.preview, TextPreview)

    def test_enter_without_editor_prints_path(self) -> None:
        session = Session(FindTool(self.root, "md", which=_no_editor))
        session.handle_key(KEY_ENTER)
        self.assertTrue(session.should_quit)
        self.assertEqual(session.output, str(self.root / "README.md"))


class SearchToolTests(unittest.TestCase):
    def test_context_lines_mark_hit(self) -> None:
        lines = [f"l{n}" for n in range(1, 4)]
        self.assertEqual(context_lines(lines, 2, context=1), ["       1: l1", ">>>    2: l2", "       3: l3"])

    def test_context_is_clamped_at_file_edges(self) -> None:
        lines = [f"l{n}" for n in range(1, 21)]
        out = context_lines(lines, 1)
        self.assertEqual(len(out), 6)
        self.assertTrue(out[0].startswith(">>>"))

    def test_unreadable_file_preview(self) -> None:
        preview = build_context_preview(Path("/nonexistent/file.txt"), 3)
        self.assertIsInstance(preview, ErrorPreview)
        assert isinstance(preview, ErrorPreview)
        self.assertEqual(preview.message, "Could not read file: /nonexistent/file.txt")

    def test_context_preview_reads_only_the_window(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "big.log"
            path.write_text("".join(f"row {n}\n" for n in range(1, 50001)), encoding="utf-8")
            with mock.patch.object(Path, "read_text", side_effect=AssertionError("whole file read")):
                head = build_context_preview(path, 1)
                deep = build_context_preview(path, 40000)

        assert isinstance(head, TextPreview) and isinstance(deep, TextPreview)
        self.assertEqual(len(head.lines), 6)
        self.assertEqual(head.lines[0], ">>>    1: row 1")
        self.assertEqual(len(deep.lines), 11)
        self.assertEqual(deep.lines[0], "    39995: row 39995")
        self.assertEqual(deep.lines[5], ">>> 40000: row 40000")

    def test_read_line_window_stops_at_last_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "crlf.txt"
            path.write_bytes(b"a\r\nb\r\nc\r\nd\r\n")
            self.assertEqual(read_line_window(path, 2, 3), ["b", "c"])
            self.assertEqual(read_line_window(path, 3, 10), ["c", "d"])

    def test_filter_is_live_and_has_no_load_message(self) -> None:
        tool = SearchTool(Path("."), runner=_Runner(), which=_no_editor)
        self.assertTrue(tool.make_filter().live)
        self.assertIsNone(tool.load_message([]))


class KillParsingTests(unittest.TestCase):
    def test_short_and_malformed_rows_are_rejected(self) -> None:
        self.assertIsNone(parse_ps_line("root 12 0.0"))
        self.assertIsNone(parse_ps_line("root abc 0.0 0.0 1 1 ? S 10:00 0:00 x"))

    def test_kernel_threads_are_left_out_even_with_slashes(self) -> None:
        output = "\n".join(
            [
                "root        17  0.0  0.0      0     0 ?        I    Jan01   0:00 [kworker/0:1-events]",
                "root        23  0.1  0.0      0     0 ?        S    Jan01   0:00 [ksoftirqd/0]",
                "alice     4242  2.0  1.5 900000 60000 pts/1    Sl   10:00   1:23 /usr/bin/python3 server.py",
            ]
        )
        processes = parse_ps_output(output)
        self.assertEqual([proc.pid for proc in processes], [4242])
        self.assertEqual(processes[0].name, "python3")

    def test_spawn_failure_surfaces_as_load_error(self) -> None:
        missing = CommandResult(command="ps", args=(), status=STATUS_SPAWN_ERROR, stderr="No such file or directory")
        session = Session(KillTool(runner=_Runner(ps=missing)))
        self.assertEqual(session.status_message, "Error: failed to run ps: No such file or directory")


class ExploreToolTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "beta").mkdir()
        (self.root / "Alpha").mkdir()
        (self.root / "zeta.txt").write_text("z" * 2048, encoding="utf-8")
        (self.root / "apple.txt").write_text("a", encoding="utf-8")
        (self.root / ".hidden").write_text("h", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_listing_order_and_labels(self) -> None:
        items = list_directory(self.root)
        self.assertEqual([dir_entry_label(item) for item in items], ["../", "Alpha/", "beta/", "apple.txt (1B)", "zeta.txt (2.0KB)"])

    def test_enter_on_directory_descends_and_clears_query(self) -> None:
        tool = ExploreTool(self.root, which=_no_editor)
        session = Session(tool, initial_query="bet")
        self.assertEqual([entry.label for entry in session.entries], ["beta/"])

        session.handle_key(KEY_ENTER)

        self.assertEqual(tool.current_dir, self.root / "beta")
        self.assertEqual(session.query, "")
        self.assertEqual([entry.label for entry in session.entries], ["../"])
        self.assertEqual(session.status_message, f"Directory: {self.root / 'beta'} (1 items)")
        self.assertFalse(session.should_quit)

    def test_missing_directory_offers_parent(self) -> None:
        tool = ExploreTool(self.root / "gone", which=_no_editor)
        session = Session(tool)
        self.assertEqual([entry.label for entry in session.entries], ["../"])
        self.assertTrue(session.status_message.startswith("Could not list"))


class HistoryToolTests(unittest.TestCase):
    def test_zsh_prefix_is_stripped(self) -> None:
        self.assertEqual(parse_history_line(": 1700000000:0;git status"), "git status")
        self.assertEqual(parse_history_line(": not a timestamp"), ": not a timestamp")

    def test_recent_commands_newest_first_without_duplicates(self) -> None:
        lines = ["ls", "git status", "", "make", "git status"]
        self.assertEqual(recent_commands(lines, 100), ["git status", "make", "ls"])
        self.assertEqual(recent_commands(lines, 2), ["git status", "make"])

    def test_bash_history_is_preferred(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            home = Path(tmp)
            (home / ".zsh_history").write_text(": 1:0;zsh-cmd\n", encoding="utf-8")
            self.assertEqual(read_history(home, 10), ["zsh-cmd"])
            (home / ".bash_history").write_text("bash-cmd\n", encoding="utf-8")
            self.assertEqual(read_history(home, 10), ["bash-cmd"])

    def test_preview_falls_back_to_help_output(self) -> None:
        help_text = "\n".join(f"usage line {n}" for n in range(40))
        runner = _Runner(man=_ok("man", ""), make=_ok("make", help_text))
        tool = HistoryTool(runner=runner, home=Path("/nonexistent"))

        preview = tool.preview(Entry(label="make -j4", payload="make -j4"))

        assert isinstance(preview, TextPreview)
        self.assertEqual(preview.lines[0], "Help for 'make':")
        self.assertEqual(len(preview.lines), 22)
        self.assertEqual(runner.calls[1][:2], ("make", ["--help"]))

    def test_preview_without_any_help(self) -> None:
        tool = HistoryTool(runner=_Runner(), home=Path("/nonexistent"))
        preview = tool.preview(Entry(label="frob", payload="frob"))
        assert isinstance(preview, TextPreview)
        self.assertEqual(preview.lines, ("No help available for command: frob",))


class EnvToolTests(unittest.TestCase):
    def test_entries_sorted_and_output_pair(self) -> None:
        session = Session(EnvTool({"ZED": "1", "PATH": "/usr/bin:/bin", "HOME": "/home/u"}))
        self.assertEqual([entry.label for entry in session.entries], ["HOME=/home/u", "PATH=/usr/bin:/bin", "ZED=1"])

        session.handle_key(KEY_DOWN)
        assert isinstance(session.preview, TextPreview)
        self.assertEqual(session.preview.lines, ("Value: PATH", "", "/usr/bin", "/bin"))

        session.handle_key(KEY_ENTER)
        self.assertEqual(session.output, "PATH=/usr/bin:/bin")

    def test_filter_matches_values(self) -> None:
        session = Session(EnvTool({"A": "needle", "B": "hay"}), initial_query="NEED")
        self.assertEqual([entry.label for entry in session.entries], ["A=needle"])

    def test_plain_values_stay_on_one_line(self) -> None:
        self.assertEqual(value_lines("a:b"), ["a:b"])


class ManToolTests(unittest.TestCase):
    def test_apropos_parsing(self) -> None:
        page = parse_apropos_line("printf (3)          - formatted output conversion")
        assert page is not None
        self.assertEqual((page.name, page.section, page.description), ("printf", "3", "formatted output conversion"))
        self.assertIsNone(parse_apropos_line("garbage"))

    def test_apropos_failure_uses_common_pages(self) -> None:
        session = Session(ManTool(runner=_Runner()))
        self.assertEqual(len(session.all_entries), len(COMMON_PAGES))
        self.assertEqual(session.entries[0].payload.name, "cat")

    def test_preview_runs_man_with_plain_pager(self) -> None:
        body = "\n".join(f"row {n}" for n in range(80))
        runner = _Runner(apropos=_ok("apropos", "ls (1) - list directory contents\n"), man=_ok("man", body))
        session = Session(ManTool(runner=runner))

        preview = session.preview
        assert isinstance(preview, TextPreview)
        self.assertEqual(len(preview.lines), 50)
        self.assertTrue(preview.truncated)
        man_call = [call for call in runner.calls if call[0] == "man"][0]
        self.assertEqual(man_call[1], ["1", "ls"])
        self.assertEqual(man_call[2], MAN_ENV)

    def test_preview_falls_back_to_whatis(self) -> None:
        runner = _Runner(apropos=_ok("apropos", "ls (1) - list\n"), whatis=_ok("whatis", "ls (1) - list\n"))
        session = Session(ManTool(runner=runner))
        assert isinstance(session.preview, TextPreview)
        self.assertEqual(session.preview.lines[0], "Manual page for: ls")

    def test_enter_opens_page_in_foreground(self) -> None:
        opened: list[list[str]] = []

        def foreground(argv, suspend):
            opened.append(list(argv))
            return None

        runner = _Runner(apropos=_ok("apropos", "ls (1) - list\n"))
        session = Session(ManTool(runner=runner, foreground=foreground))
        session.handle_key(KEY_ENTER)
        self.assertEqual(opened, [["man", "1", "ls"]])
        self.assertTrue(session.should_quit)


class RecentToolTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.home = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_mru_file_newest_first_and_existing_only(self) -> None:
        first = self.home / "first.txt"
        second = self.home / "second.txt"
        first.write_text("1", encoding="utf-8")
        second.write_text("2", encoding="utf-8")
        mru = self.home / "mru.txt"
        mru.write_text(f"{first}\n{self.home / 'deleted.txt'}\n{second}\n", encoding="utf-8")

        self.assertEqual(read_mru(mru, 10), [second, first])
        self.assertEqual(read_mru(mru, 1), [second])
        self.assertIsNone(read_mru(self.home / "missing.txt", 10))

    def test_fallback_scan_skips_hidden_and_old_files(self) -> None:
        fresh = self.home / "fresh.txt"
        fresh.write_text("x", encoding="utf-8")
        stale = self.home / "stale.txt"
        stale.write_text("x", encoding="utf-8")
        old = time.time() - 30 * 24 * 60 * 60
        os.utime(stale, (old, old))
        (self.home / ".secret").write_text("x", encoding="utf-8")

        self.assertEqual(recently_modified(self.home, 10), [fresh])

    def test_tool_uses_scan_without_mru(self) -> None:
        (self.home / "notes.md").write_text("hello\n", encoding="utf-8")
        session = Session(RecentTool(home=self.home, cwd=self.home, which=_no_editor))
        self.assertEqual([entry.payload.name for entry in session.entries], ["notes.md"])
        self.assertEqual(session.status_message, "Found 1 recent files")


class BuildToolTests(unittest.TestCase):
    def test_every_name_builds(self) -> None:
        settings = Settings()
        for name in TOOL_NAMES:
            self.assertEqual(build_tool(name, settings).name, name)

    def test_unknown_name_raises(self) -> None:
        with self.assertRaises(ValueError):
            build_tool("nope", Settings())


if __name__ == "__main__":
    unittest.main()
