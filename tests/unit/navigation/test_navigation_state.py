"""Tests for navigation state transitions and child memory."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fzd.codec import normalize_path
from fzd.lines import build_lines
from fzd.listing import list_entries
from fzd.navigation import EnterKind, NavigationState, logical_cwd


class NavigationStateTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = normalize_path(os.path.realpath(self._tmp.name))
        self.proj = os.path.join(self.root, "proj")
        self.src = os.path.join(self.proj, "src")
        self.readme = os.path.join(self.proj, "README.md")
        os.makedirs(self.src)
        Path(self.readme).write_text("# proj\n", encoding="utf-8")

    def test_down_then_up_preselects_the_directory_just_left(self) -> None:
        state = NavigationState(self.proj)

        self.assertTrue(state.down(self.src))
        self.assertEqual(state.current_dir, self.src)
        self.assertEqual(state.memory[self.proj], "src")

        state.up()
        self.assertEqual(state.current_dir, self.proj)

        frame = build_lines(state.current_dir, list_entries(state.current_dir), state.memory)
        self.assertEqual(frame.preselect, 1)
        self.assertEqual(frame.lines[1].label, "src/")

    def test_up_records_child_in_parent_memory(self) -> None:
        state = NavigationState(self.src)
        state.up()
        self.assertEqual(state.current_dir, self.proj)
        self.assertEqual(state.memory[self.proj], "src")

    def test_up_at_root_stays_at_root(self) -> None:
        state = NavigationState("/")
        state.up()
        self.assertEqual(state.current_dir, "/")
        self.assertEqual(state.memory, {})

    def test_down_ignores_parent_files_and_empty_selection(self) -> None:
        state = NavigationState(self.proj)
        for selected in (None, "", self.root, self.readme, os.path.join(self.proj, "gone")):
            with self.subTest(selected=selected):
                self.assertFalse(state.down(selected))
                self.assertEqual(state.current_dir, self.proj)
        self.assertEqual(state.memory, {})

    def test_enter_on_parent_line_confirms_current_directory(self) -> None:
        state = NavigationState(self.src)
        result = state.resolve_enter(self.proj)
        self.assertEqual(result.kind, EnterKind.CONFIRM)
        self.assertEqual(result.path, self.src)

    def test_enter_classifies_directories_files_and_missing_paths(self) -> None:
        state = NavigationState(self.proj)

        self.assertEqual(state.resolve_enter(self.src).kind, EnterKind.CONFIRM)
        self.assertEqual(state.resolve_enter(self.src).path, self.src)

        edit = state.resolve_enter(self.readme)
        self.assertEqual(edit.kind, EnterKind.EDIT)
        self.assertEqual(edit.path, self.readme)

        self.assertEqual(state.resolve_enter(os.path.join(self.proj, "gone")).kind, EnterKind.IGNORE)
        self.assertEqual(state.resolve_enter(None).kind, EnterKind.IGNORE)
        self.assertEqual(state.current_dir, self.proj)

    def test_reveal_file_moves_to_containing_directory(self) -> None:
        state = NavigationState(self.root)
        state.reveal_file(os.path.join(self.src, "main.py"))
        self.assertEqual(state.current_dir, self.src)
        self.assertEqual(state.memory[self.proj], "src")

    def test_reveal_entry_places_caret_on_directory_hit(self) -> None:
        state = NavigationState("/")
        state.reveal_entry(self.src)
        self.assertEqual(state.current_dir, self.proj)
        self.assertEqual(state.memory.get(state.current_dir), "src")

        state.reveal_entry(self.readme)
        self.assertEqual(state.current_dir, self.proj)
        self.assertEqual(state.memory.get(state.current_dir), "src")

    def test_start_dir_is_normalized(self) -> None:
        state = NavigationState(self.proj + "//")
        self.assertEqual(state.current_dir, self.proj)
        self.assertEqual(state.parent_dir, self.root)


class LogicalCwdTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = os.path.realpath(self._tmp.name)
        self.real = os.path.join(self.root, "real")
        self.link = os.path.join(self.root, "link")
        os.mkdir(self.real)
        os.symlink(self.real, self.link)
        previous = os.getcwd()
        self.addCleanup(os.chdir, previous)
        os.chdir(self.link)

    def test_pwd_with_symlink_component_is_kept(self) -> None:
        with mock.patch.dict(os.environ, {"PWD": self.link}):
            self.assertEqual(logical_cwd(), self.link)

    def test_stale_pwd_falls_back_to_physical_directory(self) -> None:
        with mock.patch.dict(os.environ, {"PWD": self.root}):
            self.assertEqual(logical_cwd(), self.real)


if __name__ == "__main__":
    unittest.main()
