"""Tests for editor resolution and launch."""

from __future__ import annotations

import os
import tempfile
import unittest
from unittest import mock

from fzd.editor import FALLBACK_EDITOR, launch_editor, resolve_editor_command


def _which(*available: str):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class ResolveEditorCommandTests(unittest.TestCase):
    def test_configured_editor_wins(self) -> None:
        cmd = resolve_editor_command("nvim -u NONE", {"EDITOR": "vim"}, _which("nvim", "vim"))
        self.assertEqual(cmd, ["nvim", "-u", "NONE"])

    def test_editor_then_visual(self) -> None:
        self.assertEqual(resolve_editor_command(None, {"EDITOR": "vim", "VISUAL": "code"}, _which("vim", "code")), ["vim"])
        self.assertEqual(resolve_editor_command(None, {"EDITOR": "", "VISUAL": "code -w"}, _which("code")), ["code", "-w"])

    def test_missing_programs_fall_back_to_micro(self) -> None:
        self.assertEqual(resolve_editor_command("ghost", {"EDITOR": "phantom"}, _which()), [FALLBACK_EDITOR])
        self.assertEqual(resolve_editor_command(None, {"EDITOR": "'unterminated"}, _which()), [FALLBACK_EDITOR])


class LaunchEditorTests(unittest.TestCase):
    def test_non_file_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIn("is not a file", launch_editor(tmp))

    def test_runs_editor_on_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "notes.txt")
            with open(target, "w", encoding="utf-8") as handle:
                handle.write("x\n")
            with mock.patch("fzd.editor.resolve_editor_command", return_value=["vim"]):
                with mock.patch("fzd.editor.subprocess.run") as run:
                    self.assertIsNone(launch_editor(target))
        self.assertEqual(run.call_args.args[0], ["vim", "--", target])

    def test_launch_failure_is_reported(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "notes.txt")
            with open(target, "w", encoding="utf-8") as handle:
                handle.write("x\n")
            with mock.patch("fzd.editor.resolve_editor_command", return_value=["micro"]):
                with mock.patch("fzd.editor.subprocess.run", side_effect=FileNotFoundError("micro")):
                    self.assertIn("Failed to launch editor", launch_editor(target))


if __name__ == "__main__":
    unittest.main()
