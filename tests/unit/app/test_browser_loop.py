"""End-to-end tests for the browse loop with a scripted picker.

Each scripted action stands in for one fzf invocation; the real listing,
navigation, and frame-building code runs against a temporary tree.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from fzd.app import EXIT_CANCELLED, EXIT_OK, Browser, BrowseResult, display_prompt
from fzd.codec import decode_token, encode_path, normalize_path
from fzd.config import FzdConfig
from fzd.navigation import NavigationState
from fzd.picker import CANCEL, Action, ActionKind, PickerSession


class _ScriptedPicker:
    def __init__(self, actions: list[Action]) -> None:
        self.actions = list(actions)
        self.frames: list[tuple[str, str, int | None]] = []

    def run_frame(self, lines_text: str, prompt: str, preselect: int | None = None) -> Action:
        self.frames.append((lines_text, prompt, preselect))
        if not self.actions:
            return CANCEL
        return self.actions.pop(0)

    def labels(self, index: int) -> list[str]:
        return [line.split("\t", 1)[1] for line in self.frames[index][0].splitlines()]

    def paths(self, index: int) -> list[str | None]:
        return [decode_token(line.split("\t", 1)[0]) for line in self.frames[index][0].splitlines()]


class _RecordingOverlay:
    def __init__(self, result: str | None) -> None:
        self.result = result
        self.states: list[NavigationState] = []

    def run(self, state: NavigationState) -> str | None:
        self.states.append(state)
        return self.result


class BrowserLoopTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = normalize_path(os.path.realpath(self._tmp.name))
        self.proj = os.path.join(self.root, "proj")
        self.src = os.path.join(self.proj, "src")
        self.readme = os.path.join(self.proj, "README.md")
        os.makedirs(self.src)
        Path(self.readme).write_text("# proj\n", encoding="utf-8")
        self.opened: list[str] = []

    def _browser(self, start: str, actions: list[Action], overlay=None) -> tuple[Browser, _ScriptedPicker]:
        picker = _ScriptedPicker(actions)
        browser = Browser(
            FzdConfig(),
            picker,
            NavigationState(start),
            open_file=self.opened.append,
            overlay=overlay or _RecordingOverlay(None),
        )
        return browser, picker

    def test_down_then_up_lands_caret_on_previous_child(self) -> None:
        browser, picker = self._browser(
            self.proj,
            [Action(ActionKind.DOWN, encode_path(self.src)), Action(ActionKind.UP, "")],
        )

        result = browser.run()

        self.assertEqual(result, BrowseResult(EXIT_CANCELLED))
        self.assertEqual(len(picker.frames), 3)
        self.assertEqual(picker.labels(0), ["../", "src/", "README.md"])
        self.assertIsNone(picker.frames[0][2])
        self.assertEqual(picker.paths(1)[0], self.proj)
        self.assertEqual(picker.frames[2][2], 1)
        self.assertEqual(picker.labels(2)[1], "src/")

    def test_enter_on_parent_line_confirms_current_directory(self) -> None:
        browser, _picker = self._browser(self.src, [Action(ActionKind.ENTER, encode_path(self.proj))])
        self.assertEqual(browser.run(), BrowseResult(EXIT_OK, self.src))

    def test_enter_on_directory_confirms_it(self) -> None:
        browser, _picker = self._browser(self.proj, [Action(ActionKind.ENTER, encode_path(self.src))])
        self.assertEqual(browser.run(), BrowseResult(EXIT_OK, self.src))

    def test_enter_on_file_opens_editor_and_redraws_same_directory(self) -> None:
        browser, picker = self._browser(self.proj, [Action(ActionKind.ENTER, encode_path(self.readme))])

        result = browser.run()

        self.assertTrue(result.cancelled)
        self.assertEqual(self.opened, [self.readme])
        self.assertEqual(len(picker.frames), 2)
        self.assertEqual(picker.frames[0], picker.frames[1])

    def test_escape_on_first_frame_cancels(self) -> None:
        browser, picker = self._browser(self.proj, [CANCEL])
        self.assertEqual(browser.run().status, EXIT_CANCELLED)
        self.assertEqual(len(picker.frames), 1)

    def test_empty_and_garbled_selections_redraw(self) -> None:
        browser, picker = self._browser(
            self.proj,
            [
                Action(ActionKind.ENTER, ""),
                Action(ActionKind.DOWN, "%%%"),
                Action(ActionKind.DOWN, encode_path(self.readme)),
            ],
        )
        self.assertTrue(browser.run().cancelled)
        self.assertEqual(len(picker.frames), 4)
        self.assertEqual(browser.state.current_dir, self.proj)

    def test_up_from_root_stays_at_root(self) -> None:
        browser, picker = self._browser("/", [Action(ActionKind.UP, "")])
        browser.run()
        self.assertEqual(picker.frames[0][1], "/ > ")
        self.assertEqual(picker.paths(1)[0], "/")
        self.assertEqual(browser.state.current_dir, "/")

    def test_search_confirming_a_directory_ends_the_session(self) -> None:
        overlay = _RecordingOverlay(self.src)
        browser, _picker = self._browser(self.root, [Action(ActionKind.SEARCH, "")], overlay=overlay)
        self.assertEqual(browser.run(), BrowseResult(EXIT_OK, self.src))
        self.assertIs(overlay.states[0], browser.state)

    def test_search_without_result_resumes_browsing(self) -> None:
        overlay = _RecordingOverlay(None)
        browser, picker = self._browser(self.root, [Action(ActionKind.SEARCH, "")], overlay=overlay)
        self.assertTrue(browser.run().cancelled)
        self.assertEqual(len(picker.frames), 2)

    def test_vanished_directory_shows_only_parent_line(self) -> None:
        gone = os.path.join(self.root, "gone")
        browser, picker = self._browser(gone, [])
        browser.run()
        self.assertEqual(picker.labels(0), ["../"])
        self.assertEqual(picker.paths(0), [self.root])


class FzfSubprocessTests(unittest.TestCase):
    """Runs the browser against a stand-in fzf script that records its stdin."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = normalize_path(os.path.realpath(self._tmp.name))
        self.browse_dir = os.path.join(self.root, "browse")
        os.mkdir(self.browse_dir)
        self.capture = os.path.join(self.root, "stdin.bin")
        self.script = os.path.join(self.root, "fake-fzf")
        Path(self.script).write_text(f"#!/bin/sh\ncat > '{self.capture}'\nexit 130\n", encoding="utf-8")
        os.chmod(self.script, 0o755)

    def test_non_utf8_filename_reaches_fzf_and_session_cancels(self) -> None:
        with open(os.path.join(os.fsencode(self.browse_dir), b"bad\xff.txt"), "wb") as handle:
            handle.write(b"x\n")
        picker = PickerSession(self.script, runtime_dir=Path(self.root), wait_timeout=0.0)
        browser = Browser(FzdConfig(), picker, NavigationState(self.browse_dir), open_file=lambda path: None)

        result = browser.run()

        self.assertTrue(result.cancelled)
        with open(self.capture, "rb") as handle:
            sent = handle.read()
        self.assertIn(b"\tbad\xff.txt\n", sent)
        self.assertEqual(sent.count(b"\n"), 2)
        self.assertFalse(any(name.startswith("fzd-ctrl-") for name in os.listdir(self.root)))


class DisplayPromptTests(unittest.TestCase):
    def test_home_is_abbreviated(self) -> None:
        self.assertEqual(display_prompt("/home/u/proj", home="/home/u"), "~/proj/ > ")
        self.assertEqual(display_prompt("/home/u", home="/home/u"), "~/ > ")
        self.assertEqual(display_prompt("/home/user2", home="/home/u"), "/home/user2/ > ")
        self.assertEqual(display_prompt("/", home="/home/u"), "/ > ")


if __name__ == "__main__":
    unittest.main()
