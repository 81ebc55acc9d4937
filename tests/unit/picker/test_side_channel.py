"""Tests for the one-shot side channel used by fzf key bindings."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from fzd.picker.channel import SideChannel


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class SideChannelTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.directory = Path(self._tmp.name)

    def test_complete_message_is_returned_without_waiting(self) -> None:
        clock = _FakeClock()
        with SideChannel(self.directory) as channel:
            channel.path.write_text("A:RIGHT:abc\n", encoding="utf-8")
            self.assertEqual(channel.receive(clock=clock, sleep=clock.sleep), "A:RIGHT:abc\n")
        self.assertEqual(clock.sleeps, [])

    def test_empty_channel_times_out_to_none(self) -> None:
        clock = _FakeClock()
        with SideChannel(self.directory) as channel:
            self.assertIsNone(channel.receive(timeout=0.2, poll_interval=0.01, clock=clock, sleep=clock.sleep))
        self.assertGreaterEqual(clock.now, 0.2)
        self.assertLess(clock.now, 0.25)

    def test_late_write_is_picked_up_by_polling(self) -> None:
        clock = _FakeClock()
        with SideChannel(self.directory) as channel:

            def sleep_then_write(seconds: float) -> None:
                clock.sleep(seconds)
                if len(clock.sleeps) == 3:
                    channel.path.write_text("A:ENTER:xyz\n", encoding="utf-8")

            self.assertEqual(channel.receive(clock=clock, sleep=sleep_then_write), "A:ENTER:xyz\n")
        self.assertEqual(len(clock.sleeps), 3)

    def test_partial_message_is_returned_at_deadline(self) -> None:
        clock = _FakeClock()
        with SideChannel(self.directory) as channel:
            channel.path.write_text("A:LEFT:", encoding="utf-8")
            self.assertEqual(channel.receive(clock=clock, sleep=clock.sleep), "A:LEFT:")

    def test_message_is_consumed_once(self) -> None:
        with SideChannel(self.directory) as channel:
            channel.path.write_text("A:CANCEL:\n", encoding="utf-8")
            self.assertEqual(channel.receive(timeout=0), "A:CANCEL:\n")
            self.assertIsNone(channel.receive(timeout=0))

    def test_channel_file_is_removed_on_exit(self) -> None:
        with SideChannel(self.directory) as channel:
            path = channel.path
            self.assertTrue(path.exists())
            self.assertEqual(path.parent, self.directory)
        self.assertFalse(path.exists())

    def test_close_tolerates_already_removed_file(self) -> None:
        channel = SideChannel(self.directory)
        channel.path.unlink()
        channel.close()
        self.assertFalse(channel.path.exists())


if __name__ == "__main__":
    unittest.main()
