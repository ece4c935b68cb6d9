"""Tests for the main event loop wiring."""

from __future__ import annotations

import contextlib
import os
import unittest

from grua.runtime.loop import run_main_loop


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextlib.contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class _FakeController:
    def __init__(self, quit_on: str = "q") -> None:
        self.quit_on = quit_on
        self.dirty = True
        self.sizes: list[tuple[int, int]] = []
        self.keys: list[str] = []
        self.polls = 0
        self.ticks = 0

    def resize(self, columns: int, rows: int) -> bool:
        self.sizes.append((columns, rows))
        return False

    def poll_results(self) -> bool:
        self.polls += 1
        return False

    def tick(self) -> bool:
        self.ticks += 1
        return False

    def render_frame(self) -> list[str]:
        return ["frame"]

    def handle_key(self, key: str) -> bool:
        self.keys.append(key)
        if key == "j":
            self.dirty = True
        return key == self.quit_on


class RunMainLoopTests(unittest.TestCase):
    def test_loop_renders_when_dirty_and_exits_on_quit(self) -> None:
        controller = _FakeController()
        terminal = _FakeTerminal()
        keys = iter(["", "j", "", "q"])
        frames: list[list[str]] = []

        run_main_loop(
            controller,
            terminal,
            0,
            get_terminal_size=lambda _fallback: os.terminal_size((120, 40)),
            read=lambda _fd, timeout_ms: next(keys),
            write=lambda rows: frames.append(list(rows)),
        )

        self.assertEqual(controller.keys, ["j", "q"])
        self.assertEqual(len(frames), 2)
        self.assertEqual(controller.sizes[0], (120, 40))
        self.assertEqual(controller.polls, 4)
        self.assertEqual(controller.ticks, 4)
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))

    def test_keyboard_interrupt_is_ignored(self) -> None:
        controller = _FakeController()
        terminal = _FakeTerminal()
        calls = {"count": 0}

        def read(_fd, timeout_ms):
            calls["count"] += 1
            if calls["count"] == 1:
                raise KeyboardInterrupt
            return "q"

        run_main_loop(
            controller,
            terminal,
            0,
            get_terminal_size=lambda _fallback: os.terminal_size((80, 24)),
            read=read,
            write=lambda rows: None,
        )

        self.assertEqual(controller.keys, ["q"])

    def test_terminal_is_restored_when_controller_raises(self) -> None:
        controller = _FakeController()
        terminal = _FakeTerminal()

        def explode(_fd, timeout_ms):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            run_main_loop(
                controller,
                terminal,
                0,
                get_terminal_size=lambda _fallback: os.terminal_size((80, 24)),
                read=explode,
                write=lambda rows: None,
            )

        self.assertEqual(terminal.exited, 1)


if __name__ == "__main__":
    unittest.main()
