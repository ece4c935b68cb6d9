"""Tests for the review session controller.

Fetches are captured by a fake scheduler so each test decides when, and in
which order, results come back.
"""

from __future__ import annotations

import termios
import unittest
from pathlib import Path
from unittest import mock

from grua.ansi import ANSI_ESCAPE_RE
from grua.config import ReviewConfig
from grua.errors import GitError, TerminalStartError
from grua.git.models import ChangeEntry, DiffLine, FileDiff, Hunk, LineKind
from grua.highlight import DiffHighlighter
from grua.runtime import app as app_module
from grua.runtime.app import FOCUS_DIFF, FOCUS_LIST, AppController, run_review
from grua.runtime.fetch import FETCH_DIFF, FETCH_LIST, FetchResult
from grua.ui_theme import PLAIN_THEME


class _FakeScheduler:
    def __init__(self) -> None:
        self.submitted: list[tuple[str, int, object, object]] = []
        self._next_seq = 1

    def submit(self, kind, job, target=None) -> int:
        seq = self._next_seq
        self._next_seq += 1
        self.submitted.append((kind, seq, target, job))
        return seq

    def drain_results(self) -> list:
        return []

    def of_kind(self, kind: str) -> list[tuple[str, int, object, object]]:
        return [item for item in self.submitted if item[0] == kind]

    def last(self, kind: str) -> tuple[str, int, object, object]:
        return self.of_kind(kind)[-1]


class _FakeSource:
    def list_changes(self) -> list[ChangeEntry]:
        return []

    def get_diff(self, path: str, staged: bool, unversioned: bool = False) -> FileDiff:
        return FileDiff(path=path, staged=staged)


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _entry(path: str, staged: bool = False) -> ChangeEntry:
    return ChangeEntry(path=path, status_code="M", staged=staged)


def _diff(path: str, body_lines: int, staged: bool = False) -> FileDiff:
    lines = tuple(
        DiffLine(content=f"l{n}", kind=LineKind.ADDED, new_line_number=n) for n in range(1, body_lines + 1)
    )
    hunk = Hunk(header=f"@@ -0,0 +1,{body_lines} @@", lines=lines, new_start=1, new_count=body_lines)
    return FileDiff(path=path, staged=staged, hunks=(hunk,))


class AppControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scheduler = _FakeScheduler()
        self.clock = _Clock()
        self.app = AppController(
            _FakeSource(),
            PLAIN_THEME,
            DiffHighlighter(PLAIN_THEME, no_color=True),
            refresh_seconds=10.0,
            scheduler=self.scheduler,
            clock=self.clock,
        )
        self.app.resize(100, 30)

    def _deliver_list(self, entries: list[ChangeEntry], seq: int | None = None) -> bool:
        if seq is None:
            seq = self.scheduler.last(FETCH_LIST)[1]
        return self.app.apply_result(FetchResult(kind=FETCH_LIST, seq=seq, payload=entries))

    def _deliver_diff(self, diff: FileDiff, seq: int | None = None, target=None) -> bool:
        _kind, last_seq, last_target, _job = self.scheduler.last(FETCH_DIFF)
        return self.app.apply_result(
            FetchResult(
                kind=FETCH_DIFF,
                seq=last_seq if seq is None else seq,
                target=last_target if target is None else target,
                payload=diff,
            )
        )

    def test_start_requests_list_and_arms_timer(self) -> None:
        self.app.start()

        self.assertEqual(len(self.scheduler.of_kind(FETCH_LIST)), 1)
        self.assertEqual(self.app.next_refresh_at, 110.0)

    def test_first_list_selects_first_entry_and_requests_its_diff(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])

        self.assertEqual(self.app.selection.selected().path, "a.py")
        self.assertEqual(self.scheduler.last(FETCH_DIFF)[2], ("a.py", False, False))

    def test_tick_fires_only_when_due_and_rearms(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py")])
        diffs_before = len(self.scheduler.of_kind(FETCH_DIFF))

        self.clock.now = 105.0
        self.assertFalse(self.app.tick())
        self.clock.now = 110.0
        self.assertTrue(self.app.tick())

        self.assertEqual(len(self.scheduler.of_kind(FETCH_LIST)), 2)
        self.assertEqual(len(self.scheduler.of_kind(FETCH_DIFF)), diffs_before + 1)
        self.assertEqual(self.app.next_refresh_at, 120.0)

    def test_refresh_keeps_selection_and_scroll(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py"), _entry("c.py")])
        self._deliver_diff(_diff("a.py", 5))
        self.app.handle_key("j")
        self._deliver_diff(_diff("b.py", 100))
        self.app.handle_key("TAB")
        self.app.handle_key("CTRL_D")
        offset = self.app.viewport.offset
        self.assertGreater(offset, 0)

        self.clock.now = 200.0
        self.app.tick()
        self._deliver_list([_entry("a.py"), _entry("b.py"), _entry("c.py"), _entry("d.py")])
        self._deliver_diff(_diff("b.py", 110))

        self.assertEqual(self.app.selection.selected().path, "b.py")
        self.assertEqual(self.app.viewport.offset, offset)

    def test_navigation_requests_diff_for_new_selection(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])
        self._deliver_diff(_diff("a.py", 3))

        self.app.handle_key("j")

        self.assertEqual(self.scheduler.last(FETCH_DIFF)[2], ("b.py", False, False))

    def test_returning_to_displayed_file_does_not_refetch(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])
        self._deliver_diff(_diff("a.py", 3))
        diffs_before = len(self.scheduler.of_kind(FETCH_DIFF))

        self.app.handle_key("j")
        self.app.handle_key("k")

        new_requests = self.scheduler.of_kind(FETCH_DIFF)[diffs_before:]
        self.assertEqual([target for _kind, _seq, target, _job in new_requests], [("b.py", False, False)])
        self.assertEqual(self.app.selection.selected().path, "a.py")
        self.assertEqual(self.app.viewport.diff.path, "a.py")

    def test_list_refresh_keeping_displayed_selection_does_not_refetch(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])
        self._deliver_diff(_diff("a.py", 3))
        diffs_before = len(self.scheduler.of_kind(FETCH_DIFF))

        self.app.request_list()
        self.assertTrue(self._deliver_list([_entry("a.py"), _entry("b.py"), _entry("c.py")]))

        self.assertEqual(self.app.selection.selected().path, "a.py")
        self.assertEqual(len(self.scheduler.of_kind(FETCH_DIFF)), diffs_before)

    def test_list_refresh_forgets_diff_sequences_of_vanished_files(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])
        self.app.handle_key("j")
        _kind, b_seq, b_target, _job = self.scheduler.last(FETCH_DIFF)
        self.assertIn(b_target, self.app._latest_diff_seq)

        self.app.request_list()
        self._deliver_list([_entry("a.py")])

        self.assertEqual(set(self.app._latest_diff_seq), {("a.py", False, False)})
        self.assertFalse(self._deliver_diff(_diff("b.py", 4), seq=b_seq, target=b_target))

    def test_diff_for_unselected_file_is_dropped(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])
        _kind, a_seq, a_target, _job = self.scheduler.last(FETCH_DIFF)
        self.app.handle_key("j")

        applied = self._deliver_diff(_diff("a.py", 3), seq=a_seq, target=a_target)

        self.assertFalse(applied)
        self.assertIsNone(self.app.viewport.diff)

    def test_superseded_diff_for_same_file_is_dropped(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py")])
        older_seq = self.scheduler.last(FETCH_DIFF)[1]
        self.clock.now = 200.0
        self.app.tick()
        newer_seq = self.scheduler.last(FETCH_DIFF)[1]

        self.assertTrue(self._deliver_diff(_diff("a.py", 7), seq=newer_seq))
        self.assertFalse(self._deliver_diff(_diff("a.py", 2), seq=older_seq))
        self.assertEqual(self.app.viewport.diff.hunks[0].new_count, 7)

    def test_out_of_order_list_result_is_dropped(self) -> None:
        self.app.start()
        first_seq = self.scheduler.last(FETCH_LIST)[1]
        self.clock.now = 200.0
        self.app.tick()
        second_seq = self.scheduler.last(FETCH_LIST)[1]

        self.assertTrue(self._deliver_list([_entry("new.py")], seq=second_seq))
        self.assertFalse(self._deliver_list([_entry("old.py")], seq=first_seq))
        self.assertEqual(self.app.selection.selected().path, "new.py")

    def test_empty_list_clears_viewport(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py")])
        self._deliver_diff(_diff("a.py", 3))

        self.clock.now = 200.0
        self.app.tick()
        self._deliver_list([])

        self.assertIsNone(self.app.viewport.diff)
        text = ANSI_ESCAPE_RE.sub("", "\n".join(self.app.render_frame()))
        self.assertIn("No changes", text)

    def test_fetch_error_enters_inert_error_display(self) -> None:
        self.app.start()
        seq = self.scheduler.last(FETCH_LIST)[1]

        self.app.apply_result(FetchResult(kind=FETCH_LIST, seq=seq, error=GitError(["status"], "fatal: nope")))

        self.assertIsNotNone(self.app.error)
        self.assertIn("Error: git status failed: fatal: nope", self.app.render_frame()[0])
        self.assertFalse(self.app.handle_key("j"))
        self.assertFalse(self.app.handle_key("?"))
        self.assertFalse(self.app.show_help)
        self.clock.now = 500.0
        self.assertFalse(self.app.tick())
        self.assertFalse(self._deliver_list([_entry("a.py")], seq=seq + 100))
        self.assertTrue(self.app.handle_key("q"))

    def test_quit_keys(self) -> None:
        self.assertTrue(self.app.handle_key("q"))
        self.assertTrue(self.app.handle_key("CTRL_C"))

    def test_help_toggles_and_closes_on_other_keys(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])

        self.app.handle_key("?")
        self.assertTrue(self.app.show_help)
        self.app.handle_key("j")

        self.assertFalse(self.app.show_help)
        self.assertEqual(self.app.selection.selected().path, "a.py")

    def test_tab_switches_focus_and_keys_go_to_focused_pane(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])
        self._deliver_diff(_diff("a.py", 100))

        self.app.handle_key("TAB")
        self.assertEqual(self.app.focus, FOCUS_DIFF)
        self.app.handle_key("j")
        self.assertEqual(self.app.selection.selected().path, "a.py")
        self.assertEqual(self.app.viewport.offset, 1)
        self.app.handle_key("G")
        self.assertEqual(self.app.viewport.offset, self.app.viewport.max_offset)

        self.app.handle_key("TAB")
        self.assertEqual(self.app.focus, FOCUS_LIST)
        self.app.handle_key("G")
        self.assertEqual(self.app.selection.selected().path, "b.py")

    def test_mouse_wheel_targets_pane_under_pointer(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py"), _entry("b.py")])
        self._deliver_diff(_diff("a.py", 100))

        self.app.handle_key("MOUSE_WHEEL_DOWN:60:10")
        self.assertEqual(self.app.viewport.offset, 3)
        self.assertEqual(self.app.selection.selected().path, "a.py")

        self.app.handle_key("MOUSE_WHEEL_DOWN:5:10")
        self.assertEqual(self.app.selection.selected().path, "b.py")

    def test_resize_updates_layout_and_viewport(self) -> None:
        self.assertFalse(self.app.resize(100, 30))
        self.assertTrue(self.app.resize(200, 50))

        self.assertEqual(self.app.layout.list_width, 35)
        self.assertEqual(self.app.viewport.width, 164)
        self.assertEqual(self.app.viewport.height, 48)

    def test_frame_has_one_row_per_terminal_line(self) -> None:
        self.app.start()
        self._deliver_list([_entry("a.py", staged=True)])

        frame = self.app.render_frame()

        self.assertEqual(len(frame), 30)
        text = ANSI_ESCAPE_RE.sub("", "\n".join(frame))
        self.assertIn("STAGED", text)
        self.assertIn("a.py (staged)", text)
        self.assertIn("Loading diff...", text)
        self.assertIn("Gruagach - Change Review Gremlin", frame[-1])


class RunReviewTests(unittest.TestCase):
    def test_terminal_setup_failure_raises_terminal_start_error(self) -> None:
        with (
            mock.patch.object(app_module.sys, "stdin"),
            mock.patch.object(app_module.sys, "stdout"),
            mock.patch("grua.runtime.terminal.TerminalController", side_effect=termios.error(25, "not a tty")),
            mock.patch("grua.runtime.loop.run_main_loop") as run_loop,
        ):
            with self.assertRaises(TerminalStartError):
                run_review(ReviewConfig(no_color=True), Path("/repo"))

        run_loop.assert_not_called()


if __name__ == "__main__":
    unittest.main()
