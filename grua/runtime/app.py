"""Review session controller and runtime bootstrap.

``AppController`` is the single owner of session state. It is driven by the
main loop on one thread: key events, timer ticks, and drained fetch results
all arrive through its methods, and it decides what to fetch next. Git work
itself happens on background workers (``FetchScheduler``).
"""

from __future__ import annotations

import logging
import sys
import termios
import time
from collections.abc import Callable, Iterable
from functools import partial
from pathlib import Path

from ..config import ReviewConfig
from ..diff_pane import ViewportController, diff_title
from ..errors import TerminalStartError
from ..file_list import SelectionModel
from ..git import ChangeEntry, FileDiff, GitService
from ..highlight import DiffHighlighter
from ..input import DEFAULT_KEY_MAP, KeyComboBinding, KeyComboRegistry, KeyMap, parse_mouse_col_row
from ..render import RenderContext, compose_frame
from ..ui_theme import UITheme, resolve_theme
from .fetch import FETCH_DIFF, FETCH_LIST, FetchResult, FetchScheduler
from .layout import ScreenLayout, compute_layout

logger = logging.getLogger(__name__)

FOCUS_LIST = "list"
FOCUS_DIFF = "diff"
WHEEL_SCROLL_LINES = 3


class AppController:
    """Route input, schedule fetches, and apply their results.

    ``source`` is anything with ``list_changes()`` and
    ``get_diff(path, staged, unversioned)``; ``GitService`` in production.
    """

    def __init__(
        self,
        source,
        theme: UITheme,
        highlighter: DiffHighlighter,
        refresh_seconds: float,
        scheduler: FetchScheduler | None = None,
        key_map: KeyMap = DEFAULT_KEY_MAP,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.source = source
        self.theme = theme
        self.refresh_seconds = refresh_seconds
        self.scheduler = scheduler if scheduler is not None else FetchScheduler()
        self.key_map = key_map
        self._clock = clock

        self.selection = SelectionModel()
        self.viewport = ViewportController(highlighter, theme)
        self.layout: ScreenLayout = compute_layout(80, 24)
        self.viewport.set_size(self.layout.diff_width, self.layout.body_rows)

        self.focus = FOCUS_LIST
        self.show_help = False
        self.error: str | None = None
        self.loaded = False
        self.dirty = True

        self.next_refresh_at: float | None = None
        self._last_list_seq = 0
        self._latest_diff_seq: dict[tuple[str, bool, bool], int] = {}
        self._displayed: tuple[str, bool, bool] | None = None

        self._list_keys = self._build_list_keys()
        self._diff_keys = self._build_diff_keys()

    # Key tables

    def _build_list_keys(self) -> KeyComboRegistry:
        km = self.key_map
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(km.up, lambda: self._navigate(self.selection.move_previous)),
            KeyComboBinding(km.down, lambda: self._navigate(self.selection.move_next)),
            KeyComboBinding(km.top, lambda: self._navigate(self.selection.move_first)),
            KeyComboBinding(km.bottom, lambda: self._navigate(self.selection.move_last)),
        )

    def _build_diff_keys(self) -> KeyComboRegistry:
        km = self.key_map
        viewport = self.viewport
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(km.up, lambda: viewport.scroll(-1)),
            KeyComboBinding(km.down, lambda: viewport.scroll(1)),
            KeyComboBinding(km.top, viewport.scroll_to_top),
            KeyComboBinding(km.bottom, viewport.scroll_to_bottom),
            KeyComboBinding(km.page_up, viewport.half_page_up),
            KeyComboBinding(km.page_down, viewport.half_page_down),
        )

    # Fetch dispatch

    def start(self) -> None:
        """Request the first change list and arm the refresh timer."""
        self.request_list()
        self.next_refresh_at = self._clock() + self.refresh_seconds

    def request_list(self) -> int:
        return self.scheduler.submit(FETCH_LIST, self.source.list_changes)

    def request_diff(self, entry: ChangeEntry) -> int:
        job = partial(self.source.get_diff, entry.path, entry.staged, entry.unversioned)
        seq = self.scheduler.submit(FETCH_DIFF, job, target=entry.identity)
        self._latest_diff_seq[entry.identity] = seq
        return seq

    def tick(self) -> bool:
        """Run the periodic refresh when due. Returns whether it fired."""
        if self.next_refresh_at is None or self.error is not None:
            return False
        now = self._clock()
        if now < self.next_refresh_at:
            return False
        self.next_refresh_at = now + self.refresh_seconds
        self.request_list()
        selected = self.selection.selected()
        if selected is not None:
            self.request_diff(selected)
        return True

    # Result application

    def poll_results(self) -> bool:
        return self.apply_results(self.scheduler.drain_results())

    def apply_results(self, results: Iterable[FetchResult]) -> bool:
        changed = False
        for result in results:
            changed = self.apply_result(result) or changed
        return changed

    def apply_result(self, result: FetchResult) -> bool:
        """Apply one fetch result unless it is stale. Returns whether state changed."""
        if self.error is not None:
            return False
        if not result.ok:
            self.error = str(result.error) or type(result.error).__name__
            self.show_help = False
            self.dirty = True
            logger.error("%s fetch failed: %s", result.kind, self.error)
            return True
        if result.kind == FETCH_LIST:
            return self._apply_list(result)
        if result.kind == FETCH_DIFF:
            return self._apply_diff(result)
        logger.warning("ignoring fetch result of unknown kind %r", result.kind)
        return False

    def _apply_list(self, result: FetchResult) -> bool:
        if result.seq <= self._last_list_seq:
            logger.debug("dropping stale list result #%d", result.seq)
            return False
        self._last_list_seq = result.seq

        before = self.selection.selected()
        entries: list[ChangeEntry] = list(result.payload)
        self.selection.replace(entries)
        live = {entry.identity for entry in entries}
        self._latest_diff_seq = {key: seq for key, seq in self._latest_diff_seq.items() if key in live}
        self.loaded = True
        self.dirty = True

        after = self.selection.selected()
        if after is None:
            self.viewport.clear()
            self._displayed = None
            return True
        before_identity = before.identity if before is not None else None
        if after.identity != before_identity or self._displayed is None:
            self.request_diff(after)
        return True

    def _apply_diff(self, result: FetchResult) -> bool:
        selected = self.selection.selected()
        if selected is None or result.target != selected.identity:
            logger.debug("dropping diff result #%d for unselected %r", result.seq, result.target)
            return False
        if result.seq != self._latest_diff_seq.get(selected.identity):
            logger.debug("dropping superseded diff result #%d", result.seq)
            return False
        diff: FileDiff = result.payload
        self.viewport.set_diff(diff)
        self._displayed = selected.identity
        self.dirty = True
        return True

    # Input

    def _navigate(self, move: Callable[[], bool]) -> bool:
        if not move():
            return False
        selected = self.selection.selected()
        if selected is not None and selected.identity != self._displayed:
            self.request_diff(selected)
        return True

    def toggle_focus(self) -> None:
        self.focus = FOCUS_DIFF if self.focus == FOCUS_LIST else FOCUS_LIST
        self.dirty = True

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token. Returns ``True`` when the session should end."""
        km = self.key_map
        if key in km.quit:
            return True
        if self.error is not None:
            return False
        if key in km.help:
            self.show_help = not self.show_help
            self.dirty = True
            return False
        if key in km.switch_pane:
            self.toggle_focus()
            return False
        if self.show_help:
            self.show_help = False
            self.dirty = True
            return False

        if key.startswith("MOUSE_WHEEL_"):
            changed = self._handle_wheel(key)
        else:
            registry = self._list_keys if self.focus == FOCUS_LIST else self._diff_keys
            changed = bool(registry.dispatch(key))
        if changed:
            self.dirty = True
        return False

    def _handle_wheel(self, key: str) -> bool:
        col, row = parse_mouse_col_row(key)
        if col is None or row is None or row > self.layout.pane_rows:
            return False
        upward = key.startswith("MOUSE_WHEEL_UP")
        if col <= self.layout.list_width:
            move = self.selection.move_previous if upward else self.selection.move_next
            return self._navigate(move)
        if col >= self.layout.diff_x:
            return self.viewport.scroll(-WHEEL_SCROLL_LINES if upward else WHEEL_SCROLL_LINES)
        return False

    def resize(self, columns: int, rows: int) -> bool:
        layout = compute_layout(columns, rows)
        if layout == self.layout:
            return False
        self.layout = layout
        self.viewport.set_size(layout.diff_width, layout.body_rows)
        self.dirty = True
        return True

    # Rendering

    def _diff_title_and_message(self) -> tuple[str, str]:
        selected = self.selection.selected()
        if selected is None:
            return diff_title(None), "No changes" if self.loaded else "Loading..."
        if self._displayed != selected.identity or self.viewport.diff is None:
            pending = FileDiff(path=selected.path, staged=selected.staged)
            return diff_title(pending, selected.unversioned), "Loading diff..."
        title = diff_title(self.viewport.diff, selected.unversioned)
        if not self.viewport.diff.hunks:
            return title, "No textual changes"
        return title, ""

    def render_context(self) -> RenderContext:
        title, message = self._diff_title_and_message()
        return RenderContext(
            theme=self.theme,
            width=self.layout.columns,
            height=self.layout.rows,
            list_width=self.layout.list_width,
            selection=self.selection,
            viewport=self.viewport,
            list_focused=self.focus == FOCUS_LIST,
            loaded=self.loaded,
            diff_title=title,
            diff_message=message,
            show_help=self.show_help,
            error=self.error,
        )

    def render_frame(self) -> list[str]:
        return compose_frame(self.render_context())


def run_review(config: ReviewConfig, repo_root: Path) -> None:
    """Start an interactive review session for ``repo_root``."""
    from .loop import run_main_loop
    from .terminal import TerminalController

    theme = resolve_theme(config.theme, no_color=config.no_color)
    highlighter = DiffHighlighter(theme, style=config.style, no_color=config.no_color)
    source = GitService(repo_root, extensions=config.extensions, include_untracked=config.show_untracked)
    controller = AppController(source, theme, highlighter, config.refresh_seconds)

    try:
        stdin_fd = sys.stdin.fileno()
        terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    except (termios.error, OSError) as exc:
        raise TerminalStartError(str(exc)) from exc
    logger.info("reviewing %s (refresh every %.1fs)", repo_root, config.refresh_seconds)
    controller.start()
    run_main_loop(controller, terminal, stdin_fd)


__all__ = ["AppController", "FOCUS_DIFF", "FOCUS_LIST", "run_review"]
