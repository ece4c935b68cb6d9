"""Scrollable diff buffer that keeps the reader's place across refreshes.

A diff for the file already on screen (same ``(path, staged)`` identity) keeps
the current scroll offset, clamped to the new content length. A diff for any
other file starts at the top.
"""

from __future__ import annotations

import logging

from ..git.models import FileDiff
from ..highlight import DiffHighlighter
from ..ui_theme import UITheme
from .rendering import render_diff_lines

logger = logging.getLogger(__name__)


class ViewportController:
    """Own the rendered lines for one ``FileDiff`` plus a scroll offset."""

    def __init__(self, highlighter: DiffHighlighter, theme: UITheme, width: int = 80, height: int = 20) -> None:
        self.highlighter = highlighter
        self.theme = theme
        self.width = max(1, width)
        self.height = max(1, height)
        self.diff: FileDiff | None = None
        self.lines: list[str] = []
        self.offset = 0

    @property
    def total_lines(self) -> int:
        return len(self.lines)

    @property
    def max_offset(self) -> int:
        return max(0, self.total_lines - self.height)

    @property
    def identity(self) -> tuple[str, bool] | None:
        return self.diff.identity if self.diff is not None else None

    def _clamp(self, offset: int) -> int:
        return max(0, min(offset, self.max_offset))

    def _render(self) -> None:
        if self.diff is None:
            self.lines = []
            return
        self.lines = render_diff_lines(self.diff, self.highlighter, self.theme, self.width)

    def set_size(self, width: int, height: int) -> None:
        width = max(1, width)
        height = max(1, height)
        rerender = width != self.width
        self.width = width
        self.height = height
        if rerender:
            self._render()
        self.offset = self._clamp(self.offset)

    def set_diff(self, new_diff: FileDiff | None) -> None:
        same_file = new_diff is not None and self.identity == new_diff.identity
        previous_offset = self.offset
        self.diff = new_diff
        self._render()
        self.offset = self._clamp(previous_offset) if same_file else 0
        logger.debug(
            "diff %s: %d lines, offset %d (%s)",
            new_diff.path if new_diff is not None else None,
            self.total_lines,
            self.offset,
            "kept" if same_file else "reset",
        )

    def clear(self) -> None:
        self.set_diff(None)

    def scroll(self, delta: int) -> bool:
        """Scroll by ``delta`` lines. Returns whether the offset changed."""
        target = self._clamp(self.offset + delta)
        if target == self.offset:
            return False
        self.offset = target
        return True

    def half_page_down(self) -> bool:
        return self.scroll(max(1, self.height // 2))

    def half_page_up(self) -> bool:
        return self.scroll(-max(1, self.height // 2))

    def scroll_to_top(self) -> bool:
        return self.scroll(-self.offset)

    def scroll_to_bottom(self) -> bool:
        return self.scroll(self.max_offset - self.offset)

    def visible_lines(self) -> list[str]:
        return self.lines[self.offset : self.offset + self.height]

    def scroll_percent(self) -> int:
        if self.max_offset == 0:
            return 100
        return round(100 * self.offset / self.max_offset)


__all__ = ["ViewportController"]
