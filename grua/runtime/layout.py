"""Pane geometry for the two-pane review screen."""

from __future__ import annotations

from dataclasses import dataclass

MIN_LIST_WIDTH = 20
MAX_LIST_WIDTH = 35
DIVIDER_WIDTH = 1
STATUS_ROWS = 1
PANE_TITLE_ROWS = 1


def list_pane_width(columns: int) -> int:
    """A quarter of the screen, clamped to ``[MIN_LIST_WIDTH, MAX_LIST_WIDTH]``.

    Narrow terminals still leave at least one column for the diff pane.
    """
    width = max(MIN_LIST_WIDTH, min(MAX_LIST_WIDTH, columns // 4))
    return max(1, min(width, columns - DIVIDER_WIDTH - 1))


@dataclass(frozen=True)
class ScreenLayout:
    columns: int
    rows: int
    list_width: int
    diff_width: int
    pane_rows: int

    @property
    def diff_x(self) -> int:
        """1-based first column of the diff pane."""
        return self.list_width + DIVIDER_WIDTH + 1

    @property
    def body_rows(self) -> int:
        return max(1, self.pane_rows - PANE_TITLE_ROWS)


def compute_layout(columns: int, rows: int) -> ScreenLayout:
    columns = max(1, columns)
    rows = max(1, rows)
    list_width = list_pane_width(columns)
    return ScreenLayout(
        columns=columns,
        rows=rows,
        list_width=list_width,
        diff_width=max(1, columns - list_width - DIVIDER_WIDTH),
        pane_rows=max(0, rows - STATUS_ROWS),
    )


__all__ = ["MAX_LIST_WIDTH", "MIN_LIST_WIDTH", "ScreenLayout", "compute_layout", "list_pane_width"]
