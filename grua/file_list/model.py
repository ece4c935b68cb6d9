"""Grouped change list with a cursor that survives list replacement.

Rows form one flat sequence: a non-selectable header per non-empty group
followed by that group's entries. Cursor movement skips headers and wraps.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..git.models import ChangeEntry

GROUP_STAGED = "staged"
GROUP_UNSTAGED = "unstaged"
GROUP_UNTRACKED = "untracked"
GROUP_ORDER: tuple[tuple[str, str], ...] = (
    (GROUP_STAGED, "STAGED"),
    (GROUP_UNSTAGED, "UNSTAGED"),
    (GROUP_UNTRACKED, "UNTRACKED"),
)


def group_for(entry: ChangeEntry) -> str:
    if entry.unversioned:
        return GROUP_UNTRACKED
    if entry.staged:
        return GROUP_STAGED
    return GROUP_UNSTAGED


@dataclass(frozen=True)
class ListRow:
    """One display row: a group header or a change entry."""

    label: str
    group: str
    entry: ChangeEntry | None = None

    @property
    def selectable(self) -> bool:
        return self.entry is not None


class SelectionModel:
    """Ordered, grouped change list plus cursor.

    ``replace`` keeps the cursor on the previously selected identity key when
    that entry is still present, otherwise falls back to the first entry.
    """

    def __init__(self) -> None:
        self._rows: list[ListRow] = []
        self._cursor: int | None = None
        self.start = 0

    @property
    def rows(self) -> tuple[ListRow, ...]:
        return tuple(self._rows)

    @property
    def cursor(self) -> int | None:
        return self._cursor

    @property
    def entry_count(self) -> int:
        return sum(1 for row in self._rows if row.selectable)

    def _selectable_indices(self) -> list[int]:
        return [idx for idx, row in enumerate(self._rows) if row.selectable]

    def _index_of(self, identity: tuple[str, bool, bool]) -> int | None:
        for idx, row in enumerate(self._rows):
            if row.entry is not None and row.entry.identity == identity:
                return idx
        return None

    def replace(self, entries: Iterable[ChangeEntry]) -> None:
        previous = self.selected()

        grouped: dict[str, list[ChangeEntry]] = {name: [] for name, _title in GROUP_ORDER}
        for entry in entries:
            grouped[group_for(entry)].append(entry)

        rows: list[ListRow] = []
        for name, title in GROUP_ORDER:
            members = grouped[name]
            if not members:
                continue
            rows.append(ListRow(label=title, group=name))
            rows.extend(ListRow(label=entry.path, group=name, entry=entry) for entry in members)
        self._rows = rows

        self._cursor = self._index_of(previous.identity) if previous is not None else None
        if self._cursor is None:
            selectable = self._selectable_indices()
            self._cursor = selectable[0] if selectable else None
        if self._cursor is None:
            self.start = 0

    def _step(self, delta: int) -> bool:
        selectable = self._selectable_indices()
        if not selectable:
            return False
        if self._cursor is None or self._cursor not in selectable:
            self._cursor = selectable[0] if delta > 0 else selectable[-1]
            return True
        if len(selectable) == 1:
            return False
        position = selectable.index(self._cursor)
        self._cursor = selectable[(position + delta) % len(selectable)]
        return True

    def move_next(self) -> bool:
        """Advance to the next entry, wrapping to the first. Returns whether the cursor moved."""
        return self._step(1)

    def move_previous(self) -> bool:
        return self._step(-1)

    def _jump(self, target: int | None) -> bool:
        if target is None or target == self._cursor:
            return False
        self._cursor = target
        return True

    def move_first(self) -> bool:
        selectable = self._selectable_indices()
        return self._jump(selectable[0] if selectable else None)

    def move_last(self) -> bool:
        selectable = self._selectable_indices()
        return self._jump(selectable[-1] if selectable else None)

    def selected(self) -> ChangeEntry | None:
        if self._cursor is None or not (0 <= self._cursor < len(self._rows)):
            return None
        return self._rows[self._cursor].entry

    def scroll_into_view(self, visible_rows: int) -> int:
        """Adjust and return the first visible row so the cursor stays on screen."""
        visible_rows = max(1, visible_rows)
        if self._cursor is not None:
            # Keep a group's header in view together with its first entry.
            anchor = self._cursor
            if anchor > 0 and not self._rows[anchor - 1].selectable:
                anchor -= 1
            if anchor < self.start:
                self.start = anchor
            elif self._cursor >= self.start + visible_rows:
                self.start = self._cursor - visible_rows + 1
        self.start = max(0, min(self.start, max(0, len(self._rows) - visible_rows)))
        return self.start


__all__ = [
    "GROUP_ORDER",
    "GROUP_STAGED",
    "GROUP_UNSTAGED",
    "GROUP_UNTRACKED",
    "ListRow",
    "SelectionModel",
    "group_for",
]
