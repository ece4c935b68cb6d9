"""Structured change model built from git status and unified diff text.

Entities are frozen and rebuilt from scratch on every refresh. Consumers
correlate snapshots through ``identity`` keys, never through object identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LineKind(Enum):
    """Classification of one diff body line."""

    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class ChangeEntry:
    """One changed path as reported by a status snapshot."""

    path: str
    status_code: str
    staged: bool = False
    unversioned: bool = False

    @property
    def identity(self) -> tuple[str, bool, bool]:
        return (self.path, self.staged, self.unversioned)


@dataclass(frozen=True)
class DiffLine:
    """Single diff line with its own-side line numbers.

    Added lines carry only ``new_line_number``, removed lines only
    ``old_line_number``; context lines carry both.
    """

    content: str
    kind: LineKind
    old_line_number: int | None = None
    new_line_number: int | None = None

    @property
    def display_number(self) -> int | None:
        if self.kind is LineKind.REMOVED:
            return self.old_line_number
        return self.new_line_number


@dataclass(frozen=True)
class Hunk:
    header: str
    lines: tuple[DiffLine, ...] = ()
    old_start: int = 0
    old_count: int = 0
    new_start: int = 0
    new_count: int = 0


@dataclass(frozen=True)
class FileDiff:
    """Diff for one path on one side (index or worktree)."""

    path: str
    staged: bool = False
    hunks: tuple[Hunk, ...] = ()

    @property
    def identity(self) -> tuple[str, bool]:
        return (self.path, self.staged)

    @property
    def line_count(self) -> int:
        return sum(len(hunk.lines) for hunk in self.hunks)


__all__ = ["LineKind", "ChangeEntry", "DiffLine", "Hunk", "FileDiff"]
