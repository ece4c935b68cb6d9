"""Pure parsers for ``git status --porcelain`` and unified diff text.

Nothing here touches the filesystem or runs git; callers hand in raw text and
get frozen model objects back. Malformed input degrades to best-effort results
instead of raising, so one odd file never takes the review session down.
"""

from __future__ import annotations

import codecs
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import ChangeEntry, DiffLine, FileDiff, Hunk, LineKind

_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_LENIENT_OLD_RE = re.compile(r"-(\d+)(?:,(\d+))?")
_LENIENT_NEW_RE = re.compile(r"\+(\d+)(?:,(\d+))?")
_RENAME_SEPARATOR = " -> "
_INACTIVE_MARKERS = frozenset({" ", "?", "!"})
NEW_FILE_HEADER_SUFFIX = " (new file)"


def _normalize_extensions(extensions: Iterable[str] | None) -> tuple[str, ...]:
    """Lower-case suffixes and make sure each one starts with a dot."""
    if not extensions:
        return ()
    out: list[str] = []
    for raw in extensions:
        suffix = str(raw).strip().lower()
        if not suffix:
            continue
        out.append(suffix if suffix.startswith(".") else f".{suffix}")
    return tuple(out)


def _unquote_path(text: str) -> str:
    """Undo git's C-style quoting of unusual path names."""
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return text
    raw = codecs.escape_decode(text[1:-1].encode("utf-8"))[0]
    return raw.decode("utf-8", errors="replace")


def _record_path(status: str, path_text: str) -> str:
    # Renames and copies report "source -> destination"; only the destination is reviewed.
    if ("R" in status or "C" in status) and _RENAME_SEPARATOR in path_text:
        path_text = path_text.split(_RENAME_SEPARATOR, 1)[1]
    return _unquote_path(path_text.strip())


def parse_status(
    raw_status_text: str,
    extensions: Iterable[str] | None = None,
    include_untracked: bool = True,
) -> list[ChangeEntry]:
    """Turn porcelain v1 status output into ordered change entries.

    A path changed in both the index and the worktree yields two entries,
    staged first. Untracked paths (``??``) become ``unversioned`` entries when
    ``include_untracked`` is set. ``extensions`` restricts the result to
    matching file suffixes; an empty filter keeps every path.
    """
    suffixes = _normalize_extensions(extensions)
    entries: list[ChangeEntry] = []
    for line in raw_status_text.splitlines():
        if len(line) < 4:
            continue
        status = line[:2]
        index_state, worktree_state = status[0], status[1]
        path = _record_path(status, line[3:])
        if not path:
            continue
        if suffixes and not path.lower().endswith(suffixes):
            continue

        if status == "??":
            if include_untracked:
                entries.append(ChangeEntry(path=path, status_code="?", staged=False, unversioned=True))
            continue
        if status == "!!":
            continue

        if index_state not in _INACTIVE_MARKERS:
            entries.append(ChangeEntry(path=path, status_code=index_state, staged=True))
        if worktree_state not in _INACTIVE_MARKERS:
            entries.append(ChangeEntry(path=path, status_code=worktree_state, staged=False))
    return entries


def parse_hunk_header(line: str) -> tuple[int, int, int, int] | None:
    """Return ``(old_start, old_count, new_start, new_count)`` for a hunk header.

    Omitted counts default to 1 as in unified diff. Returns ``None`` when the
    line is not a well-formed header.
    """
    match = _HUNK_RE.match(line)
    if match is None:
        return None
    return (
        int(match.group(1)),
        int(match.group(2) or "1"),
        int(match.group(3)),
        int(match.group(4) or "1"),
    )


def _lenient_side(pattern: re.Pattern[str], header: str) -> int:
    match = pattern.search(header)
    if match is None:
        return 1
    return int(match.group(1))


@dataclass
class _HunkBuilder:
    """Accumulates body lines for one hunk while tracking both counters."""

    header: str
    old_start: int
    new_start: int
    old_count: int = 0
    new_count: int = 0
    bounded: bool = True
    lines: list[DiffLine] = field(default_factory=list)
    old_seen: int = 0
    new_seen: int = 0

    @classmethod
    def from_header(cls, header: str) -> _HunkBuilder:
        parsed = parse_hunk_header(header)
        if parsed is None:
            return cls(
                header=header,
                old_start=_lenient_side(_LENIENT_OLD_RE, header),
                new_start=_lenient_side(_LENIENT_NEW_RE, header),
                bounded=False,
            )
        old_start, old_count, new_start, new_count = parsed
        return cls(
            header=header,
            old_start=old_start,
            new_start=new_start,
            old_count=old_count,
            new_count=new_count,
        )

    @property
    def exhausted(self) -> bool:
        return self.bounded and self.old_seen >= self.old_count and self.new_seen >= self.new_count

    def add(self, line: str) -> None:
        marker = line[:1]
        if marker == "+":
            self.lines.append(
                DiffLine(content=line[1:], kind=LineKind.ADDED, new_line_number=self.new_start + self.new_seen)
            )
            self.new_seen += 1
            return
        if marker == "-":
            self.lines.append(
                DiffLine(content=line[1:], kind=LineKind.REMOVED, old_line_number=self.old_start + self.old_seen)
            )
            self.old_seen += 1
            return

        content = line[1:] if marker == " " else line
        self.lines.append(
            DiffLine(
                content=content,
                kind=LineKind.CONTEXT,
                old_line_number=self.old_start + self.old_seen,
                new_line_number=self.new_start + self.new_seen,
            )
        )
        self.old_seen += 1
        self.new_seen += 1

    def build(self) -> Hunk:
        return Hunk(
            header=self.header,
            lines=tuple(self.lines),
            old_start=self.old_start,
            old_count=self.old_count if self.bounded else self.old_seen,
            new_start=self.new_start,
            new_count=self.new_count if self.bounded else self.new_seen,
        )


def _split_diff_lines(text: str) -> list[str]:
    # str.splitlines would also break on form feeds and other separators that
    # can legitimately appear inside source lines.
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_unified_diff(raw_diff_text: str, path: str, staged: bool) -> FileDiff:
    """Parse unified diff text for one file into a ``FileDiff``.

    File headers and anything before the first hunk are discarded. Body lines
    are only consumed while the hunk header's declared ranges have room left,
    so trailing metadata cannot leak into a hunk.
    """
    hunks: list[Hunk] = []
    current: _HunkBuilder | None = None

    for raw_line in _split_diff_lines(raw_diff_text):
        if raw_line.startswith("@@"):
            if current is not None:
                hunks.append(current.build())
            current = _HunkBuilder.from_header(raw_line)
            continue

        if current is None or current.exhausted:
            continue
        # "\ No newline at end of file" annotates the previous line only.
        if raw_line.startswith("\\"):
            continue
        if not current.bounded and raw_line.startswith("diff --git"):
            hunks.append(current.build())
            current = None
            continue
        current.add(raw_line)

    if current is not None:
        hunks.append(current.build())
    return FileDiff(path=path, staged=staged, hunks=tuple(hunks))


def synthesize_new_file_diff(content: str | None, path: str, staged: bool) -> FileDiff:
    """Build a single all-added hunk for a file with no prior revision.

    ``content`` of ``None`` means the file could not be read; the result then
    has no hunks rather than signalling an error.
    """
    if content is None:
        return FileDiff(path=path, staged=staged)

    texts = _split_diff_lines(content)
    lines = tuple(
        DiffLine(content=text, kind=LineKind.ADDED, new_line_number=number)
        for number, text in enumerate(texts, start=1)
    )
    count = len(lines)
    header = f"@@ -0,0 +{1 if count else 0},{count} @@{NEW_FILE_HEADER_SUFFIX}"
    hunk = Hunk(
        header=header,
        lines=lines,
        old_start=0,
        old_count=0,
        new_start=1 if count else 0,
        new_count=count,
    )
    return FileDiff(path=path, staged=staged, hunks=(hunk,))


__all__ = [
    "NEW_FILE_HEADER_SUFFIX",
    "parse_hunk_header",
    "parse_status",
    "parse_unified_diff",
    "synthesize_new_file_diff",
]
