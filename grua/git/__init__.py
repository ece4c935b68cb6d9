"""Git data model, text parsers, and the subprocess-backed data source."""

from __future__ import annotations

from .models import ChangeEntry, DiffLine, FileDiff, Hunk, LineKind
from .parser import parse_hunk_header, parse_status, parse_unified_diff, synthesize_new_file_diff
from .service import GitService, repository_root

__all__ = [
    "ChangeEntry",
    "DiffLine",
    "FileDiff",
    "GitService",
    "Hunk",
    "LineKind",
    "parse_hunk_header",
    "parse_status",
    "parse_unified_diff",
    "repository_root",
    "synthesize_new_file_diff",
]
