"""Git-backed data source for the review dashboard.

Runs git subprocesses and hands raw text to ``grua.git.parser``. All calls
block, so the runtime only invokes them from background fetch workers.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from ..errors import GitError, NotARepositoryError
from ..text import decode_text
from .models import ChangeEntry, FileDiff
from .parser import parse_status, parse_unified_diff, synthesize_new_file_diff

logger = logging.getLogger(__name__)


def _run_git(cwd: Path, args: list[str]) -> subprocess.CompletedProcess[str]:
    """Execute a git subcommand in ``cwd``; failing to start git raises ``GitError``."""
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    try:
        return subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise GitError(args, str(exc)) from exc


def repository_root(cwd: Path | None = None) -> Path:
    """Return the top level of the working tree containing ``cwd``."""
    args = ["rev-parse", "--show-toplevel"]
    proc = _run_git(cwd if cwd is not None else Path.cwd(), args)
    top_level = proc.stdout.strip()
    if proc.returncode != 0 or not top_level:
        raise NotARepositoryError(args, proc.stderr)
    return Path(top_level).resolve()


class GitService:
    """Lists changed files and produces per-file diffs for one repository."""

    def __init__(
        self,
        repo_root: Path,
        extensions: Iterable[str] = (),
        include_untracked: bool = True,
    ) -> None:
        self.repo_root = repo_root
        self.extensions = tuple(extensions)
        self.include_untracked = include_untracked

    def _git(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        proc = _run_git(self.repo_root, args)
        if proc.returncode != 0:
            raise GitError(args, proc.stderr)
        return proc

    def list_changes(self) -> list[ChangeEntry]:
        proc = self._git(["status", "--porcelain=v1", "--untracked-files=all"])
        entries = parse_status(proc.stdout, self.extensions, self.include_untracked)
        logger.debug("status snapshot: %d entries", len(entries))
        return entries

    def get_diff(self, path: str, staged: bool, unversioned: bool = False) -> FileDiff:
        """Return the diff for ``path`` on the index (``staged``) or worktree side.

        Untracked files have nothing to compare against, so their diff is
        synthesized from the worktree content. A staged path git cannot diff
        falls back to the index blob.
        """
        if unversioned:
            return synthesize_new_file_diff(self._read_worktree(path), path, staged=False)

        args = ["diff", "--no-color", "--no-ext-diff"]
        if staged:
            args.append("--cached")
        args.extend(["--", path])
        proc = _run_git(self.repo_root, args)
        if proc.returncode != 0:
            if staged:
                logger.info("staged diff failed for %s, synthesizing from index", path)
                return synthesize_new_file_diff(self._read_index(path), path, staged=True)
            raise GitError(args, proc.stderr)
        return parse_unified_diff(proc.stdout, path, staged)

    def _read_worktree(self, path: str) -> str | None:
        try:
            return decode_text((self.repo_root / path).read_bytes())
        except OSError as exc:
            logger.info("cannot read %s: %s", path, exc)
            return None

    def _read_index(self, path: str) -> str | None:
        proc = _run_git(self.repo_root, ["show", f":{path}"])
        if proc.returncode != 0:
            return None
        return proc.stdout


__all__ = ["GitService", "repository_root"]
