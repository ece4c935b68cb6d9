"""Exception types shared across grua.

Git failures surface as ``GitError``; running outside a working tree is the
more specific ``NotARepositoryError`` so the CLI can report it on its own.
"""

from __future__ import annotations


class GruaError(Exception):
    """Base exception for all grua errors."""


class GitError(GruaError):
    """Raised when a git invocation fails or cannot be started."""

    def __init__(self, args: list[str], detail: str = "") -> None:
        self.command = ["git", *args]
        self.detail = detail.strip()
        message = f"{' '.join(self.command)} failed"
        if self.detail:
            message = f"{message}: {self.detail}"
        super().__init__(message)


class NotARepositoryError(GitError):
    """Raised when the current directory is not inside a git working tree."""


class TerminalStartError(GruaError):
    """Raised when the interactive terminal session cannot be set up."""


__all__ = ["GruaError", "GitError", "NotARepositoryError", "TerminalStartError"]
