"""Command-line front door for grua.

Parses CLI options, checks that the working directory is inside a git
working tree, and hands over to the interactive review runtime.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import MIN_REFRESH_SECONDS, load_review_config
from .errors import GitError, NotARepositoryError, TerminalStartError
from .git import repository_root
from .logging_config import setup_logging
from .runtime import run_review
from .ui_theme import available_theme_names

logger = logging.getLogger(__name__)


def _positive_seconds(value: str) -> float:
    """argparse type for refresh intervals."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number of seconds: {value!r}") from exc
    if parsed < MIN_REFRESH_SECONDS:
        raise argparse.ArgumentTypeError(f"interval must be >= {MIN_REFRESH_SECONDS}")
    return parsed


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grua",
        description="Review uncommitted git changes in a live-refreshing terminal dashboard.",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for diff highlighting.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable all color output.")
    parser.add_argument(
        "--interval",
        type=_positive_seconds,
        default=None,
        metavar="SECONDS",
        help="Refresh interval in seconds (default: 10).",
    )
    parser.add_argument(
        "--no-untracked",
        action="store_true",
        help="Hide untracked files.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        metavar="LEVEL",
        help="Write logs at LEVEL to stderr (also GRUA_LOG_LEVEL).",
    )
    return parser


def main(argv: list[str] | None = None, cwd: Path | None = None) -> None:
    """Parse CLI arguments and start a review session.

    ``cwd`` is primarily for tests; when omitted the current working
    directory is used. Every startup failure exits with one diagnostic line.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        repo_root = repository_root(cwd if cwd is not None else Path.cwd())
    except NotARepositoryError as exc:
        logger.debug("repository check failed: %s", exc)
        raise SystemExit("grua: not inside a git working tree") from None
    except GitError as exc:
        raise SystemExit(f"grua: {exc}") from None

    if not _is_interactive():
        raise SystemExit("grua: stdin and stdout must be a terminal")

    config = load_review_config(
        theme=args.theme,
        style=args.style,
        no_color=args.no_color,
        refresh_seconds=args.interval,
        show_untracked=False if args.no_untracked else None,
    )
    try:
        run_review(config, repo_root)
    except TerminalStartError as exc:
        raise SystemExit(f"grua: cannot start terminal session: {exc}") from None


if __name__ == "__main__":
    main()
