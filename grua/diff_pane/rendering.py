"""Compose diff buffer lines and the diff pane frame.

Each body line is a right-aligned line-number gutter, a one-cell change
marker, and highlighted content. Added/removed rows carry their background
across the marker and content cells up to the pane's full width.
"""

from __future__ import annotations

from ..ansi import display_width, fit_ansi_line
from ..git.models import DiffLine, FileDiff, LineKind
from ..highlight import DiffHighlighter
from ..ui_theme import UITheme

MIN_GUTTER_DIGITS = 4
_MARKERS = {LineKind.ADDED: "+", LineKind.REMOVED: "-", LineKind.CONTEXT: " "}


def gutter_digits(diff: FileDiff) -> int:
    """Width of the line-number column, fixed for the whole diff."""
    largest = 0
    for hunk in diff.hunks:
        for line in hunk.lines:
            number = line.display_number
            if number is not None and number > largest:
                largest = number
    return max(MIN_GUTTER_DIGITS, len(str(largest)))


def _marker_cell(line: DiffLine, theme: UITheme) -> str:
    marker = _MARKERS[line.kind]
    if line.kind is LineKind.ADDED and theme.added_bg:
        return f"\033[{theme.added_bg}m{theme.added_fg}{marker} {theme.reset}"
    if line.kind is LineKind.REMOVED and theme.removed_bg:
        return f"\033[{theme.removed_bg}m{theme.removed_fg}{marker} {theme.reset}"
    return f"{marker} "


def render_diff_lines(diff: FileDiff, highlighter: DiffHighlighter, theme: UITheme, width: int) -> list[str]:
    """Render every hunk of ``diff`` into display lines for a ``width``-column pane."""
    digits = gutter_digits(diff)
    content_width = max(1, width - digits - 3)
    lines: list[str] = []
    for hunk in diff.hunks:
        lines.append(highlighter.render_hunk_header(hunk.header, width))
        lines.append("")
        for line in hunk.lines:
            number = line.display_number
            gutter = f"{number:>{digits}} " if number is not None else " " * (digits + 1)
            if theme.line_number:
                gutter = f"{theme.line_number}{gutter}{theme.reset}"
            content = highlighter.render(line.content, line.kind, content_width, diff.path)
            lines.append(f"{gutter}{_marker_cell(line, theme)}{content}")
        lines.append("")
    return lines


def diff_title(diff: FileDiff | None, unversioned: bool = False) -> str:
    if diff is None:
        return "No file selected"
    if unversioned:
        return f"{diff.path} (untracked)"
    if diff.staged:
        return f"{diff.path} (staged)"
    return diff.path


def render_diff_pane(
    title: str,
    body: list[str],
    message: str,
    theme: UITheme,
    width: int,
    height: int,
    focused: bool,
    position: str = "",
) -> list[str]:
    """Return exactly ``height`` rows: title row, then ``body`` or a dim ``message``."""
    if height <= 0 or width <= 0:
        return []

    style = theme.pane_title_active if focused else theme.pane_title
    right = f"{position} " if position else ""
    left = fit_ansi_line(f" {title}", max(1, width - display_width(right)))
    title_row = fit_ansi_line(f"{left}{right}", width)
    out = [f"{style}{title_row}{theme.reset}" if style else title_row]

    if message:
        text = fit_ansi_line(f" {message}", width)
        out.append(f"{theme.dim}{text}{theme.reset}" if theme.dim else text)
    else:
        for line in body[: height - 1]:
            out.append(fit_ansi_line(line, width))

    while len(out) < height:
        out.append(" " * width)
    return out[:height]


__all__ = ["diff_title", "gutter_digits", "render_diff_lines", "render_diff_pane"]
