"""Render the grouped change list into fixed-size pane rows."""

from __future__ import annotations

import posixpath

from ..ansi import display_width, fit_ansi_line, truncate_plain
from ..git.models import ChangeEntry
from ..text import sanitize_terminal_text
from ..ui_theme import UITheme
from .model import GROUP_STAGED, GROUP_UNSTAGED, ListRow, SelectionModel

_INDENT = "  "
_PLAIN_CURSOR = "> "


def _header_style(theme: UITheme, group: str) -> str:
    if group == GROUP_STAGED:
        return theme.staged_header
    if group == GROUP_UNSTAGED:
        return theme.unstaged_header
    return theme.untracked_header


def pane_title(text: str, width: int, focused: bool, theme: UITheme) -> str:
    style = theme.pane_title_active if focused else theme.pane_title
    body = fit_ansi_line(f" {text}", width)
    if not style:
        return body
    return f"{style}{body}{theme.reset}"


def _format_entry(entry: ChangeEntry, width: int, selected: bool, focused: bool, theme: UITheme) -> str:
    status = entry.status_code
    name_width = max(1, width - len(_INDENT) - len(status) - 1)
    path = sanitize_terminal_text(entry.path)
    basename = posixpath.basename(path) or path
    parent = posixpath.dirname(path)
    name = truncate_plain(basename, name_width)
    room = name_width - display_width(name)
    hint = truncate_plain(f" {parent}/", room) if parent and room > 3 else ""
    gap = " " * max(0, name_width - display_width(name) - display_width(hint))

    if selected:
        style = theme.file_selected if focused else theme.file_selected_inactive
        if not style:
            return fit_ansi_line(f"{_PLAIN_CURSOR}{name}{hint}{gap} {status}", width)
        body = fit_ansi_line(f"{_INDENT}{name}{hint}{gap} {status}", width)
        return f"{style}{body}{theme.reset}"

    hint_text = f"{theme.dim}{hint}{theme.reset}" if hint and theme.dim else hint
    badge = f"{theme.status_badge}{status}{theme.reset}" if theme.status_badge else status
    line = f"{_INDENT}{theme.file_item}{name}{theme.reset}{hint_text}{gap} {badge}"
    return fit_ansi_line(line, width)


def _format_header(row: ListRow, width: int, theme: UITheme) -> str:
    style = _header_style(theme, row.group)
    body = fit_ansi_line(f" {row.label}", width)
    return f"{style}{body}{theme.reset}" if style else body


def render_file_list(
    model: SelectionModel,
    theme: UITheme,
    width: int,
    height: int,
    focused: bool,
    loaded: bool = True,
) -> list[str]:
    """Return exactly ``height`` rows of ``width`` columns for the list pane."""
    if height <= 0 or width <= 0:
        return []

    title = f"Changes ({model.entry_count})" if loaded else "Changes"
    out = [pane_title(title, width, focused, theme)]
    body_rows = height - 1

    if not model.rows:
        message = "Loading..." if not loaded else "No changes"
        text = fit_ansi_line(f" {message}", width)
        out.append(f"{theme.dim}{text}{theme.reset}" if theme.dim else text)
    else:
        start = model.scroll_into_view(body_rows)
        rows = model.rows
        for idx in range(start, min(len(rows), start + body_rows)):
            row = rows[idx]
            if row.entry is not None:
                out.append(_format_entry(row.entry, width, idx == model.cursor, focused, theme))
            else:
                out.append(_format_header(row, width, theme))

    while len(out) < height:
        out.append(" " * width)
    return out[:height]


__all__ = ["pane_title", "render_file_list"]
