"""Frame composition and terminal output.

Builds full-screen frames (file list, divider, diff pane, status bar) as a
list of rows, and writes them to stdout in one ``os.write`` call.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from ..ansi import display_width, fit_ansi_line
from ..diff_pane import ViewportController, render_diff_pane
from ..file_list import SelectionModel, render_file_list
from ..input.bindings import STATUS_HINTS
from ..text import sanitize_terminal_text
from ..ui_theme import UITheme
from .help import render_help_screen

LOGO_TEXT = "Gruagach - Change Review Gremlin"
DIVIDER_CHAR = "│"


@dataclass(frozen=True)
class RenderContext:
    """Everything one frame needs; built by the controller on each render."""

    theme: UITheme
    width: int
    height: int
    list_width: int
    selection: SelectionModel
    viewport: ViewportController
    list_focused: bool
    loaded: bool
    diff_title: str
    diff_message: str = ""
    show_help: bool = False
    error: str | None = None


def render_logo(theme: UITheme, text: str = LOGO_TEXT) -> str:
    """Color ``text`` with the theme's gradient, spreading stops evenly over characters."""
    stops = theme.logo_gradient
    if not stops:
        return text
    out: list[str] = []
    for idx, ch in enumerate(text):
        stop = stops[min(len(stops) - 1, idx * len(stops) // len(text))]
        out.append(f"{stop}{ch}")
    out.append(theme.reset)
    return "".join(out)


def _status_hints(theme: UITheme) -> str:
    parts = []
    for key, desc in STATUS_HINTS:
        if theme.help_key:
            parts.append(f"{theme.help_key}{key}{theme.reset}{_bar(theme)} {desc}")
        else:
            parts.append(f"{key} {desc}")
    sep = " • "
    return f" {sep.join(parts)}"


def _bar(theme: UITheme) -> str:
    """Re-open the status bar background after an inner reset."""
    if not theme.status_bar_bg:
        return ""
    return f"\033[{theme.status_bar_bg}m{theme.help_desc}"


def render_status_bar(theme: UITheme, width: int, position: str = "") -> str:
    """Key hints on the left, scroll position and logo on the right."""
    if width <= 0:
        return ""
    left = _status_hints(theme)
    logo = render_logo(theme)
    right_plain = f"{position}  {LOGO_TEXT} " if position else f"{LOGO_TEXT} "
    right = f"{position}  {logo}{_bar(theme)} " if position else f"{logo}{_bar(theme)} "

    if display_width(left) + display_width(right_plain) > width:
        right = ""
    gap = max(0, width - display_width(left) - display_width(right))
    body = fit_ansi_line(f"{_bar(theme)}{left}{_bar(theme)}{' ' * gap}{right}", width)
    return f"{body}{theme.reset}"


def render_error_frame(theme: UITheme, width: int, height: int, error: str) -> list[str]:
    """Inert error screen shown after a fatal fetch failure."""
    if width <= 0 or height <= 0:
        return []
    message = sanitize_terminal_text(" ".join(error.split()))
    text = fit_ansi_line(f" Error: {message}", width)
    hint = fit_ansi_line(" Press q to quit.", width)
    out = [f"{theme.error}{text}{theme.reset}" if theme.error else text]
    if height > 1:
        out.append(f"{theme.dim}{hint}{theme.reset}" if theme.dim else hint)
    while len(out) < height:
        out.append(" " * width)
    return out[:height]


def compose_frame(ctx: RenderContext) -> list[str]:
    """Return exactly ``ctx.height`` rows for the current state."""
    if ctx.error is not None:
        return render_error_frame(ctx.theme, ctx.width, ctx.height, ctx.error)
    if ctx.show_help:
        return render_help_screen(ctx.theme, ctx.width, ctx.height)

    theme = ctx.theme
    pane_rows = max(0, ctx.height - 1)
    diff_width = max(1, ctx.width - ctx.list_width - 1)
    position = ""
    if ctx.viewport.diff is not None and ctx.viewport.max_offset > 0:
        position = f"{ctx.viewport.scroll_percent()}%"

    left = render_file_list(ctx.selection, theme, ctx.list_width, pane_rows, ctx.list_focused, ctx.loaded)
    right = render_diff_pane(
        sanitize_terminal_text(ctx.diff_title),
        ctx.viewport.visible_lines(),
        ctx.diff_message,
        theme,
        diff_width,
        pane_rows,
        not ctx.list_focused,
        position,
    )
    divider = f"{theme.divider}{DIVIDER_CHAR}{theme.reset}" if theme.divider else DIVIDER_CHAR

    rows = [f"{left[idx]}{divider}{right[idx]}" for idx in range(pane_rows)]
    if ctx.height > 0:
        rows.append(render_status_bar(theme, ctx.width))
    return rows[: ctx.height]


def write_frame(rows: Sequence[str], fd: int | None = None) -> None:
    """Write a full frame from the top-left corner, resetting style per row."""
    out: list[str] = ["\033[H"]
    for idx, row in enumerate(rows):
        out.append(row)
        out.append("\033[0m")
        if idx < len(rows) - 1:
            out.append("\r\n")
    target = fd if fd is not None else sys.stdout.fileno()
    os.write(target, "".join(out).encode("utf-8", errors="replace"))


__all__ = [
    "LOGO_TEXT",
    "RenderContext",
    "compose_frame",
    "render_error_frame",
    "render_logo",
    "render_status_bar",
    "write_frame",
]
