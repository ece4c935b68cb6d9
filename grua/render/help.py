"""Full-screen help modal.

Presentation only: returns frame rows, the caller decides when to write them.
"""

from __future__ import annotations

from ..ansi import display_width, fit_ansi_line
from ..input.bindings import HELP_ITEMS
from ..ui_theme import UITheme

HELP_TITLE = "Keyboard Shortcuts"
HELP_FOOTER = "Press any key to close"


def _styled(style: str, text: str, reset: str) -> str:
    return f"{style}{text}{reset}" if style else text


def help_body_lines(theme: UITheme) -> list[str]:
    key_width = max(display_width(keys) for keys, _desc in HELP_ITEMS)
    lines = [_styled(theme.help_heading, HELP_TITLE, theme.reset), ""]
    for keys, desc in HELP_ITEMS:
        pad = " " * (key_width - display_width(keys))
        lines.append(
            f"{_styled(theme.help_key, keys, theme.reset)}{pad}  {_styled(theme.help_desc, desc, theme.reset)}"
        )
    lines.append("")
    lines.append(_styled(theme.dim, HELP_FOOTER, theme.reset))
    return lines


def render_help_screen(theme: UITheme, width: int, height: int) -> list[str]:
    """Return ``height`` rows with a rounded help box centered on a blank screen."""
    if width <= 0 or height <= 0:
        return []

    body = help_body_lines(theme)
    inner_w = max(display_width(line) for line in body) + 4
    inner_w = max(1, min(inner_w, width - 2))
    box_h = min(len(body) + 4, height)
    x = max(0, (width - inner_w - 2) // 2)
    y = max(0, (height - box_h) // 2)

    box: list[str] = []
    box.append(_styled(theme.help_border, f"╭{'─' * inner_w}╮", theme.reset))
    content = [""] + body + [""]
    for line in content[: max(0, box_h - 2)]:
        cell = fit_ansi_line(f"  {line}", inner_w)
        border = _styled(theme.help_border, "│", theme.reset)
        box.append(f"{border}{cell}{border}")
    if box_h >= 2:
        box.append(_styled(theme.help_border, f"╰{'─' * inner_w}╯", theme.reset))

    out: list[str] = []
    for row in range(height):
        idx = row - y
        if 0 <= idx < len(box):
            out.append(fit_ansi_line(f"{' ' * x}{box[idx]}", width))
        else:
            out.append(" " * width)
    return out


__all__ = ["HELP_FOOTER", "HELP_TITLE", "help_body_lines", "render_help_screen"]
