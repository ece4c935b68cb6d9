"""ANSI-aware text measurement and line shaping utilities.

Provides clipping and padding that preserve escape sequences.
These helpers keep pane columns aligned when color codes and wide chars are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
RESET = "\033[0m"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return rendered column count of ``text`` ignoring escape sequences."""
    col = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        col += char_display_width(ch, col)
    return col


def expand_tabs(text: str) -> str:
    """Expand tabs against terminal tab stops so later width math is exact."""
    if "\t" not in text:
        return text
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch, col)
        out.append(" " * w if ch == "\t" else ch)
        col += w
    return "".join(out)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if ch == "\t":
            if col + w > max_cols:
                break
            out.append(" " * w)
            col += w
            i += 1
            continue
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    # Keep trailing escapes (typically resets) that follow the last visible cell.
    while i < n and text[i] == "\x1b":
        match = ANSI_ESCAPE_RE.match(text, i)
        if match is None:
            break
        out.append(match.group(0))
        i = match.end()

    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and right-pad it with spaces."""
    if width <= 0:
        return ""
    clipped = clip_ansi_line(text, width)
    gap = width - display_width(clipped)
    if gap > 0:
        return f"{clipped}{' ' * gap}"
    return clipped


def truncate_plain(text: str, width: int, ellipsis: str = "...") -> str:
    """Shorten plain text to ``width`` columns, ending with ``ellipsis`` when cut."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    if width <= len(ellipsis):
        return clip_ansi_line(text, width)
    return clip_ansi_line(text, width - len(ellipsis)) + ellipsis
