"""Per-line syntax highlighting with diff backgrounds.

Pygments colors the code; the added/removed background is then merged into
every SGR sequence so resets inside a token stream cannot drop it, and the
line is padded so the color block spans the whole pane. Any highlighting
failure falls back to a plain tinted rendering instead of propagating.
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .ansi import clip_ansi_line, display_width, expand_tabs, fit_ansi_line
from .config import DEFAULT_STYLE
from .git.models import LineKind
from .text import sanitize_terminal_text
from .ui_theme import UITheme

logger = logging.getLogger(__name__)

_SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")
_FAINT = "2"
_DARK_BASIC_FOREGROUNDS = frozenset({"30", "90"})
_LIFTED_256 = ("38", "5", "246")
_LIFTED_RGB = ("38", "2", "170", "170", "170")


def normalize_style(style: str) -> str:
    """Return ``style`` if Pygments knows it, else the default style."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        return DEFAULT_STYLE
    return style


def _extended_color_span(tokens: list[str], pos: int) -> int:
    """Length of the ``38;5;N`` / ``38;2;R;G;B`` group at ``pos``, or 0."""
    if tokens[pos] not in ("38", "48") or pos + 1 >= len(tokens):
        return 0
    mode = tokens[pos + 1]
    if mode == "5" and pos + 2 < len(tokens):
        return 3
    if mode == "2" and pos + 4 < len(tokens):
        return 5
    return 0


def _is_dim_gray(group: list[str]) -> bool:
    values = group[2:]
    if not all(value.isdigit() for value in values):
        return False
    if len(values) == 1:
        return 232 <= int(values[0]) <= 248
    red, green, blue = (int(value) for value in values)
    return abs(red - green) <= 8 and abs(green - blue) <= 8 and max(red, green, blue) < 190


def lift_dim_foreground(params: str) -> str:
    """Rewrite SGR params so gray or faint code stays readable on a tinted line.

    Gray foregrounds are raised to a mid gray, black foregrounds likewise, and
    the faint attribute is dropped. Backgrounds and other attributes pass
    through untouched.
    """
    tokens = [token for token in params.split(";") if token]
    if not tokens:
        return params

    out: list[str] = []
    pos = 0
    while pos < len(tokens):
        span = _extended_color_span(tokens, pos)
        if span:
            group = tokens[pos : pos + span]
            if group[0] == "38" and _is_dim_gray(group):
                out.extend(_LIFTED_256 if span == 3 else _LIFTED_RGB)
            else:
                out.extend(group)
            pos += span
            continue
        token = tokens[pos]
        if token in _DARK_BASIC_FOREGROUNDS:
            out.extend(_LIFTED_256)
        elif token != _FAINT:
            out.append(token)
        pos += 1
    return ";".join(out)


def apply_line_background(code_line: str, bg_sgr: str, pad: int = 0) -> str:
    """Apply persistent background SGR to an ANSI-coded line, padding ``pad`` cells."""

    def _inject_bg(match: re.Match[str]) -> str:
        params = lift_dim_foreground(match.group(1))
        if params:
            return f"\033[{params};{bg_sgr}m"
        return f"\033[{bg_sgr}m"

    line_with_persistent_bg = _SGR_RE.sub(_inject_bg, code_line)
    return f"\033[{bg_sgr}m{line_with_persistent_bg}{' ' * max(0, pad)}\033[0m"


class DiffHighlighter:
    """Render diff line content for one theme and Pygments style."""

    def __init__(self, theme: UITheme, style: str = DEFAULT_STYLE, no_color: bool = False) -> None:
        self.theme = theme
        self.no_color = no_color
        self.style = DEFAULT_STYLE if no_color else normalize_style(style)
        self._formatter = None if no_color else Terminal256Formatter(style=self.style)
        self._lexers: dict[str, Lexer] = {}

    def _lexer_for(self, path: str) -> Lexer:
        lexer = self._lexers.get(path)
        if lexer is not None:
            return lexer
        name = PurePosixPath(path).name
        try:
            lexer = get_lexer_for_filename(name, stripnl=False, ensurenl=False)
        except ClassNotFound:
            lexer = TextLexer(stripnl=False, ensurenl=False)
        self._lexers[path] = lexer
        return lexer

    def _background_for(self, kind: LineKind) -> str:
        if kind is LineKind.ADDED:
            return self.theme.added_bg
        if kind is LineKind.REMOVED:
            return self.theme.removed_bg
        return ""

    def colorize(self, text: str, path: str) -> str:
        """Return Pygments ANSI output for one line of ``path``."""
        if self._formatter is None:
            return text
        return highlight(text, self._lexer_for(path), self._formatter).rstrip("\n")

    def render(self, text: str, kind: LineKind, width: int, path: str = "") -> str:
        """Return ``text`` highlighted for ``kind`` and filled to ``width`` columns."""
        safe_text = expand_tabs(sanitize_terminal_text(text))
        if self.no_color:
            return clip_ansi_line(safe_text, width)
        try:
            colored = clip_ansi_line(self.colorize(safe_text, path), width)
            gap = width - display_width(colored)
            bg = self._background_for(kind)
            if bg:
                return apply_line_background(colored, bg, gap)
            return f"{colored}{self.theme.reset}"
        except Exception:
            logger.debug("highlighting failed for %s", path, exc_info=True)
            return self.render_plain(safe_text, kind, width)

    def render_plain(self, text: str, kind: LineKind, width: int) -> str:
        """Background-tinted rendering of the unmodified text."""
        bg = self._background_for(kind)
        if not bg:
            return clip_ansi_line(text, width)
        fg = self.theme.added_fg if kind is LineKind.ADDED else self.theme.removed_fg
        return f"\033[{bg}m{fg}{fit_ansi_line(text, width)}\033[0m"

    def render_hunk_header(self, header: str, width: int) -> str:
        body = clip_ansi_line(sanitize_terminal_text(header), width)
        if not self.theme.hunk_header:
            return body
        return f"{self.theme.hunk_header}{body}{self.theme.reset}"


__all__ = ["DiffHighlighter", "apply_line_background", "lift_dim_foreground", "normalize_style"]
