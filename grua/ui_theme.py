"""UI theme definitions and selection helpers.

Themes are ANSI palettes for pane chrome, the file list, and diff backgrounds.
Syntax highlighting style for code remains a separate (Pygments) setting.
A theme is resolved once at startup and passed, read-only, to every renderer.
"""

from __future__ import annotations

from dataclasses import dataclass


def _fg(red: int, green: int, blue: int, bold: bool = False) -> str:
    prefix = "1;" if bold else ""
    return f"\033[{prefix}38;2;{red};{green};{blue}m"


def _bg_params(red: int, green: int, blue: int) -> str:
    return f"48;2;{red};{green};{blue}"


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers.

    ``added_bg``/``removed_bg``/``status_bar_bg`` are bare SGR parameter lists
    (no ``ESC [`` / ``m``) so they can be merged into existing sequences.
    """

    name: str
    reset: str
    reverse: str
    divider: str
    dim: str
    pane_title: str
    pane_title_active: str
    staged_header: str
    unstaged_header: str
    untracked_header: str
    file_item: str
    file_selected: str
    file_selected_inactive: str
    status_badge: str
    line_number: str
    hunk_header: str
    added_fg: str
    removed_fg: str
    added_bg: str
    removed_bg: str
    status_bar_bg: str
    help_key: str
    help_desc: str
    help_heading: str
    help_border: str
    error: str
    logo_gradient: tuple[str, ...] = ()


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    divider=_fg(68, 71, 90),
    dim="\033[3;38;2;98;114;164m",
    pane_title=_fg(255, 215, 0, bold=True),
    pane_title_active="\033[1;7;38;2;189;147;249m",
    staged_header=_fg(255, 121, 198, bold=True),
    unstaged_header=_fg(139, 233, 253, bold=True),
    untracked_header=_fg(241, 250, 140, bold=True),
    file_item=_fg(248, 248, 242),
    file_selected="\033[1;38;2;40;42;54;48;2;189;147;249m",
    file_selected_inactive="\033[38;2;248;248;242;48;2;68;71;90m",
    status_badge=_fg(80, 250, 123),
    line_number=_fg(98, 114, 164),
    hunk_header=_fg(0, 215, 255, bold=True),
    added_fg=_fg(105, 255, 148),
    removed_fg=_fg(255, 107, 107),
    added_bg=_bg_params(27, 75, 27),
    removed_bg=_bg_params(75, 24, 24),
    status_bar_bg=_bg_params(30, 31, 41),
    help_key=_fg(189, 147, 249, bold=True),
    help_desc=_fg(139, 139, 158),
    help_heading=_fg(255, 215, 0, bold=True),
    help_border=_fg(189, 147, 249),
    error=_fg(255, 85, 85, bold=True),
    logo_gradient=(
        _fg(233, 184, 255, bold=True),
        _fg(216, 150, 255, bold=True),
        _fg(199, 120, 255, bold=True),
        _fg(182, 94, 255, bold=True),
        _fg(168, 85, 247, bold=True),
        _fg(147, 51, 234, bold=True),
        _fg(126, 34, 206, bold=True),
    ),
)

CLASSIC_THEME = UITheme(
    name="classic",
    reset="\033[0m",
    reverse="\033[7m",
    divider="\033[2m",
    dim="\033[2;38;5;250m",
    pane_title="\033[1;38;5;229m",
    pane_title_active="\033[1;7;38;5;81m",
    staged_header="\033[1;38;5;42m",
    unstaged_header="\033[1;38;5;214m",
    untracked_header="\033[1;38;5;81m",
    file_item="\033[38;5;252m",
    file_selected="\033[1;7;38;5;81m",
    file_selected_inactive="\033[7m",
    status_badge="\033[38;5;214m",
    line_number="\033[38;5;244m",
    hunk_header="\033[1;38;5;45m",
    added_fg="\033[38;5;42m",
    removed_fg="\033[38;5;203m",
    added_bg="48;5;22",
    removed_bg="48;5;52",
    status_bar_bg="48;5;236",
    help_key="\033[38;5;229m",
    help_desc="\033[38;5;250m",
    help_heading="\033[1;38;5;81m",
    help_border="\033[38;5;45m",
    error="\033[1;38;5;203m",
    logo_gradient=("\033[1;38;5;183m", "\033[1;38;5;141m", "\033[1;38;5;99m"),
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    divider="",
    dim="",
    pane_title="",
    pane_title_active="",
    staged_header="",
    unstaged_header="",
    untracked_header="",
    file_item="",
    file_selected="",
    file_selected_inactive="",
    status_badge="",
    line_number="",
    hunk_header="",
    added_fg="",
    removed_fg="",
    added_bg="",
    removed_bg="",
    status_bar_bg="",
    help_key="",
    help_desc="",
    help_heading="",
    help_border="",
    error="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    CLASSIC_THEME.name: CLASSIC_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "CLASSIC_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
