"""Default key map shared by the dispatcher, status bar, and help screen."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyMap:
    up: tuple[str, ...] = ("k", "UP")
    down: tuple[str, ...] = ("j", "DOWN")
    top: tuple[str, ...] = ("g", "HOME")
    bottom: tuple[str, ...] = ("G", "END")
    page_up: tuple[str, ...] = ("CTRL_U", "PAGE_UP")
    page_down: tuple[str, ...] = ("CTRL_D", "PAGE_DOWN")
    switch_pane: tuple[str, ...] = ("TAB", "SHIFT_TAB")
    help: tuple[str, ...] = ("?",)
    quit: tuple[str, ...] = ("q", "CTRL_C")


DEFAULT_KEY_MAP = KeyMap()

# (keys, description) rows for the help screen, in display order.
HELP_ITEMS: tuple[tuple[str, str], ...] = (
    ("j / k / ↑ / ↓", "Navigate up/down"),
    ("g / G", "Jump to top/bottom"),
    ("Ctrl+u / Ctrl+d", "Half page up/down (diff)"),
    ("Tab", "Switch between file list and diff view"),
    ("Mouse wheel", "Scroll the pane under the pointer"),
    ("?", "Toggle this help"),
    ("q / Ctrl+c", "Quit"),
)

# (key, description) hints for the status bar.
STATUS_HINTS: tuple[tuple[str, str], ...] = (
    ("j/k", "up/down"),
    ("Tab", "switch pane"),
    ("g/G", "top/bottom"),
    ("q", "quit"),
    ("?", "help"),
)

__all__ = ["DEFAULT_KEY_MAP", "HELP_ITEMS", "KeyMap", "STATUS_HINTS"]
