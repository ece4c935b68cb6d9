"""Terminal key decoding and key-binding tables."""

from __future__ import annotations

from .bindings import DEFAULT_KEY_MAP, HELP_ITEMS, STATUS_HINTS, KeyMap
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import parse_mouse_col_row, read_key

__all__ = [
    "DEFAULT_KEY_MAP",
    "HELP_ITEMS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyMap",
    "STATUS_HINTS",
    "parse_mouse_col_row",
    "read_key",
]
