"""File list pane: grouped change rows, cursor model, and rendering."""

from __future__ import annotations

from .model import ListRow, SelectionModel
from .rendering import pane_title, render_file_list

__all__ = ["ListRow", "SelectionModel", "pane_title", "render_file_list"]
