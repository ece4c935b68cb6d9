"""Diff pane: rendered diff buffer, scroll state, and pane composition."""

from __future__ import annotations

from .rendering import diff_title, render_diff_lines, render_diff_pane
from .viewport import ViewportController

__all__ = ["ViewportController", "diff_title", "render_diff_lines", "render_diff_pane"]
